"""Periodic runner that repeats sync passes on a fixed interval."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .config import SyncConfiguration
    from .sync.engine import SyncEngine
    from .sync.models import SyncReport

logger = logging.getLogger(__name__)


def run_cycle(
    engine: SyncEngine, config: SyncConfiguration
) -> SyncReport | None:
    """Run one pass, logging instead of raising on failure.

    Returns:
        The pass report, or ``None`` if the pass could not run (for
        example because a root folder is missing).
    """
    try:
        report = engine.synchronize(config.source, config.replica)
    except Exception as exc:
        logger.error("Synchronization cycle failed: %s", exc)
        return None

    if report.errors:
        logger.warning(
            "Cycle finished with %d errors (%d changes applied)",
            len(report.errors),
            len(report.mutations),
        )
    else:
        logger.info(
            "Cycle finished: %d changes applied", len(report.mutations)
        )
    logger.debug(report.summary())
    return report


def run_periodic(
    engine: SyncEngine,
    config: SyncConfiguration,
    max_cycles: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    on_report: Callable[[SyncReport], None] | None = None,
) -> int:
    """Run sync passes every ``config.sync_period`` seconds.

    A failing cycle is logged and the loop moves on to the next one; the
    loop itself never stops on errors.  There is no sleep after the last
    cycle when *max_cycles* is reached.

    Args:
        engine: The engine to drive.
        config: Provides the roots and the period.
        max_cycles: Stop after this many cycles (``None`` runs forever).
        sleep: Sleep function, replaceable in tests.
        on_report: Called with each successful cycle's report.

    Returns:
        Number of cycles run.
    """
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        cycles += 1
        logger.debug("Starting synchronization cycle %d", cycles)
        report = run_cycle(engine, config)
        if report is not None and on_report is not None:
            on_report(report)

        if max_cycles is not None and cycles >= max_cycles:
            break
        sleep(config.sync_period)

    return cycles
