"""Startup configuration assembly for the folder-mirror process."""

import logging
import sys
from typing import Any

import yaml
from dotenv import load_dotenv

from .config import SyncConfiguration, load_config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import UnifiedConfig, build_config, to_fallbacks

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback."""
    print(msg, file=sys.stderr, flush=True)


def load_file_config() -> UnifiedConfig:
    """Load .env and any YAML config files into a ``UnifiedConfig``.

    ``.env`` is loaded first so that ``${VAR}`` interpolation in the YAML
    files can use its values.

    Raises:
        RuntimeError: If a config file cannot be read, is not valid YAML,
            or holds values the schema rejects.
    """
    load_dotenv()
    try:
        return build_config(load_hierarchical_config())
    except (ValueError, OSError, yaml.YAMLError) as e:
        # pydantic.ValidationError is a ValueError
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e


def resolve_configuration(
    config_overrides: dict[str, Any] | None = None,
    file_config: UnifiedConfig | None = None,
) -> SyncConfiguration:
    """Build the validated ``SyncConfiguration`` for this process.

    Sources are merged via ``load_config()`` with the precedence
    CLI > env vars (.env loaded first) > YAML config > defaults.

    Args:
        config_overrides: Optional dict with values from the CLI (source,
            replica, period, compare_mode, allow_readonly_modify, log_file).
        file_config: Already-loaded file configuration.  Loaded here when
            omitted.

    Returns:
        The validated configuration.

    Raises:
        RuntimeError: If configuration is missing or invalid.
    """
    sources = []
    try:
        if file_config is None:
            file_config = load_file_config()

        config_files = discover_config_files()
        if config_files:
            sources.append(f"config file: {config_files[0]}")

        overrides = config_overrides or {}
        config = load_config(
            source=overrides.get("source"),
            replica=overrides.get("replica"),
            sync_period=overrides.get("period"),
            compare_mode=overrides.get("compare_mode"),
            allow_readonly_modify=overrides.get(
                "allow_readonly_modify", False
            ),
            log_file=overrides.get("log_file"),
            yaml_fallbacks=to_fallbacks(file_config),
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    if config_overrides:
        sources.append("CLI arguments")
    sources.append("environment variables")
    logger.info("Configuration loaded from: %s", ", ".join(sources))
    logger.info(
        "Mirroring %s -> %s every %ds (compare mode: %s)",
        config.source,
        config.replica,
        config.sync_period,
        config.compare_mode.value,
    )

    return config
