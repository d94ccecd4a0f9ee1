"""Run configuration for folder-mirror.

Reads mirroring settings from CLI args, environment variables, .env files,
and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    MIRROR_SOURCE: Source folder path (required)
    MIRROR_REPLICA: Replica folder path (required)
    MIRROR_PERIOD: Synchronization period in seconds (optional, default: 60)
    MIRROR_COMPARE_MODE: "size-time" or "hash" (optional, default: size-time)
    MIRROR_ALLOW_READONLY_MODIFY: Modify read-only replica files (optional, default: false)
    MIRROR_LOG_FILE: Absolute log file path (optional)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .sync.comparer import CompareMode
from .validators import (
    validate_folder,
    validate_log_file,
    validate_sync_period,
)

logger = logging.getLogger(__name__)

DEFAULT_SYNC_PERIOD = 60


@dataclass(frozen=True)
class SyncConfiguration:
    """Settings for one mirroring job; never mutated once built."""

    source: Path
    replica: Path
    sync_period: int = DEFAULT_SYNC_PERIOD
    # Size and modification time by default; "hash" compares MD5 digests.
    compare_mode: CompareMode = CompareMode.SIZE_AND_TIME
    # Read-only replica files are left for a human to change unless this
    # is set, in which case the attribute is cleared before update/delete.
    allow_readonly_modify: bool = False
    log_file: str | None = None


def validate_config(config: SyncConfiguration) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: SyncConfiguration instance to validate.

    Raises:
        ValueError: If a folder is missing, the period is not a positive
            integer, or the log file path is not absolute.
    """
    checks = [
        validate_folder(config.source, "Source folder"),
        validate_folder(config.replica, "Replica folder"),
        validate_sync_period(config.sync_period),
        validate_log_file(config.log_file),
    ]
    for is_valid, message in checks:
        if not is_valid:
            raise ValueError(message)

    if Path(config.source).resolve() == Path(config.replica).resolve():
        raise ValueError(
            f"Source and replica folders must differ: {config.source}"
        )

    if config.allow_readonly_modify:
        logger.warning(
            "Read-only files in the replica folder will be modified "
            "and deleted (allow_readonly_modify=True)."
        )


def load_config(
    source: str | None = None,
    replica: str | None = None,
    sync_period: int | None = None,
    compare_mode: str | None = None,
    allow_readonly_modify: bool = False,
    log_file: str | None = None,
    yaml_fallbacks: dict | None = None,
) -> SyncConfiguration:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        source: Override source folder.
        replica: Override replica folder.
        sync_period: Override synchronization period in seconds.
        compare_mode: Override equality strategy ("size-time" or "hash").
        allow_readonly_modify: Allow modifying read-only replica files
            (CLI flag).
        log_file: Override log file path.
        yaml_fallbacks: Dict of values from YAML config file ``mirror``
            section.  Used as fallback when CLI arg and env var are unset.

    Returns:
        Validated SyncConfiguration instance.

    Raises:
        ValueError: If a required folder is missing after checking all
            sources, or any value is invalid.
    """
    fb = yaml_fallbacks or {}

    # --- Path fields: CLI > env > YAML > error ---

    final_source = source or os.getenv("MIRROR_SOURCE") or fb.get("source")
    if not final_source:
        raise ValueError(
            "Source folder not found. Set MIRROR_SOURCE environment variable, "
            "pass the SOURCE argument, or add 'source' to config.yml."
        )

    final_replica = (
        replica or os.getenv("MIRROR_REPLICA") or fb.get("replica")
    )
    if not final_replica:
        raise ValueError(
            "Replica folder not found. Set MIRROR_REPLICA environment variable, "
            "pass the REPLICA argument, or add 'replica' to config.yml."
        )

    # --- Numeric fields: CLI > env > YAML > default ---

    if sync_period is not None:
        raw_period: object = sync_period
    elif os.getenv("MIRROR_PERIOD") is not None:
        raw_period = os.getenv("MIRROR_PERIOD")
    else:
        raw_period = fb.get("period", DEFAULT_SYNC_PERIOD)

    is_valid, message = validate_sync_period(raw_period)
    if not is_valid:
        raise ValueError(message)
    final_period = int(str(raw_period).strip())

    # --- Enum fields: CLI > env > YAML > default ---

    raw_mode = (
        compare_mode
        or os.getenv("MIRROR_COMPARE_MODE")
        or fb.get("compare_mode")
        or CompareMode.SIZE_AND_TIME.value
    )
    try:
        final_mode = CompareMode(raw_mode)
    except ValueError:
        valid = ", ".join(m.value for m in CompareMode)
        raise ValueError(
            f"Invalid compare mode '{raw_mode}': must be one of {valid}"
        ) from None

    # --- Boolean fields: CLI > env > YAML > default ---

    def get_bool_env(key: str) -> bool | None:
        """Return True/False from env var, or None if unset."""
        val = os.getenv(key)
        if val is None:
            return None
        return val.lower() in ("true", "1", "yes", "on")

    if allow_readonly_modify:
        final_allow = True
    else:
        env_allow = get_bool_env("MIRROR_ALLOW_READONLY_MODIFY")
        if env_allow is not None:
            final_allow = env_allow
        else:
            final_allow = bool(fb.get("allow_readonly_modify", False))

    # --- Optional fields: CLI > env > YAML > None ---

    final_log_file = (
        log_file or os.getenv("MIRROR_LOG_FILE") or fb.get("log_file")
    )

    config = SyncConfiguration(
        source=Path(str(final_source).strip()).expanduser(),
        replica=Path(str(final_replica).strip()).expanduser(),
        sync_period=final_period,
        compare_mode=final_mode,
        allow_readonly_modify=final_allow,
        log_file=final_log_file,
    )

    validate_config(config)

    return config
