"""Unified configuration schema for folder_mirror.

Defines Pydantic models for the config file structure with dedicated
sections for the mirroring job and logging.  Includes an adapter that
turns the validated file sections into fallback values for
``load_config()``.

Usage:
    from folder_mirror.config_schema import build_config, to_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    fallbacks = to_fallbacks(unified)
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

from .sync.comparer import CompareMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class MirrorConfig(BaseModel):
    """Mirroring job settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    source: str | None = Field(
        default=None, description="Source folder path"
    )
    replica: str | None = Field(
        default=None, description="Replica folder path"
    )
    period: int | None = Field(
        default=None,
        ge=1,
        description="Synchronization period in seconds",
    )
    compare_mode: CompareMode | None = Field(
        default=None,
        description="File equality strategy: size-time or hash",
    )
    allow_readonly_modify: bool = Field(
        default=False,
        description="Clear the read-only attribute of replica files "
        "before updating or deleting them",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``"text"`` or ``"json"`` line format.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    mirror: MirrorConfig = Field(default_factory=MirrorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully: anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> load_config() fallbacks
# ---------------------------------------------------------------------------


def to_fallbacks(unified: UnifiedConfig) -> dict:
    """Flatten a ``UnifiedConfig`` into the ``yaml_fallbacks`` dict
    accepted by ``load_config()``.

    Unset (``None``) values are dropped so they never shadow built-in
    defaults.

    Args:
        unified: The unified config produced by ``build_config()``.

    Returns:
        Dict with keys among source, replica, period, compare_mode,
        allow_readonly_modify, log_file.
    """
    fallbacks = {
        k: v
        for k, v in unified.mirror.model_dump(mode="json").items()
        if v is not None
    }
    if unified.logging.file:
        fallbacks["log_file"] = unified.logging.file
    return fallbacks
