"""Pydantic models for the mirroring engine.

Defines the data contracts shared across the sync modules:

- ``SyncAction``: Enum of operations the engine can attempt.
- ``FileStat``: Size and modification time of one file.
- ``SyncResult``: Outcome of one attempted operation.
- ``SyncReport``: Aggregate results for a full sync pass.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class SyncAction(str, Enum):
    """Operations recorded by the engine during a pass."""

    CREATE_DIRECTORY = "create_directory"
    CREATE_FILE = "create_file"
    UPDATE_FILE = "update_file"
    DELETE_FILE = "delete_file"
    DELETE_DIRECTORY = "delete_directory"
    COMPARE = "compare"
    SCAN = "scan"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``"Create file"``."""
        return self.value.replace("_", " ").capitalize()


MUTATING_ACTIONS = frozenset(
    {
        SyncAction.CREATE_DIRECTORY,
        SyncAction.CREATE_FILE,
        SyncAction.UPDATE_FILE,
        SyncAction.DELETE_FILE,
        SyncAction.DELETE_DIRECTORY,
    }
)


class FileStat(BaseModel):
    """Metadata of a single file.

    Attributes:
        size: Length of the file in bytes.
        modified: Last modification time, timezone-aware UTC.
    """

    size: int
    modified: datetime

    model_config = {"frozen": True}


class SyncResult(BaseModel):
    """Outcome of one attempted operation.

    Attributes:
        action: Operation that was attempted.
        path: Target path of the operation (replica side for mutations).
        success: Whether the operation succeeded.
        error: Error detail if the operation failed.
    """

    action: SyncAction
    path: str
    success: bool
    error: str | None = None

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a full sync pass.

    Attributes:
        source: Source root of the pass.
        replica: Replica root of the pass.
        compare_mode: Name of the equality strategy used.
        dry_run: Whether this was a dry-run (no changes applied).
        results: Individual outcomes in the order they were produced.
        started_at: ISO 8601 timestamp when the pass started.
        completed_at: ISO 8601 timestamp when the pass completed.
    """

    source: str
    replica: str
    compare_mode: str
    dry_run: bool = False
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    def _with_action(self, action: SyncAction) -> list[SyncResult]:
        return [r for r in self.results if r.action == action]

    @property
    def created_directories(self) -> list[SyncResult]:
        """Results where action is CREATE_DIRECTORY."""
        return self._with_action(SyncAction.CREATE_DIRECTORY)

    @property
    def created_files(self) -> list[SyncResult]:
        """Results where action is CREATE_FILE."""
        return self._with_action(SyncAction.CREATE_FILE)

    @property
    def updated_files(self) -> list[SyncResult]:
        """Results where action is UPDATE_FILE."""
        return self._with_action(SyncAction.UPDATE_FILE)

    @property
    def deleted_files(self) -> list[SyncResult]:
        """Results where action is DELETE_FILE."""
        return self._with_action(SyncAction.DELETE_FILE)

    @property
    def deleted_directories(self) -> list[SyncResult]:
        """Results where action is DELETE_DIRECTORY."""
        return self._with_action(SyncAction.DELETE_DIRECTORY)

    @property
    def mutations(self) -> list[SyncResult]:
        """Successful create/update/delete results."""
        return [
            r
            for r in self.results
            if r.success and r.action in MUTATING_ACTIONS
        ]

    @property
    def errors(self) -> list[SyncResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]

    def summary(self) -> str:
        """Format a human-readable summary of the sync pass.

        Returns:
            Multi-line summary string with counts by action.
        """
        lines = [
            f"Sync report for '{self.source}' -> '{self.replica}'"
            + (" (dry run)" if self.dry_run else ""),
            f"  Created folders: {len(self.created_directories)}",
            f"  Created files:   {len(self.created_files)}",
            f"  Updated files:   {len(self.updated_files)}",
            f"  Deleted files:   {len(self.deleted_files)}",
            f"  Deleted folders: {len(self.deleted_directories)}",
            f"  Errors:          {len(self.errors)}",
            f"  Total:           {len(self.results)}",
        ]
        return "\n".join(lines)
