"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync passes:

- ``format_sync_report`` -- full post-sync summary.
- ``format_dry_run_preview`` -- dry-run preview grouped by action.
- ``report_to_json`` -- structured dict for JSON output.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncReport, SyncResult

from .models import SyncAction

# Display order follows the phase order of the engine.
_DISPLAY_ORDER = [
    SyncAction.CREATE_DIRECTORY,
    SyncAction.CREATE_FILE,
    SyncAction.UPDATE_FILE,
    SyncAction.DELETE_FILE,
    SyncAction.DELETE_DIRECTORY,
]

_SECTION_TITLES = {
    SyncAction.CREATE_DIRECTORY: "Created folders:",
    SyncAction.CREATE_FILE: "Created files:",
    SyncAction.UPDATE_FILE: "Updated files:",
    SyncAction.DELETE_FILE: "Deleted files:",
    SyncAction.DELETE_DIRECTORY: "Deleted folders:",
}

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one successful
    result.  Failures are listed together under ``Errors:``.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    # Header
    header = f"Sync report for '{report.source}' -> '{report.replica}'"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Compare mode: {report.compare_mode}")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    succeeded: dict[SyncAction, list[SyncResult]] = defaultdict(list)
    for r in report.results:
        if r.success:
            succeeded[r.action].append(r)

    created = len(succeeded[SyncAction.CREATE_DIRECTORY]) + len(
        succeeded[SyncAction.CREATE_FILE]
    )
    deleted = len(succeeded[SyncAction.DELETE_FILE]) + len(
        succeeded[SyncAction.DELETE_DIRECTORY]
    )
    lines.append(
        f"Applied {len(report.mutations)} changes: "
        f"{created} created, "
        f"{len(succeeded[SyncAction.UPDATE_FILE])} updated, "
        f"{deleted} deleted, {len(report.errors)} errors"
    )
    lines.append("")

    for action in _DISPLAY_ORDER:
        if not succeeded[action]:
            continue
        lines.append(_SECTION_TITLES[action])
        for r in succeeded[action]:
            lines.append(f"  {r.path}")
        lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  [{r.action.label}] {r.path}: {r.error}")
        lines.append("")

    if not report.results:
        lines.append("Replica is up to date.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by action type.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Source:  {report.source}")
    lines.append(f"Replica: {report.replica}")
    lines.append("")

    groups: dict[SyncAction, list[str]] = defaultdict(list)
    for r in report.results:
        if r.success:
            groups[r.action].append(r.path)

    for action in _DISPLAY_ORDER:
        if action not in groups:
            continue
        label = action.value.upper().replace("_", " ")
        lines.append(f"[{label}]")
        for path in groups[action]:
            lines.append(f"  {path}")
        lines.append("")

    if report.errors:
        lines.append("[BLOCKED]")
        for r in report.errors:
            lines.append(f"  {r.path}: {r.error}")
        lines.append("")

    if not report.results:
        lines.append("No changes needed.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with pass info, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "action": r.action.value,
            "path": r.path,
            "success": r.success,
        }
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "source": report.source,
        "replica": report.replica,
        "compare_mode": report.compare_mode,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "created_directories": len(report.created_directories),
            "created_files": len(report.created_files),
            "updated_files": len(report.updated_files),
            "deleted_files": len(report.deleted_files),
            "deleted_directories": len(report.deleted_directories),
            "errors": len(report.errors),
        },
        "results": results_list,
    }
