"""One-way directory mirroring engine.

Public API for keeping a replica directory tree identical to a source tree.

Architecture
------------
Each pass is a **five-phase reconciliation**: create missing directories,
create missing files, update changed files, delete extra files, delete
extra directories.  Each phase walks the whole tree before the next one
starts.  Nothing is remembered between passes.

Modules:

- ``engine``     -- ``SyncEngine``: runs a full pass, ``RootNotFoundError``.
- ``filesystem`` -- ``FileSystem`` protocol and ``LocalFileSystem``.
- ``comparer``   -- ``CompareMode`` and the size/time and MD5 strategies.
- ``models``     -- ``SyncAction``, ``FileStat``, ``SyncResult``,
  ``SyncReport``: core data contracts.
- ``reporter``   -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from folder_mirror.config import SyncConfiguration
    from folder_mirror.sync import LocalFileSystem, SyncEngine
    from folder_mirror.sync import format_sync_report

    config = SyncConfiguration(
        source=Path("/data/source"),
        replica=Path("/backup/replica"),
        sync_period=60,
    )
    engine = SyncEngine(LocalFileSystem(), config)

    # Preview first
    preview = engine.synchronize(dry_run=True)

    report = engine.synchronize()
    print(format_sync_report(report))
"""

from .comparer import CompareMode, files_equal
from .engine import ReadOnlyFileError, RootNotFoundError, SyncEngine
from .filesystem import FileSystem, LocalFileSystem
from .models import FileStat, SyncAction, SyncReport, SyncResult
from .reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

__all__ = [
    "CompareMode",
    "FileStat",
    "FileSystem",
    "LocalFileSystem",
    "ReadOnlyFileError",
    "RootNotFoundError",
    "SyncAction",
    "SyncEngine",
    "SyncReport",
    "SyncResult",
    "files_equal",
    "format_dry_run_preview",
    "format_sync_report",
    "report_to_json",
]
