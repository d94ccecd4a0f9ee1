"""Core sync engine that mirrors a source tree onto a replica tree.

The ``SyncEngine`` performs one full pass in five sequential phases.  Each
phase is a complete recursive walk before the next one starts, so every
replica directory exists before any file is copied into it:

1. Create replica directories missing for source directories.
2. Copy source files missing from the replica.
3. Overwrite replica files that differ from their source file.
4. Delete replica files that have no source file.
5. Delete replica directories that have no source directory (recursively).

Every phase descends into the subdirectories listed on the source side.
A directory that exists only in the replica is removed as a unit in
phase 5 and never descended into.

Error handling is per-entry: a single failure is recorded as a
``SyncResult`` and the walk continues.  Only a missing root raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from folder_mirror.sync.comparer import files_equal
from folder_mirror.sync.models import SyncAction, SyncReport, SyncResult

if TYPE_CHECKING:
    from folder_mirror.config import SyncConfiguration
    from folder_mirror.sync.filesystem import FileSystem

logger = logging.getLogger(__name__)


class RootNotFoundError(FileNotFoundError):
    """Raised when the source or replica root directory does not exist.

    Attributes:
        side: ``"source"`` or ``"replica"``.
        root: The missing path.
    """

    def __init__(self, side: str, root: Path) -> None:
        self.side = side
        self.root = root
        super().__init__(
            f"{side.capitalize()} folder {root} does not exist."
        )


class ReadOnlyFileError(PermissionError):
    """A read-only replica file may not be modified under the current policy."""


@dataclass
class _PassContext:
    """Mutable bookkeeping for a single ``synchronize()`` call."""

    dry_run: bool
    results: list[SyncResult] = field(default_factory=list)
    failed_scans: set[str] = field(default_factory=set)


_Phase = Callable[[_PassContext, Path, Path], None]


class SyncEngine:
    """Mirror a source directory tree onto a replica directory tree.

    The engine holds no state between calls; every pass rediscovers both
    trees through the filesystem capability.

    Args:
        fs: Filesystem capability used for every listing and mutation.
        config: Run settings (equality mode, read-only policy, roots).
    """

    def __init__(self, fs: FileSystem, config: SyncConfiguration) -> None:
        self.fs = fs
        self.config = config

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def synchronize(
        self,
        source_root: Path | None = None,
        replica_root: Path | None = None,
        dry_run: bool = False,
    ) -> SyncReport:
        """Execute a full sync pass.

        Args:
            source_root: Authoritative tree.  Defaults to ``config.source``.
            replica_root: Tree to bring in line.  Defaults to
                ``config.replica``.
            dry_run: If ``True``, record what would be done without
                mutating anything.

        Returns:
            A ``SyncReport`` with one result per attempted operation.

        Raises:
            RootNotFoundError: If either root directory does not exist.
        """
        source_root = Path(source_root or self.config.source)
        replica_root = Path(replica_root or self.config.replica)
        started_at = datetime.now(timezone.utc).isoformat()

        if not self.fs.directory_exists(source_root):
            raise RootNotFoundError("source", source_root)
        if not self.fs.directory_exists(replica_root):
            raise RootNotFoundError("replica", replica_root)

        logger.debug(
            "Synchronizing %s -> %s (mode=%s, dry_run=%s)",
            source_root,
            replica_root,
            self.config.compare_mode.value,
            dry_run,
        )

        ctx = _PassContext(dry_run=dry_run)
        phases: list[_Phase] = [
            self._create_directories,
            self._create_files,
            self._update_files,
            self._delete_files,
            self._delete_directories,
        ]
        for phase in phases:
            phase(ctx, source_root, replica_root)

        return SyncReport(
            source=str(source_root),
            replica=str(replica_root),
            compare_mode=self.config.compare_mode.value,
            dry_run=dry_run,
            results=ctx.results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _create_directories(
        self, ctx: _PassContext, source_dir: Path, replica_dir: Path
    ) -> None:
        subdirs = self._scan(ctx, source_dir, self.fs.list_directories)
        for source in subdirs:
            target = self._counterpart(source, replica_dir)
            if self.fs.directory_exists(target):
                continue
            self._attempt(
                ctx,
                SyncAction.CREATE_DIRECTORY,
                target,
                lambda target=target: self.fs.create_directory(target),
            )
        self._descend(
            ctx, subdirs, replica_dir, self._create_directories
        )

    def _create_files(
        self, ctx: _PassContext, source_dir: Path, replica_dir: Path
    ) -> None:
        for source in self._scan(ctx, source_dir, self.fs.list_files):
            target = self._counterpart(source, replica_dir)
            if self.fs.file_exists(target):
                continue
            self._attempt(
                ctx,
                SyncAction.CREATE_FILE,
                target,
                lambda source=source, target=target: self.fs.copy_file(
                    source, target
                ),
            )
        subdirs = self._scan(ctx, source_dir, self.fs.list_directories)
        self._descend(ctx, subdirs, replica_dir, self._create_files)

    def _update_files(
        self, ctx: _PassContext, source_dir: Path, replica_dir: Path
    ) -> None:
        for source in self._scan(ctx, source_dir, self.fs.list_files):
            target = self._counterpart(source, replica_dir)
            if not self.fs.file_exists(target):
                continue
            if not self._needs_update(ctx, source, target):
                continue
            self._attempt(
                ctx,
                SyncAction.UPDATE_FILE,
                target,
                lambda source=source, target=target: self.fs.copy_file(
                    source, target, overwrite=True
                ),
                check=self._readonly_gate(ctx, SyncAction.UPDATE_FILE, target),
            )
        subdirs = self._scan(ctx, source_dir, self.fs.list_directories)
        self._descend(ctx, subdirs, replica_dir, self._update_files)

    def _delete_files(
        self, ctx: _PassContext, source_dir: Path, replica_dir: Path
    ) -> None:
        if self.fs.directory_exists(replica_dir):
            for target in self._scan(ctx, replica_dir, self.fs.list_files):
                source = self._counterpart(target, source_dir)
                if self.fs.file_exists(source):
                    continue
                self._attempt(
                    ctx,
                    SyncAction.DELETE_FILE,
                    target,
                    lambda target=target: self.fs.delete_file(target),
                    check=self._readonly_gate(
                        ctx, SyncAction.DELETE_FILE, target
                    ),
                )
        subdirs = self._scan(ctx, source_dir, self.fs.list_directories)
        self._descend(ctx, subdirs, replica_dir, self._delete_files)

    def _delete_directories(
        self, ctx: _PassContext, source_dir: Path, replica_dir: Path
    ) -> None:
        if self.fs.directory_exists(replica_dir):
            for target in self._scan(
                ctx, replica_dir, self.fs.list_directories
            ):
                source = self._counterpart(target, source_dir)
                if self.fs.directory_exists(source):
                    continue
                self._attempt(
                    ctx,
                    SyncAction.DELETE_DIRECTORY,
                    target,
                    lambda target=target: self.fs.delete_directory(target),
                )
        subdirs = self._scan(ctx, source_dir, self.fs.list_directories)
        self._descend(ctx, subdirs, replica_dir, self._delete_directories)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _counterpart(self, path: Path, other_dir: Path) -> Path:
        """Path with the same entry name as *path* inside *other_dir*."""
        return self.fs.join(other_dir, self.fs.name(path))

    def _descend(
        self,
        ctx: _PassContext,
        source_subdirs: list[Path],
        replica_dir: Path,
        phase: _Phase,
    ) -> None:
        """Run *phase* on each source subdirectory and its replica twin."""
        for source_subdir in source_subdirs:
            phase(
                ctx,
                source_subdir,
                self._counterpart(source_subdir, replica_dir),
            )

    def _scan(
        self,
        ctx: _PassContext,
        directory: Path,
        lister: Callable[[Path], list[Path]],
    ) -> list[Path]:
        """List *directory*; a listing failure is recorded and yields ``[]``.

        Every phase lists the same source directories again, so a folder
        that cannot be read is reported once per pass.
        """
        try:
            return list(lister(directory))
        except Exception as exc:
            key = str(directory)
            if key in ctx.failed_scans:
                logger.debug(
                    "Scan folder %s - failed again: %s", directory, exc
                )
                return []
            ctx.failed_scans.add(key)
            logger.error("Scan folder %s - failed: %s", directory, exc)
            ctx.results.append(
                SyncResult(
                    action=SyncAction.SCAN,
                    path=key,
                    success=False,
                    error=str(exc),
                )
            )
            return []

    def _needs_update(
        self, ctx: _PassContext, source: Path, target: Path
    ) -> bool:
        """Decide whether *target* must be overwritten from *source*.

        A comparison error counts as "equal" for this pass and is recorded.
        """
        try:
            return not files_equal(
                self.config.compare_mode, self.fs, source, target
            )
        except Exception as exc:
            logger.error(
                "Error checking equality of %s and %s files: %s",
                source,
                target,
                exc,
            )
            ctx.results.append(
                SyncResult(
                    action=SyncAction.COMPARE,
                    path=str(target),
                    success=False,
                    error=str(exc),
                )
            )
            return False

    def _readonly_gate(
        self, ctx: _PassContext, action: SyncAction, target: Path
    ) -> Callable[[], None]:
        """Build the read-only check run before updating or deleting *target*.

        The check raises ``ReadOnlyFileError`` when the replica file is
        read-only and modification is not allowed; otherwise it clears the
        attribute (outside dry runs) so the mutation can proceed.
        """

        def check() -> None:
            if not self.fs.is_readonly(target):
                return
            if not self.config.allow_readonly_modify:
                verb = (
                    "modify"
                    if action == SyncAction.UPDATE_FILE
                    else "delete"
                )
                raise ReadOnlyFileError(
                    f"cannot {verb} read-only file {target}"
                )
            if not ctx.dry_run:
                self.fs.clear_readonly(target)

        return check

    def _attempt(
        self,
        ctx: _PassContext,
        action: SyncAction,
        target: Path,
        mutate: Callable[[], None],
        check: Callable[[], None] | None = None,
    ) -> None:
        """Run one operation and record its outcome.

        *check* runs in dry runs too, so policy refusals show up in a
        preview; *mutate* only runs for real passes.
        """
        try:
            if check is not None:
                check()
            if not ctx.dry_run:
                mutate()
        except Exception as exc:
            logger.error("%s %s - failed: %s", action.label, target, exc)
            ctx.results.append(
                SyncResult(
                    action=action,
                    path=str(target),
                    success=False,
                    error=str(exc),
                )
            )
            return

        if ctx.dry_run:
            logger.info("%s %s - dry run", action.label, target)
        else:
            logger.info("%s %s - success", action.label, target)
        ctx.results.append(
            SyncResult(action=action, path=str(target), success=True)
        )
