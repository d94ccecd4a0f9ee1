"""Filesystem capability consumed by the sync engine.

The engine never touches ``os`` or ``shutil`` directly; every listing,
metadata read and mutation goes through an object satisfying the
``FileSystem`` protocol.  ``LocalFileSystem`` is the implementation backed
by the operating system.
"""

from __future__ import annotations

import os
import shutil
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Protocol

from folder_mirror.sync.models import FileStat

# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class FileSystem(Protocol):
    """Protocol that all filesystem implementations must satisfy."""

    def list_directories(self, path: Path) -> list[Path]:
        """Return the immediate child directories of *path*."""
        ...  # pragma: no cover

    def list_files(self, path: Path) -> list[Path]:
        """Return the immediate child files of *path*."""
        ...  # pragma: no cover

    def directory_exists(self, path: Path) -> bool: ...  # pragma: no cover

    def file_exists(self, path: Path) -> bool: ...  # pragma: no cover

    def stat(self, path: Path) -> FileStat:
        """Return size and UTC modification time of the file at *path*."""
        ...  # pragma: no cover

    def name(self, path: Path) -> str:
        """Return the last component of *path*."""
        ...  # pragma: no cover

    def join(self, parent: Path, name: str) -> Path: ...  # pragma: no cover

    def create_directory(self, path: Path) -> None: ...  # pragma: no cover

    def copy_file(
        self, source: Path, target: Path, overwrite: bool = False
    ) -> None:
        """Copy the bytes of *source* to *target*.

        Raises:
            FileExistsError: If *target* exists and *overwrite* is false.
        """
        ...  # pragma: no cover

    def open_binary(self, path: Path) -> BinaryIO: ...  # pragma: no cover

    def delete_file(self, path: Path) -> None: ...  # pragma: no cover

    def delete_directory(self, path: Path) -> None:
        """Delete *path* and everything beneath it."""
        ...  # pragma: no cover

    def is_readonly(self, path: Path) -> bool: ...  # pragma: no cover

    def clear_readonly(self, path: Path) -> None: ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Local implementation
# ---------------------------------------------------------------------------


class LocalFileSystem:
    """``FileSystem`` backed by the local operating system.

    Read-only status is the owner-write permission bit, which is also how
    Python maps the Windows read-only attribute.
    """

    def list_directories(self, path: Path) -> list[Path]:
        with os.scandir(path) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_dir(follow_symlinks=False)
            ]

    def list_files(self, path: Path) -> list[Path]:
        with os.scandir(path) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_file(follow_symlinks=False)
            ]

    def directory_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def file_exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def stat(self, path: Path) -> FileStat:
        st = os.stat(path)
        return FileStat(
            size=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    def name(self, path: Path) -> str:
        return Path(path).name

    def join(self, parent: Path, name: str) -> Path:
        return Path(parent) / name

    def create_directory(self, path: Path) -> None:
        os.mkdir(path)

    def copy_file(
        self, source: Path, target: Path, overwrite: bool = False
    ) -> None:
        if not overwrite and os.path.lexists(target):
            raise FileExistsError(f"Target file already exists: {target}")
        shutil.copyfile(source, target)
        # Carry the modification time so size/time comparison sees the
        # pair as equal next cycle; permission bits are left alone.
        st = os.stat(source)
        os.utime(target, ns=(st.st_atime_ns, st.st_mtime_ns))

    def open_binary(self, path: Path) -> BinaryIO:
        return open(path, "rb")

    def delete_file(self, path: Path) -> None:
        os.remove(path)

    def delete_directory(self, path: Path) -> None:
        _make_tree_writable(Path(path))
        shutil.rmtree(path)

    def is_readonly(self, path: Path) -> bool:
        return not os.stat(path).st_mode & stat.S_IWRITE

    def clear_readonly(self, path: Path) -> None:
        mode = os.stat(path).st_mode
        os.chmod(path, stat.S_IMODE(mode) | stat.S_IWRITE)


def _make_tree_writable(root: Path) -> None:
    """Grant owner write on every entry under *root* so removal succeeds."""
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            entry = os.path.join(dirpath, name)
            if os.path.islink(entry):
                continue
            mode = os.stat(entry).st_mode
            if not mode & stat.S_IWRITE:
                os.chmod(entry, stat.S_IMODE(mode) | stat.S_IWRITE)
    mode = os.stat(root).st_mode
    if not mode & stat.S_IWRITE:
        os.chmod(root, stat.S_IMODE(mode) | stat.S_IWRITE)
