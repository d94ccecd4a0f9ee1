"""File equality strategies for the update phase.

Two strategies decide whether a source file and its replica counterpart
hold the same content:

- ``CompareMode.SIZE_AND_TIME``: byte length and UTC modification time
  must both match.  Fast, but blind to same-size same-timestamp edits.
- ``CompareMode.CONTENT_HASH``: MD5 digest of the full byte stream of each
  file must match.  MD5 is used for speed, not for any security property.

``files_equal()`` dispatches a mode to its comparison function.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .filesystem import FileSystem

_CHUNK_SIZE = 1024 * 1024


class CompareMode(str, Enum):
    """Closed set of equality strategies."""

    SIZE_AND_TIME = "size-time"
    CONTENT_HASH = "hash"


def size_and_time_equal(fs: FileSystem, first: Path, second: Path) -> bool:
    """Return ``True`` if both files have the same size and mtime."""
    first_stat = fs.stat(first)
    second_stat = fs.stat(second)
    return (
        first_stat.size == second_stat.size
        and first_stat.modified == second_stat.modified
    )


def file_digest(fs: FileSystem, path: Path) -> bytes:
    """Compute the MD5 digest of the file at *path*, reading in chunks."""
    md5 = hashlib.md5(usedforsecurity=False)
    with fs.open_binary(path) as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            md5.update(chunk)
    return md5.digest()


def content_hash_equal(fs: FileSystem, first: Path, second: Path) -> bool:
    """Return ``True`` if both files have the same MD5 digest."""
    return file_digest(fs, first) == file_digest(fs, second)


_STRATEGY_MAP: dict[
    CompareMode, Callable[[FileSystem, Path, Path], bool]
] = {
    CompareMode.SIZE_AND_TIME: size_and_time_equal,
    CompareMode.CONTENT_HASH: content_hash_equal,
}


def files_equal(
    mode: CompareMode, fs: FileSystem, first: Path, second: Path
) -> bool:
    """Compare two existing files with the strategy selected by *mode*.

    Errors raised while reading metadata or content propagate to the
    caller.

    Raises:
        ValueError: If *mode* is not a known ``CompareMode``.
    """
    func = _STRATEGY_MAP[CompareMode(mode)]
    return func(fs, first, second)
