"""Tests for the file equality strategies."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from folder_mirror.sync.comparer import (
    CompareMode,
    content_hash_equal,
    file_digest,
    files_equal,
    size_and_time_equal,
)
from folder_mirror.sync.filesystem import LocalFileSystem


def _write(path: Path, data: bytes, mtime: float = 1_700_000_000.0) -> Path:
    path.write_bytes(data)
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def fs() -> LocalFileSystem:
    return LocalFileSystem()


class TestCompareMode:
    def test_values(self):
        assert CompareMode("size-time") is CompareMode.SIZE_AND_TIME
        assert CompareMode("hash") is CompareMode.CONTENT_HASH

    def test_unknown_mode_rejected(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"x")
        with pytest.raises(ValueError):
            files_equal("crc32", fs, a, a)  # type: ignore[arg-type]


class TestSizeAndTime:
    def test_identical_size_and_mtime_equal(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        b = _write(tmp_path / "b", b"xyz")
        assert size_and_time_equal(fs, a, b) is True

    def test_size_differs(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        b = _write(tmp_path / "b", b"abcd")
        assert size_and_time_equal(fs, a, b) is False

    def test_mtime_differs(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc", mtime=1_700_000_000.0)
        b = _write(tmp_path / "b", b"abc", mtime=1_700_000_001.0)
        assert size_and_time_equal(fs, a, b) is False

    def test_missing_file_raises(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        with pytest.raises(FileNotFoundError):
            size_and_time_equal(fs, a, tmp_path / "missing")


class TestContentHash:
    def test_digest_is_md5(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"hello world")
        assert file_digest(fs, a) == hashlib.md5(b"hello world").digest()

    def test_digest_of_large_file_read_in_chunks(self, fs, tmp_path):
        data = os.urandom(3 * 1024 * 1024 + 17)
        a = _write(tmp_path / "a", data)
        assert file_digest(fs, a) == hashlib.md5(data).digest()

    def test_same_content_different_mtime_equal(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"same", mtime=1_600_000_000.0)
        b = _write(tmp_path / "b", b"same", mtime=1_700_000_000.0)
        assert content_hash_equal(fs, a, b) is True

    def test_same_size_different_content(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        b = _write(tmp_path / "b", b"abd")
        assert content_hash_equal(fs, a, b) is False

    def test_empty_files_equal(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"")
        b = _write(tmp_path / "b", b"")
        assert content_hash_equal(fs, a, b) is True


class TestDispatch:
    def test_size_time_mode_uses_metadata_only(self, tmp_path):
        fake_fs = MagicMock()
        fake_fs.stat.return_value = MagicMock(size=3, modified=0)

        assert files_equal(
            CompareMode.SIZE_AND_TIME, fake_fs, Path("a"), Path("b")
        )
        fake_fs.open_binary.assert_not_called()

    def test_hash_mode_reads_content(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        b = _write(tmp_path / "b", b"xyz")
        assert files_equal(CompareMode.SIZE_AND_TIME, fs, a, b) is True
        assert files_equal(CompareMode.CONTENT_HASH, fs, a, b) is False

    def test_mode_accepts_string_value(self, fs, tmp_path):
        a = _write(tmp_path / "a", b"abc")
        b = _write(tmp_path / "b", b"abc")
        assert files_equal("hash", fs, a, b) is True  # type: ignore[arg-type]
