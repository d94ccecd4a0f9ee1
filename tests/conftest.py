"""Shared pytest fixtures for folder-mirror tests."""

from pathlib import Path

import pytest

from folder_mirror.config import SyncConfiguration
from folder_mirror.sync.comparer import CompareMode

_ENV_VARS = [
    "MIRROR_SOURCE",
    "MIRROR_REPLICA",
    "MIRROR_PERIOD",
    "MIRROR_COMPARE_MODE",
    "MIRROR_ALLOW_READONLY_MODIFY",
    "MIRROR_LOG_FILE",
    "FOLDER_MIRROR_CONFIG",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_mirror_env(monkeypatch):
    """Keep the developer's MIRROR_* environment out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mirror_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Create empty source and replica folders on disk."""
    source = tmp_path / "source"
    replica = tmp_path / "replica"
    source.mkdir()
    replica.mkdir()
    return source, replica


@pytest.fixture
def make_config():
    """Factory fixture for SyncConfiguration instances."""

    def _make(
        source: Path = Path("/src"),
        replica: Path = Path("/rep"),
        compare_mode: CompareMode = CompareMode.SIZE_AND_TIME,
        allow_readonly_modify: bool = False,
        sync_period: int = 60,
    ) -> SyncConfiguration:
        return SyncConfiguration(
            source=source,
            replica=replica,
            sync_period=sync_period,
            compare_mode=compare_mode,
            allow_readonly_modify=allow_readonly_modify,
        )

    return _make
