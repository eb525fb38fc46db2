"""Default `functional` mark and CLI fixtures for tests under `tests/functional/`."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.helpers.markers import mark_folder

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark every test in this folder as `functional`."""
    mark_folder(items, Path(__file__).parent, "functional")


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Directory backing a `file://` object store for one test."""
    return tmp_path / "store"


@pytest.fixture
def runner(tmp_path: Path, store_dir: Path) -> CliRunner:
    """CliRunner pointed at a fresh local store, logging into the tmp dir."""
    return CliRunner(
        env={
            "OBJFS_STORE_URL": store_dir.as_uri(),
            "OBJFS_LOG_PATH": str(tmp_path / "objfs.log"),
        }
    )
