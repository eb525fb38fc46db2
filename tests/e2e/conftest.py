"""Default `e2e` mark for tests under `tests/e2e/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import mark_folder

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark every test in this folder as `e2e`."""
    mark_folder(items, Path(__file__).parent, "e2e")
