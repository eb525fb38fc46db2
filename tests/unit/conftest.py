"""Default `unit` mark for tests under `tests/unit/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import mark_folder

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark every test in this folder as `unit`."""
    mark_folder(items, Path(__file__).parent, "unit")
