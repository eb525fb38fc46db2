"""Pytest fixtures for object store contract tests.

Provided fixtures
-----------------
- **client**: Parametrized backend factory returning a **fresh, empty**
  `ObjectStoreClient` per test:
    - `"memory"`   → `MemoryObjectStore`
    - `"local"`    → `LocalObjectStore` under the test's tmp dir
    - `"sqlite"`   → `SqlAlchemyObjectStore` on a migrated SQLite file
    - `"postgres"` → `SqlAlchemyObjectStore` on Testcontainers Postgres
      (skipped without Docker)

- **payload**: Small deterministic byte sample.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from objfs.adapters.object_store import (
    LocalObjectStore,
    MemoryObjectStore,
    SqlAlchemyObjectStore,
)

if TYPE_CHECKING:
    from objfs.interfaces.object_store import ObjectStoreClient


@pytest.fixture(
    params=[
        "memory",
        "local",
        "sqlite",
        pytest.param("postgres", marks=[pytest.mark.postgres, pytest.mark.slow]),
    ]
)
def client(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[ObjectStoreClient]:
    """Return a fresh object store client for the requested backend."""

    match request.param:
        case "memory":
            store: ObjectStoreClient = MemoryObjectStore()
        case "local":
            store = LocalObjectStore(tmp_path / "objects")
        case "sqlite":
            store = SqlAlchemyObjectStore(request.getfixturevalue("sqlite_engine_file"))
        case "postgres":
            store = SqlAlchemyObjectStore(request.getfixturevalue("postgres_engine"))
        case _:
            raise ValueError(f"unknown store type: {request.param}")
    with store:
        yield store


@pytest.fixture
def payload() -> bytes:
    """Deterministic sample payload for quick round-trip tests."""
    return b"The quick brown fox jumps over the lazy dog"
