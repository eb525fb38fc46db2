"""Global pytest fixtures for objfs."""

from __future__ import annotations

import pytest

from objfs.adapters.id_generators import SequentialBlockIdGenerator
from objfs.adapters.object_store import MemoryObjectStore
from objfs.service_layer import FileSystemStore

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
]


@pytest.fixture
def memory_client() -> MemoryObjectStore:
    """A fresh, empty in-memory object store client."""
    return MemoryObjectStore()


@pytest.fixture
def fs_store(memory_client: MemoryObjectStore) -> FileSystemStore:
    """A FileSystemStore over `memory_client` with predictable block ids (1, 2, ...)."""
    return FileSystemStore(memory_client, id_generator=SequentialBlockIdGenerator())
