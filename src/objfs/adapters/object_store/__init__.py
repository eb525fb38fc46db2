"""Object store client implementations.

- MemoryObjectStore: in-process dict, for tests and ephemeral use.
- LocalObjectStore: one file per key under a directory.
- SqlAlchemyObjectStore: one row per key in a SQL table.
"""

from .local import LocalObjectStore
from .memory import MemoryObjectStore
from .sqlalchemy_store import SqlAlchemyObjectStore

__all__ = ["LocalObjectStore", "MemoryObjectStore", "SqlAlchemyObjectStore"]
