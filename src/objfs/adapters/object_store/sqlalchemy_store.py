"""SQL table-backed object store client (SQLAlchemy Core).

Objects are rows of ``objfs_objects``. Ranged reads use ``substr`` so only
the requested slice crosses the wire; positional writes are a
read-modify-write inside one transaction, row-locked on PostgreSQL and
serialized per client instance by a lock. Whole-object replacement is a
dialect-specific upsert.

Construction verifies that the database is reachable and migrated, so a
misconfigured URL fails fast with ``StoreConnectionError``.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import LargeBinary, delete, func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError

from objfs.adapters.db.dialects import DialectName, UnsupportedDialect
from objfs.interfaces.object_store import (
    NotFound,
    ObjectStat,
    ObjectStoreClient,
    StoreConnectionError,
    StoreIOError,
)

from .schema import OBJECTS_TABLE, objects

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Connection, Engine

__all__ = ["SqlAlchemyObjectStore"]

logger = logging.getLogger(__name__)


class SqlAlchemyObjectStore(ObjectStoreClient):
    """Object store client storing each object as one row.

    Args:
        engine: Engine for a database migrated to head.
        dispose_on_close: Dispose *engine* when the client is closed.

    Raises:
        StoreConnectionError: If the database cannot be reached, uses an
            unsupported dialect, or lacks the objects table.
    """

    def __init__(self, engine: Engine, *, dispose_on_close: bool = False) -> None:
        self._engine = engine
        self._dispose_on_close = dispose_on_close
        self._closed = False
        self._write_lock = threading.Lock()
        try:
            self._dialect = DialectName.of(engine)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                has_table = inspect(conn).has_table(OBJECTS_TABLE)
        except (SQLAlchemyError, UnsupportedDialect) as e:
            raise StoreConnectionError(
                f"Cannot open SQL object store at {engine.url!r}"
            ) from e
        if not has_table:
            raise StoreConnectionError(
                f"Table {OBJECTS_TABLE!r} is missing; run 'objfs db upgrade' first"
            )

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _transaction(
        self, action: str, key: str | None = None
    ) -> Iterator[Connection]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            target = f" for {key!r}" if key is not None else ""
            raise StoreIOError(f"{action} failed{target}") from e

    def stat(self, key: str) -> ObjectStat:
        stmt = select(func.length(objects.c.data)).where(objects.c.key == key)
        with self._transaction("stat", key) as conn:
            size = conn.execute(stmt).scalar_one_or_none()
        if size is None:
            raise NotFound(key)
        return ObjectStat(key, int(size))

    def read(self, key: str, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0:
            raise ValueError("offset and length must be non-negative")
        # substr is 1-based on both SQLite and PostgreSQL
        chunk = func.substr(objects.c.data, offset + 1, length, type_=LargeBinary)
        stmt = select(chunk).where(objects.c.key == key)
        with self._transaction("read", key) as conn:
            row = conn.execute(stmt).one_or_none()
        if row is None:
            raise NotFound(key)
        return bytes(row[0] or b"")

    def write(self, key: str, data: bytes, offset: int = 0) -> None:
        if offset < 0:
            raise ValueError("offset must be non-negative")
        current_stmt = (
            select(objects.c.data).where(objects.c.key == key).with_for_update()
        )
        with self._write_lock, self._transaction("write", key) as conn:
            current = conn.execute(current_stmt).scalar_one_or_none()
            buf = bytearray(current or b"")
            if offset > len(buf):
                buf.extend(bytes(offset - len(buf)))
            buf[offset : offset + len(data)] = data
            self._upsert(conn, key, bytes(buf))

    def write_full(self, key: str, data: bytes) -> None:
        with self._transaction("write_full", key) as conn:
            self._upsert(conn, key, bytes(data))

    def remove(self, key: str) -> None:
        with self._transaction("remove", key) as conn:
            result = conn.execute(delete(objects).where(objects.c.key == key))
        if result.rowcount == 0:
            raise NotFound(key)

    def list_keys(self) -> list[str]:
        with self._transaction("list_keys") as conn:
            return list(conn.execute(select(objects.c.key)).scalars())

    def version(self) -> str:
        with self._transaction("version") as conn:
            server = conn.execute(self._dialect.server_version()).scalar_one()
        return f"{self._dialect.value} {server}"

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._dispose_on_close:
            logger.debug("Disposing engine %r", self._engine.url)
            self._engine.dispose()

    def _upsert(self, conn: Connection, key: str, data: bytes) -> None:
        conn.execute(self._dialect.upsert(objects, key=key, data=data))
