"""Database backends the SQL object store can run on.

Only two statements differ between backends: the upsert used by
``write_full`` and the server version query behind ``version()``. Both are
built here so the store never branches on raw dialect strings.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite

if TYPE_CHECKING:
    from sqlalchemy import Select, Table
    from sqlalchemy.engine import Connection, Engine


class UnsupportedDialect(Exception):
    """Raised for a database backend objfs has no statements for."""


class DialectName(str, Enum):
    """Supported SQLAlchemy backends, valued by their dialect name."""

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, name: str | None) -> DialectName:
        """Map a dialect or ``dialect+driver`` name to a member.

        ``"postgres"`` and ``"pg"`` are accepted for PostgreSQL.

        Raises:
            UnsupportedDialect: For any other backend.
        """
        backend = (name or "").strip().lower().partition("+")[0]
        try:
            return _ALIASES[backend]
        except KeyError:
            raise UnsupportedDialect(f"Unsupported dialect: {name!r}") from None

    @classmethod
    def of(cls, bind: Engine | Connection) -> DialectName:
        """Return the backend an engine or connection talks to."""
        dialect = getattr(bind, "dialect", None)
        if dialect is None:
            raise UnsupportedDialect(f"{type(bind).__name__} has no dialect")
        return cls.parse(dialect.name)

    def upsert(self, table: Table, **values: object):
        """INSERT *values*, or update every non-key column on a key conflict."""
        module = postgresql if self is DialectName.POSTGRES else sqlite
        key_columns = list(table.primary_key.columns)
        stmt = module.insert(table).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=key_columns,
            set_={
                name: value
                for name, value in values.items()
                if name not in table.primary_key.columns
            },
        )

    def server_version(self) -> Select:
        """SELECT returning the server's version string."""
        if self is DialectName.POSTGRES:
            return select(func.version())
        return select(func.sqlite_version())


_ALIASES = {
    "postgresql": DialectName.POSTGRES,
    "postgres": DialectName.POSTGRES,
    "pg": DialectName.POSTGRES,
    "sqlite": DialectName.SQLITE,
}
