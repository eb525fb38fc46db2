"""Database engine factory for the SQL object store.

Every Engine objfs uses is created here so connections are configured the
same way everywhere:

- **SQLite**: connection PRAGMAs enable WAL and a busy timeout so several
  threads can share one database file; ``:memory:`` URLs use a static pool
  so all sessions see the same database.
- **Other backends**: no tuning applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, pool
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def _is_sqlite_memory(url: str | URL) -> bool:
    return make_url(str(url)).database in (None, "", ":memory:")


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    For SQLite the following PRAGMAs are applied on every connection:
        - ``journal_mode=WAL`` (readers do not block the writer)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``busy_timeout=5000`` (wait for the write lock instead of failing)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    if not is_sqlite(url):
        return create_engine(url, echo=echo)

    if _is_sqlite_memory(url):
        engine = create_engine(
            url,
            echo=echo,
            poolclass=pool.StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(url, echo=echo)

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA busy_timeout=5000;")
        cur.close()

    return engine
