"""Alembic round-trip smoke test for PostgreSQL.

Runs against the session's Testcontainers Postgres 17 (already at head):

  1) asserts `objfs_objects` exists and accepts a binary insert,
  2) runs `alembic downgrade base` and asserts the table is gone,
  3) runs `alembic upgrade head` again so later tests find the schema.
"""

import pytest
from alembic import command
from sqlalchemy import create_engine, delete, insert, select, text

from objfs import config
from objfs.adapters.object_store.schema import OBJECTS_TABLE, objects

pytestmark = [pytest.mark.slow]


def _table_exists(url: str) -> bool:
    eng = create_engine(url, pool_pre_ping=True)
    try:
        with eng.connect() as c:
            return bool(
                c.execute(
                    text("SELECT to_regclass(:name) IS NOT NULL"),
                    {"name": f"public.{OBJECTS_TABLE}"},
                ).scalar()
            )
    finally:
        eng.dispose()


def test_alembic_downgrade_upgrade_roundtrip_postgres(pg_url: str):
    """Insert → downgrade (table gone) → upgrade (table back)."""
    eng = create_engine(pg_url, pool_pre_ping=True)
    with eng.begin() as c:
        c.execute(insert(objects).values(key="/rt", data=b"\x00\xffbytes"))
        stored = c.execute(select(objects.c.data).where(objects.c.key == "/rt")).scalar()
        assert stored == b"\x00\xffbytes"
        c.execute(delete(objects).where(objects.c.key == "/rt"))
    eng.dispose()

    command.downgrade(config.build_alembic_config(pg_url), "base")
    assert not _table_exists(pg_url)

    command.upgrade(config.build_alembic_config(pg_url), "head")
    assert _table_exists(pg_url)
