"""SQL schema for the table-backed object store.

One row per object: the key is the primary key and the payload is stored
whole in a binary column. The table is created by Alembic migrations
(``objfs db upgrade``); tests may use ``metadata.create_all()``.
"""

from __future__ import annotations

from sqlalchemy import Column, LargeBinary, String, Table

from objfs.adapters.db.metadata import metadata

__all__ = ["objects", "OBJECTS_TABLE", "MAX_KEY_LENGTH"]

OBJECTS_TABLE = "objfs_objects"
MAX_KEY_LENGTH = 1024

objects = Table(
    OBJECTS_TABLE,
    metadata,
    Column(
        "key",
        String(MAX_KEY_LENGTH),
        primary_key=True,
        comment="Object key (node path or block key).",
    ),
    Column(
        "data",
        LargeBinary,
        nullable=False,
        comment="Whole object payload.",
    ),
    comment="Flat key/value objects backing an objfs namespace.",
)
