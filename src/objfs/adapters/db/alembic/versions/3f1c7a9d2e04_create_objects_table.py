"""create objfs_objects table

Revision ID: 3f1c7a9d2e04
Revises:
Create Date: 2026-10-17 09:12:41.508113

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# deal with alembic stuff
# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c7a9d2e04"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "objfs_objects",
        sa.Column(
            "key",
            sa.String(length=1024),
            nullable=False,
            comment="Object key (node path or block key).",
        ),
        sa.Column(
            "data",
            sa.LargeBinary(),
            nullable=False,
            comment="Whole object payload.",
        ),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_objfs_objects")),
        comment="Flat key/value objects backing an objfs namespace.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("objfs_objects")
