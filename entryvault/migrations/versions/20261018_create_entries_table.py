"""Create entries table.

Revision ID: 20261018_create_entries
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261018_create_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column("id", sa.String(length=24), primary_key=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(length=24), nullable=False),
        sa.Column("entered", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_entries_author_id", "entries", ["author_id"])
    op.create_index("ix_entries_entered", "entries", ["entered"])


def downgrade() -> None:
    op.drop_index("ix_entries_entered", table_name="entries")
    op.drop_index("ix_entries_author_id", table_name="entries")
    op.drop_table("entries")
