"""SQLAlchemy table definition for persisted entries."""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.engine import Engine

from .identifiers import IDENTIFIER_LENGTH

__all__ = [
    "ENTRIES_TABLE",
    "build_entries_table",
    "create_entries_table",
]

ENTRIES_TABLE = "entries"


def build_entries_table(metadata: Optional[sa.MetaData] = None) -> sa.Table:
    """Return the ``entries`` table bound to ``metadata``.

    ``entered`` holds epoch milliseconds so ordering and the exclusive
    ``count_newer_than`` bound are evaluated on exact integer values.
    """

    return sa.Table(
        ENTRIES_TABLE,
        metadata if metadata is not None else sa.MetaData(),
        sa.Column("id", sa.String(length=IDENTIFIER_LENGTH), primary_key=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column(
            "author_id", sa.String(length=IDENTIFIER_LENGTH), nullable=False, index=True
        ),
        sa.Column("entered", sa.BigInteger(), nullable=False, index=True),
    )


def create_entries_table(engine: Engine) -> sa.Table:
    """Create the ``entries`` table if missing and return it."""

    metadata = sa.MetaData()
    table = build_entries_table(metadata)
    metadata.create_all(engine)
    return table
