"""Entry domain package."""

from .dao import (
    DuplicateEntryError,
    EntryDAO,
    EntryStoreError,
    InMemoryEntryDAO,
    PostgresEntryDAO,
    build_entry_dao,
)
from .identifiers import Identifier, IdentifierLike, InvalidIdentifierError
from .models import Entry, from_millis, to_millis, utcnow
from .schema import build_entries_table, create_entries_table

__all__ = [
    "DuplicateEntryError",
    "Entry",
    "EntryDAO",
    "EntryStoreError",
    "Identifier",
    "IdentifierLike",
    "InMemoryEntryDAO",
    "InvalidIdentifierError",
    "PostgresEntryDAO",
    "build_entries_table",
    "build_entry_dao",
    "create_entries_table",
    "from_millis",
    "to_millis",
    "utcnow",
]
