"""EntryDAO contract and its in-memory and PostgreSQL implementations."""

from __future__ import annotations

from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ...config import Settings, load_settings
from ...infra.db import get_engine
from ...infra.logging import get_logger
from .identifiers import Identifier, IdentifierLike
from .models import Entry, from_millis
from .schema import ENTRIES_TABLE

__all__ = [
    "DuplicateEntryError",
    "EntryDAO",
    "EntryStoreError",
    "InMemoryEntryDAO",
    "PostgresEntryDAO",
    "build_entry_dao",
]

logger = get_logger(__name__)


class EntryStoreError(Exception):
    """Base class for contract-level entry store failures."""


class DuplicateEntryError(EntryStoreError):
    """Raised by ``add`` when an entry with the same id is already stored."""

    def __init__(self, entry_id: Identifier) -> None:
        super().__init__(f"Entry {entry_id} already exists")
        self.entry_id = entry_id


class EntryDAO(Protocol):  # pragma: no cover - interface only
    """Persistence contract shared by every entry backend.

    Absence is never an error: ``load`` returns ``None``, ``remove`` and
    ``update`` are no-ops and ``load_authored_by`` returns an empty list when
    nothing matches, including when the given id is malformed.
    """

    def add(self, entry: Entry) -> None: ...

    def load(self, entry_id: IdentifierLike) -> Optional[Entry]: ...

    def remove(self, entry_id: IdentifierLike) -> None: ...

    def update(self, entry_id: IdentifierLike, text: str) -> None: ...

    def count_items(self) -> int: ...

    def load_all(self) -> List[Entry]:
        """Return every entry, newest first, ties ordered by id descending."""
        ...

    def count_newer_than(self, timestamp_millis: int) -> int:
        """Count entries entered strictly after ``timestamp_millis``."""
        ...

    def load_authored_by(self, author_id: IdentifierLike) -> List[Entry]: ...


def _newest_first_key(entry: Entry):
    return (entry.entered_millis, entry.id)


class InMemoryEntryDAO(EntryDAO):
    """Process-local EntryDAO used for development, tests and as reference."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: Dict[Identifier, Entry] = {}

    def add(self, entry: Entry) -> None:
        with self._lock:
            if entry.id in self._entries:
                logger.warning(
                    "entry_add_rejected_duplicate", extra={"entry_id": str(entry.id)}
                )
                raise DuplicateEntryError(entry.id)
            self._entries[entry.id] = entry

    def load(self, entry_id: IdentifierLike) -> Optional[Entry]:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return None
        with self._lock:
            return self._entries.get(key)

    def remove(self, entry_id: IdentifierLike) -> None:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return
        with self._lock:
            self._entries.pop(key, None)

    def update(self, entry_id: IdentifierLike, text: str) -> None:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return
        with self._lock:
            record = self._entries.get(key)
            if record is None:
                return
            self._entries[key] = record.with_text(text)

    def count_items(self) -> int:
        with self._lock:
            return len(self._entries)

    def load_all(self) -> List[Entry]:
        with self._lock:
            records = list(self._entries.values())
        return sorted(records, key=_newest_first_key, reverse=True)

    def count_newer_than(self, timestamp_millis: int) -> int:
        with self._lock:
            records = list(self._entries.values())
        return sum(1 for entry in records if entry.entered_millis > timestamp_millis)

    def load_authored_by(self, author_id: IdentifierLike) -> List[Entry]:
        author = Identifier.try_parse(author_id)
        if author is None:
            return []
        with self._lock:
            return [entry for entry in self._entries.values() if entry.author_id == author]


class PostgresEntryDAO(EntryDAO):
    """SQLAlchemy-backed EntryDAO that keeps one row per entry.

    Every call runs in its own transaction; driver and connectivity errors
    propagate unchanged, except duplicate primary keys on ``add`` which are
    reported as :class:`DuplicateEntryError`.
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        table: Optional[Table] = None,
    ) -> None:
        self._engine = engine or get_engine()
        if table is not None:
            self._entries = table
        else:
            self._entries = Table(ENTRIES_TABLE, MetaData(), autoload_with=self._engine)

    def add(self, entry: Entry) -> None:
        stmt = insert(self._entries).values(
            id=str(entry.id),
            text=entry.text,
            author_id=str(entry.author_id),
            entered=entry.entered_millis,
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as exc:
            if self._exists(entry.id):
                logger.warning(
                    "entry_add_rejected_duplicate", extra={"entry_id": str(entry.id)}
                )
                raise DuplicateEntryError(entry.id) from exc
            raise

    def load(self, entry_id: IdentifierLike) -> Optional[Entry]:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return None
        stmt = select(self._entries).where(self._entries.c.id == str(key))
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return _row_to_entry(row)

    def remove(self, entry_id: IdentifierLike) -> None:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return
        stmt = delete(self._entries).where(self._entries.c.id == str(key))
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def update(self, entry_id: IdentifierLike, text: str) -> None:
        key = Identifier.try_parse(entry_id)
        if key is None:
            return
        stmt = (
            update(self._entries)
            .where(self._entries.c.id == str(key))
            .values(text=text)
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def count_items(self) -> int:
        stmt = select(func.count()).select_from(self._entries)
        with self._engine.begin() as conn:
            return int(conn.execute(stmt).scalar_one())

    def load_all(self) -> List[Entry]:
        stmt = select(self._entries).order_by(
            self._entries.c.entered.desc(), self._entries.c.id.desc()
        )
        with self._engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def count_newer_than(self, timestamp_millis: int) -> int:
        stmt = (
            select(func.count())
            .select_from(self._entries)
            .where(self._entries.c.entered > int(timestamp_millis))
        )
        with self._engine.begin() as conn:
            return int(conn.execute(stmt).scalar_one())

    def load_authored_by(self, author_id: IdentifierLike) -> List[Entry]:
        author = Identifier.try_parse(author_id)
        if author is None:
            return []
        stmt = select(self._entries).where(self._entries.c.author_id == str(author))
        with self._engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def _exists(self, entry_id: Identifier) -> bool:
        stmt = select(self._entries.c.id).where(self._entries.c.id == str(entry_id))
        with self._engine.begin() as conn:
            return conn.execute(stmt).first() is not None


def build_entry_dao(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    prefer_postgres: Optional[bool] = None,
    fallback_to_memory: Optional[bool] = None,
) -> EntryDAO:
    """Factory that returns the configured EntryDAO implementation."""

    settings = settings or load_settings()
    if prefer_postgres is None:
        prefer_postgres = settings.storage.backend == "postgres"
    if fallback_to_memory is None:
        fallback_to_memory = settings.storage.fallback_to_memory

    if prefer_postgres:
        try:
            dao: EntryDAO = PostgresEntryDAO(engine)
        except Exception:
            if not fallback_to_memory:
                raise
            logger.warning(
                "entry_dao_postgres_unavailable_falling_back",
                exc_info=True,
            )
        else:
            logger.info("entry_dao_selected", extra={"backend": "postgres"})
            return dao
    logger.info("entry_dao_selected", extra={"backend": "memory"})
    return InMemoryEntryDAO()


def _row_to_entry(row: Mapping[str, Any]) -> Entry:
    return Entry(
        id=Identifier.parse(row["id"]),
        text=row["text"],
        author_id=Identifier.parse(row["author_id"]),
        entered=from_millis(row["entered"]),
    )
