"""Entry data model shared by every EntryDAO backend."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from .identifiers import Identifier, IdentifierLike

__all__ = [
    "Entry",
    "from_millis",
    "to_millis",
    "utcnow",
]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def to_millis(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are UTC)."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def from_millis(millis: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=int(millis))


@dataclass(frozen=True)
class Entry:
    """A timestamped text entry written by an author.

    ``entered`` is normalized to UTC with millisecond precision so that every
    backend stores and returns exactly the same value.
    """

    id: Identifier
    text: str
    author_id: Identifier
    entered: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", Identifier.parse(self.id))
        object.__setattr__(self, "author_id", Identifier.parse(self.author_id))
        object.__setattr__(self, "entered", from_millis(to_millis(self.entered)))

    @classmethod
    def new(
        cls,
        *,
        text: str,
        author_id: IdentifierLike,
        entered: Optional[datetime] = None,
        entry_id: Optional[IdentifierLike] = None,
    ) -> "Entry":
        """Factory that generates the id and entry time when omitted."""

        return cls(
            id=(
                Identifier.parse(entry_id)
                if entry_id is not None
                else Identifier.generate()
            ),
            text=text,
            author_id=Identifier.parse(author_id),
            entered=entered or utcnow(),
        )

    @property
    def entered_millis(self) -> int:
        return to_millis(self.entered)

    def with_text(self, text: str) -> "Entry":
        return replace(self, text=text)
