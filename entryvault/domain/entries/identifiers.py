"""Opaque 24-hex-character identifiers used for entries and authors."""

from __future__ import annotations

import os
import re
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

__all__ = [
    "Identifier",
    "IdentifierLike",
    "InvalidIdentifierError",
]

IDENTIFIER_LENGTH = 24
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_process_unique = os.urandom(5)
_counter_lock = threading.Lock()
_counter = int.from_bytes(os.urandom(3), "big")


class InvalidIdentifierError(ValueError):
    """Raised when a value does not have the 24-hex-character shape."""

    def __init__(self, value: object) -> None:
        super().__init__(f"'{value}' is not a valid 24-character hex identifier")
        self.value = value


@dataclass(frozen=True, order=True)
class Identifier:
    """Typed wrapper around a lowercase 24-character hex string."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _HEX_PATTERN.fullmatch(self.value):
            raise InvalidIdentifierError(self.value)
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "IdentifierLike") -> "Identifier":
        if isinstance(value, Identifier):
            return value
        return cls(value)

    @classmethod
    def try_parse(cls, value: object) -> Optional["Identifier"]:
        """Return the parsed identifier or ``None`` for malformed input."""

        if isinstance(value, Identifier):
            return value
        if not cls.is_valid(value):
            return None
        return cls(value)  # type: ignore[arg-type]

    @staticmethod
    def is_valid(value: object) -> bool:
        if isinstance(value, Identifier):
            return True
        return isinstance(value, str) and bool(_HEX_PATTERN.fullmatch(value))

    @classmethod
    def generate(cls) -> "Identifier":
        """Create a new identifier: epoch seconds, process bytes, counter."""

        global _counter
        with _counter_lock:
            _counter = (_counter + 1) % 0x1000000
            counter = _counter
        raw = (
            int(time.time()).to_bytes(4, "big")
            + _process_unique
            + counter.to_bytes(3, "big")
        )
        return cls(raw.hex())


IdentifierLike = Union[Identifier, str]
