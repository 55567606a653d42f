"""Structured logging helpers shared across entryvault modules."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "ROOT_LOGGER_NAME",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
]

ROOT_LOGGER_NAME = "entryvault"
DEFAULT_LEVEL = "INFO"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line, including ``extra`` keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: Optional[Mapping[str, Any]] = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    ``config`` is the ``logging`` section of the settings profile; ``level``
    and ``format`` (``json`` or ``text``) are honoured. Calling this again
    replaces the previously installed handler.
    """

    config = config or {}
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_entryvault_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if str(config.get("format", "json")).lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(StructuredFormatter())
    handler._entryvault_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(str(config.get("level", DEFAULT_LEVEL)).upper())
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; configuration is left to the application."""

    return logging.getLogger(name)
