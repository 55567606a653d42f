"""Test helpers for asserting on structured log calls."""

from __future__ import annotations

from typing import Any, Dict, List


class RecordingLogger:
    """Stand-in for a module ``logger`` that keeps every call in memory."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def __getattr__(self, level: str):
        if level not in {"debug", "info", "warning", "error", "exception"}:
            raise AttributeError(level)

        def _log(message: str, *args: Any, **kwargs: Any) -> None:
            self.records.append(
                {
                    "level": level,
                    "message": message,
                    "args": args,
                    "extra": dict(kwargs.get("extra") or {}),
                    "exc_info": kwargs.get("exc_info"),
                }
            )

        return _log

    def messages(self, level: str) -> List[str]:
        return [record["message"] for record in self.records if record["level"] == level]


def find_log(
    records: List[Dict[str, Any]], *, level: str, message: str
) -> Dict[str, Any]:
    for record in records:
        if record["level"] == level and record["message"] == message:
            return record
    raise AssertionError(f"Log '{message}' at level '{level}' not recorded")


def assert_extra_contains(record: Dict[str, Any], **expected: Any) -> None:
    extra = record.get("extra") or {}
    for key, value in expected.items():
        assert extra.get(key) == value, (
            f"Expected extra['{key}'] == {value!r}, found {extra.get(key)!r}"
        )
