"""Tests for entry identifiers and the Entry value record."""

# Coverage: entry store models

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from entryvault.domain.entries import identifiers as identifiers_module
from entryvault.domain.entries import (
    Entry,
    Identifier,
    InvalidIdentifierError,
    from_millis,
    to_millis,
)

pytestmark = [pytest.mark.entrystore]


def test_identifier_round_trips_through_string():
    identifier = Identifier("0123456789abcdefABCDEF01")

    assert str(identifier) == "0123456789abcdefabcdef01"
    assert Identifier.parse(str(identifier)) == identifier


@pytest.mark.parametrize(
    "value", ["", "abc", "g" * 24, "1" * 25, "a" * 24 + "\n", "\n" + "a" * 24, None, 42]
)
def test_identifier_rejects_malformed_values(value):
    with pytest.raises(InvalidIdentifierError):
        Identifier.parse(value)  # type: ignore[arg-type]
    assert Identifier.try_parse(value) is None
    assert not Identifier.is_valid(value)


def test_identifier_ordering_follows_string_value():
    ids = [Identifier("b" * 24), Identifier("1" * 24), Identifier("a" * 24)]

    assert [str(item) for item in sorted(ids)] == ["1" * 24, "a" * 24, "b" * 24]


def test_generated_identifiers_are_unique_and_valid():
    generated = {Identifier.generate() for _ in range(1000)}

    assert len(generated) == 1000
    assert all(Identifier.is_valid(str(item)) for item in generated)


def test_entry_normalizes_timestamp_to_utc_milliseconds():
    local = timezone(timedelta(hours=2))
    entered = datetime(2012, 12, 10, 14, 0, 0, 123456, tzinfo=local)

    entry = Entry(id="1" * 24, text="hi", author_id="2" * 24, entered=entered)

    assert entry.entered == datetime(2012, 12, 10, 12, 0, 0, 123000, tzinfo=timezone.utc)
    assert entry.entered.utcoffset() == timedelta(0)


def test_entry_treats_naive_timestamps_as_utc():
    entry = Entry(
        id="1" * 24, text="hi", author_id="2" * 24, entered=datetime(2012, 12, 10)
    )

    assert entry.entered_millis == to_millis(datetime(2012, 12, 10, tzinfo=timezone.utc))


def test_millis_helpers_round_trip():
    millis = 1355140800123

    assert to_millis(from_millis(millis)) == millis


def test_entry_new_generates_id_and_timestamp():
    before = datetime.now(timezone.utc) - timedelta(seconds=1)

    entry = Entry.new(text="hello", author_id="a" * 24)

    assert Identifier.is_valid(str(entry.id))
    assert entry.author_id == Identifier("a" * 24)
    assert entry.entered >= before


def test_entry_is_immutable_and_with_text_copies():
    entry = Entry.new(text="hello", author_id="a" * 24, entry_id="b" * 24)

    with pytest.raises(FrozenInstanceError):
        entry.text = "changed"  # type: ignore[misc]

    updated = entry.with_text("changed")
    assert updated.text == "changed"
    assert entry.text == "hello"
    assert (updated.id, updated.author_id, updated.entered) == (
        entry.id,
        entry.author_id,
        entry.entered,
    )


def test_entry_rejects_malformed_ids():
    with pytest.raises(InvalidIdentifierError):
        Entry(id="nope", text="hi", author_id="2" * 24, entered=datetime.now(timezone.utc))


def test_entry_rejects_id_with_trailing_newline():
    with pytest.raises(InvalidIdentifierError):
        Entry(
            id="a" * 24 + "\n",
            text="hi",
            author_id="2" * 24,
            entered=datetime.now(timezone.utc),
        )


def test_entry_new_rejects_empty_entry_id():
    with pytest.raises(InvalidIdentifierError):
        Entry.new(text="hello", author_id="a" * 24, entry_id="")


def test_generate_counter_uses_full_three_byte_range(monkeypatch):
    monkeypatch.setattr(identifiers_module, "_counter", 0xFFFFFE)

    highest = Identifier.generate()
    wrapped = Identifier.generate()

    assert str(highest).endswith("ffffff")
    assert str(wrapped).endswith("000000")
