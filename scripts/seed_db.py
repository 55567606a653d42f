"""Seed script for the entries store.

Creates a handful of sample entries so local tooling has data to read. The
configured backend is used; ``--create-schema`` creates the ``entries`` table
first when seeding a fresh database without running migrations.
"""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from entryvault.config import load_settings
from entryvault.domain.entries import (
    Entry,
    EntryDAO,
    build_entry_dao,
    create_entries_table,
)
from entryvault.infra.db import get_engine
from entryvault.infra.logging import configure_logging, get_logger

logger = get_logger(__name__)

SEED_AUTHOR_IDS = ("5eed00000000000000000001", "5eed00000000000000000002")


def build_seed_entries(reference: datetime) -> List[Entry]:
    """Return static seed entries, one per day going back from ``reference``."""

    texts = (
        "Welcome to entryvault",
        "Second day, second note",
        "Remember to back up the database",
        "Older entries are listed last",
    )
    return [
        Entry(
            id=f"5eed{index:020x}",
            text=text,
            author_id=SEED_AUTHOR_IDS[index % len(SEED_AUTHOR_IDS)],
            entered=reference - timedelta(days=index),
        )
        for index, text in enumerate(texts)
    ]


def seed_entries(dao: EntryDAO, entries: Sequence[Entry]) -> int:
    """Add entries that are not stored yet and return how many were added."""

    added = 0
    for entry in entries:
        if dao.load(entry.id) is not None:
            logger.info("seed_entry_skipped_existing", extra={"entry_id": str(entry.id)})
            continue
        dao.add(entry)
        added += 1
    return added


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="create the entries table before seeding",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.logging)
    if args.create_schema and settings.storage.backend == "postgres":
        create_entries_table(get_engine())
    dao = build_entry_dao(settings)
    inserted = seed_entries(dao, build_seed_entries(datetime.now(timezone.utc)))
    print(f"Seeded {inserted} entries ({dao.count_items()} stored).")


if __name__ == "__main__":
    main()
