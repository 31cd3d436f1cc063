"""SQLite connection management and identifier syntax."""

import re
from pathlib import Path

import aiosqlite

from game_collection.migrations.runner import run_migrations

# SQLite INTEGER PRIMARY KEY is a signed 64-bit value
MAX_ID = 2**63 - 1

_ID_PATTERN = re.compile(r"[1-9][0-9]{0,18}")


def is_valid_id(value: str) -> bool:
    """Return True if *value* is a syntactically valid record id.

    Says nothing about whether a record with that id exists.
    """
    if not isinstance(value, str) or not _ID_PATTERN.fullmatch(value):
        return False
    return int(value) <= MAX_ID


async def connect(db_path: Path) -> aiosqlite.Connection:
    """Open the database connection and run migrations."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row

    # Enable WAL mode for better read concurrency
    await db.execute("PRAGMA journal_mode=WAL")
    # Reasonable busy timeout for concurrent access
    await db.execute("PRAGMA busy_timeout=5000")
    await db.commit()

    await run_migrations(db)
    return db


async def close(db: aiosqlite.Connection | None) -> None:
    """Close the database connection."""
    if db is not None:
        await db.close()
