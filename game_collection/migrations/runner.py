"""Schema migrations.

Migrations are modules listed in ``MIGRATIONS``, each exposing an async
``upgrade(db)``. The names of applied migrations are kept in the
``_migrations`` table so every upgrade runs once per database.
"""

import importlib
import logging

import aiosqlite

logger = logging.getLogger(__name__)

MIGRATIONS = [
    "game_collection.migrations.m001_games",
]

_CREATE_LEDGER = """
    CREATE TABLE IF NOT EXISTS _migrations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        applied_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
"""


async def pending_migrations(db: aiosqlite.Connection) -> list[str]:
    """Names from ``MIGRATIONS`` not yet recorded, in declaration order."""
    await db.execute(_CREATE_LEDGER)
    await db.commit()
    async with db.execute("SELECT name FROM _migrations") as cursor:
        done = {name for (name,) in await cursor.fetchall()}
    return [name for name in MIGRATIONS if name not in done]


async def run_migrations(db: aiosqlite.Connection) -> list[str]:
    """Apply pending migrations and return the names applied."""
    applied = []
    for name in await pending_migrations(db):
        await importlib.import_module(name).upgrade(db)
        await db.execute("INSERT INTO _migrations (name) VALUES (?)", (name,))
        await db.commit()
        logger.info("Applied migration %s", name)
        applied.append(name)
    return applied
