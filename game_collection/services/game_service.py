"""Game record service: validation, persistence and response shaping.

``GameService`` is built once at startup around an open aiosqlite
connection and shared by every request. It holds no state of its own
between calls; everything lives in the ``games`` table.
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import aiosqlite

from game_collection.database import is_valid_id
from game_collection.errors import (
    InvalidIdError,
    NoFieldsError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from game_collection.services.validation import (
    UPDATABLE_FIELDS,
    build_record,
    validate_game,
)

logger = logging.getLogger(__name__)

_LIST_FIELDS = ("genre", "plateforme")
_BOOL_FIELDS = ("termine", "favorite")
_BOOL_FILTERS = {"true": True, "false": False}


class MonotonicClock:
    """UTC wall clock that never hands out the same or an earlier instant twice."""

    def __init__(self, source=None):
        self._source = source or (lambda: datetime.now(timezone.utc))
        self._last: datetime | None = None

    def now(self) -> datetime:
        current = self._source()
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current


def _timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="microseconds")


def _to_column(key: str, value):
    """Convert a field value to its SQLite column representation."""
    if value is None:
        return None
    if key in _LIST_FIELDS:
        return json.dumps(value, ensure_ascii=False)
    if key in _BOOL_FIELDS:
        return int(value)
    return value


def to_response(row) -> dict | None:
    """Shape a stored row into the external record representation.

    The integer primary key becomes a string ``id``; JSON list columns are
    decoded and 0/1 columns become booleans. A missing row maps to None.
    """
    if row is None:
        return None
    record = dict(row)
    game_id = record.pop("id")
    for key in _LIST_FIELDS:
        if record.get(key) is not None:
            record[key] = json.loads(record[key])
    for key in _BOOL_FIELDS:
        if record.get(key) is not None:
            record[key] = bool(record[key])
    return {"id": str(game_id), **record}


class GameService:
    """Reads and writes game records against one SQLite connection."""

    def __init__(self, db: aiosqlite.Connection, clock: MonotonicClock | None = None):
        self._db = db
        self._clock = clock or MonotonicClock()

    @asynccontextmanager
    async def _store(self, action: str):
        """Yield the connection, turning store failures into StoreUnavailableError."""
        try:
            yield self._db
        except (aiosqlite.Error, ValueError, OverflowError) as exc:
            logger.exception("Store failure during %s", action)
            raise StoreUnavailableError() from exc

    @staticmethod
    def _check_id(game_id: str) -> int:
        if not is_valid_id(game_id):
            raise InvalidIdError()
        return int(game_id)

    async def _fetch(self, db: aiosqlite.Connection, game_id: int):
        cursor = await db.execute("SELECT * FROM games WHERE id = ?", (game_id,))
        return await cursor.fetchone()

    async def create(self, payload: dict) -> dict:
        """Validate *payload* and insert a new game. Returns the created record."""
        errors = validate_game(payload, is_update=False)
        if errors:
            raise ValidationError(errors)

        now = _timestamp(self._clock.now())
        fields = {
            **{k: _to_column(k, v) for k, v in build_record(payload).items()},
            "date_ajout": now,
            "date_modification": now,
        }
        columns = ", ".join(fields.keys())
        placeholders = ", ".join(["?"] * len(fields))

        async with self._store("create") as db:
            cursor = await db.execute(
                f"INSERT INTO games ({columns}) VALUES ({placeholders})",
                list(fields.values()),
            )
            await db.commit()
            row = await self._fetch(db, cursor.lastrowid)

        logger.info("Created game %s (%s)", row["id"], row["titre"])
        return to_response(row)

    async def list_games(self, filters: dict | None = None) -> list[dict]:
        """List games, most recently added first.

        ``genre`` and ``plateforme`` keep records whose list contains the
        value. ``termine`` and ``favorite`` only apply for the literal
        strings "true" and "false"; any other value is ignored.
        """
        filters = filters or {}
        where = []
        values = []

        for key in _LIST_FIELDS:
            if filters.get(key):
                where.append(f"EXISTS (SELECT 1 FROM json_each(g.{key}) WHERE json_each.value = ?)")
                values.append(filters[key])

        for key in _BOOL_FIELDS:
            flag = _BOOL_FILTERS.get(filters.get(key))
            if flag is not None:
                where.append(f"g.{key} = ?")
                values.append(int(flag))

        where_clause = f"WHERE {' AND '.join(where)}" if where else ""

        async with self._store("list") as db:
            cursor = await db.execute(
                f"""
                SELECT g.* FROM games g
                {where_clause}
                ORDER BY g.date_ajout DESC, g.id DESC
                """,
                values,
            )
            rows = await cursor.fetchall()
            return [to_response(row) for row in rows]

    async def get(self, game_id: str) -> dict:
        """Get a single game by id."""
        key = self._check_id(game_id)
        async with self._store("get") as db:
            row = await self._fetch(db, key)
            if row is None:
                raise NotFoundError()
            return to_response(row)

    async def update(self, game_id: str, payload: dict) -> dict:
        """Apply a partial update.

        Only whitelisted keys are written. A key present with a null value
        is written as null. ``date_modification`` is always refreshed.
        """
        key = self._check_id(game_id)
        errors = validate_game(payload, is_update=True)
        if errors:
            raise ValidationError(errors)

        updates = {k: _to_column(k, payload[k]) for k in UPDATABLE_FIELDS if k in payload}
        if not updates:
            raise NoFieldsError()
        updates["date_modification"] = _timestamp(self._clock.now())

        set_clause = ", ".join(f"{k} = ?" for k in updates)
        async with self._store("update") as db:
            cursor = await db.execute(
                f"UPDATE games SET {set_clause} WHERE id = ?",
                [*updates.values(), key],
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError()
            row = await self._fetch(db, key)

        if row is None:
            raise NotFoundError()
        logger.info("Updated game %s: %s", key, ", ".join(updates))
        return to_response(row)

    async def delete(self, game_id: str) -> None:
        """Delete a game permanently."""
        key = self._check_id(game_id)
        async with self._store("delete") as db:
            cursor = await db.execute("DELETE FROM games WHERE id = ?", (key,))
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError()
        logger.info("Deleted game %s", key)

    async def toggle_favorite(self, game_id: str) -> dict:
        """Flip the favorite flag.

        Read then write, with no atomicity: two concurrent toggles on the
        same game race and the last write wins. Other fields are not
        revalidated.
        """
        key = self._check_id(game_id)
        async with self._store("toggle_favorite") as db:
            current = await self._fetch(db, key)
            if current is None:
                raise NotFoundError()

            cursor = await db.execute(
                "UPDATE games SET favorite = ?, date_modification = ? WHERE id = ?",
                (int(not current["favorite"]), _timestamp(self._clock.now()), key),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError()
            row = await self._fetch(db, key)

        if row is None:
            raise NotFoundError()
        logger.info("Game %s favorite=%s", key, bool(row["favorite"]))
        return to_response(row)

    async def stats(self) -> dict:
        """Aggregate counts over the whole collection."""
        async with self._store("stats") as db:
            cursor = await db.execute("SELECT temps_jeu_heures, termine, favorite FROM games")
            rows = await cursor.fetchall()

        return {
            "totalGames": len(rows),
            "totalPlayTime": sum(row["temps_jeu_heures"] or 0 for row in rows),
            "finishedGames": sum(1 for row in rows if row["termine"]),
            "favoriteGames": sum(1 for row in rows if row["favorite"]),
        }

    async def export_all(self) -> list[dict]:
        """Every game in store order, for bulk download."""
        async with self._store("export") as db:
            cursor = await db.execute("SELECT * FROM games ORDER BY id")
            rows = await cursor.fetchall()
            return [to_response(row) for row in rows]
