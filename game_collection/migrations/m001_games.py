"""Games table.

List fields are JSON text, booleans are 0/1, timestamps are ISO-8601 UTC
strings with microseconds. Columns other than the timestamps are nullable
because an update may set a field to null. NUMERIC affinity stores
integral reals as integers, so 2.0 reads back as 2.
"""

import aiosqlite


async def upgrade(db: aiosqlite.Connection) -> None:
    await db.execute("""
        CREATE TABLE games (
            id                INTEGER PRIMARY KEY AUTOINCREMENT,
            titre             TEXT,
            genre             TEXT,
            plateforme        TEXT,
            editeur           TEXT,
            developpeur       TEXT,
            annee_sortie      NUMERIC,
            temps_jeu_heures  NUMERIC DEFAULT 0,
            termine           INTEGER DEFAULT 0,
            favorite          INTEGER DEFAULT 0,
            date_ajout        TEXT NOT NULL,
            date_modification TEXT NOT NULL
        )
    """)
    await db.execute("CREATE INDEX idx_games_date_ajout ON games(date_ajout)")
    await db.commit()
