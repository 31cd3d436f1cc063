"""Shared test fixtures for all test modules."""

import os
import tempfile

import pytest

# ── Environment overrides (must be set before importing game_collection) ────
_tmp = tempfile.mkdtemp(prefix="gc_pytest_")
os.environ["GAMECOLLECTION_DB_PATH"] = os.path.join(_tmp, "unused.db")
os.environ["GAMECOLLECTION_STATIC_DIR"] = os.path.join(_tmp, "no-public")


@pytest.fixture
async def db(tmp_path):
    """A freshly migrated database in a temporary directory."""
    from game_collection import database

    conn = await database.connect(tmp_path / "games.db")
    yield conn
    await database.close(conn)


@pytest.fixture
def service(db):
    from game_collection.services.game_service import GameService

    return GameService(db)


@pytest.fixture
async def client(service):
    """HTTP client talking to the app with the test service installed."""
    import httpx

    from game_collection.main import app

    app.state.game_service = service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.state.game_service = None


@pytest.fixture
def celeste():
    return {"titre": "Celeste", "genre": ["platformer"], "plateforme": ["PC"]}
