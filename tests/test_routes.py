"""HTTP-level tests: status codes and bodies for each route."""

from unittest.mock import AsyncMock, MagicMock

import aiosqlite
import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_create_and_get(client, celeste):
    response = await client.post("/api/games", json=celeste)
    assert response.status_code == 201
    game = response.json()
    assert game["favorite"] is False
    assert game["temps_jeu_heures"] == 0

    response = await client.get(f"/api/games/{game['id']}")
    assert response.status_code == 200
    assert response.json() == game


@pytest.mark.asyncio
async def test_create_invalid_returns_all_errors(client):
    response = await client.post("/api/games", json={"titre": "", "annee_sortie": 1900})
    assert response.status_code == 400
    assert response.json() == {
        "errors": [
            "titre requis",
            "genre requis",
            "plateforme requis",
            "annee_sortie doit être >= 1970",
        ]
    }


@pytest.mark.asyncio
async def test_invalid_and_missing_ids_are_distinct(client):
    response = await client.get("/api/games/not-an-id")
    assert response.status_code == 400
    assert response.json() == {"error": "id invalide"}

    response = await client.get("/api/games/123456")
    assert response.status_code == 404
    assert response.json() == {"error": "non trouvé"}


@pytest.mark.asyncio
async def test_update(client, celeste):
    game = (await client.post("/api/games", json=celeste)).json()

    response = await client.put(f"/api/games/{game['id']}", json={"termine": True})
    assert response.status_code == 200
    assert response.json()["termine"] is True

    response = await client.put(f"/api/games/{game['id']}", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Aucun champ à mettre à jour"}

    response = await client.put(f"/api/games/{game['id']}", json={"temps_jeu_heures": -3})
    assert response.status_code == 400
    assert response.json() == {"errors": ["temps_jeu_heures doit être >= 0"]}


@pytest.mark.asyncio
async def test_delete(client, celeste):
    game = (await client.post("/api/games", json=celeste)).json()

    response = await client.delete(f"/api/games/{game['id']}")
    assert response.status_code == 204
    assert response.content == b""

    response = await client.delete(f"/api/games/{game['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_favorite(client, celeste):
    game = (await client.post("/api/games", json=celeste)).json()
    response = await client.post(f"/api/games/{game['id']}/favorite")
    assert response.status_code == 200
    assert response.json()["favorite"] is True


@pytest.mark.asyncio
async def test_list_with_filters(client, celeste):
    await client.post("/api/games", json={**celeste, "termine": True})
    await client.post("/api/games", json={**celeste, "titre": "Hollow Knight"})

    response = await client.get("/api/games", params={"termine": "true"})
    assert response.status_code == 200
    assert [g["titre"] for g in response.json()] == ["Celeste"]

    response = await client.get("/api/games", params={"termine": "maybe"})
    assert [g["titre"] for g in response.json()] == ["Hollow Knight", "Celeste"]

    response = await client.get("/api/games", params={"plateforme": "PS5"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_export_is_attachment(client, celeste):
    await client.post("/api/games", json=celeste)
    response = await client.get("/api/games/export")
    assert response.status_code == 200
    assert response.headers["content-disposition"] == "attachment; filename=games.json"
    assert [g["titre"] for g in response.json()] == ["Celeste"]


@pytest.mark.asyncio
async def test_stats(client, celeste):
    response = await client.get("/api/stats")
    assert response.json() == {
        "totalGames": 0,
        "totalPlayTime": 0,
        "finishedGames": 0,
        "favoriteGames": 0,
    }

    await client.post("/api/games", json={**celeste, "temps_jeu_heures": 12, "favorite": True})
    response = await client.get("/api/stats")
    assert response.json() == {
        "totalGames": 1,
        "totalPlayTime": 12,
        "finishedGames": 0,
        "favoriteGames": 1,
    }


@pytest.mark.asyncio
async def test_store_failure_hides_details(client):
    from game_collection.main import app
    from game_collection.services.game_service import GameService

    db = MagicMock()
    db.execute = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
    app.state.game_service = GameService(db)

    response = await client.get("/api/stats")
    assert response.status_code == 500
    assert response.json() == {"error": "erreur serveur"}
    assert "locked" not in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["Infinity", "-Infinity", "NaN"])
async def test_non_finite_play_time_is_rejected(client, token):
    body = '{"titre": "Celeste", "genre": ["platformer"], "plateforme": ["PC"], "temps_jeu_heures": %s}' % token
    response = await client.post(
        "/api/games", content=body, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"errors": ["temps_jeu_heures doit être un nombre"]}

    response = await client.get("/api/games")
    assert response.json() == []


@pytest.mark.asyncio
async def test_out_of_range_integer_is_a_validation_error(client, celeste):
    response = await client.post("/api/games", json={**celeste, "temps_jeu_heures": 10**20})
    assert response.status_code == 400
    assert response.json() == {"errors": [f"temps_jeu_heures doit être <= {2**63 - 1}"]}
