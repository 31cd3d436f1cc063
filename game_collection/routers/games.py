"""Game record routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse

from game_collection.models.game import GameResponse
from game_collection.services.game_service import GameService

router = APIRouter(prefix="/api/games", tags=["games"])


def get_game_service(request: Request) -> GameService:
    """The service built at startup and kept on the application state."""
    return request.app.state.game_service


@router.post("", response_model=GameResponse, status_code=201)
async def create_game(
    payload: dict[str, Any] = Body(...),
    service: GameService = Depends(get_game_service),
):
    """Create a new game."""
    return await service.create(payload)


@router.get("", response_model=list[GameResponse])
async def list_games(
    genre: str | None = None,
    plateforme: str | None = None,
    termine: str | None = None,
    favorite: str | None = None,
    service: GameService = Depends(get_game_service),
):
    """List games, most recently added first, with optional filters."""
    filters = {
        "genre": genre,
        "plateforme": plateforme,
        "termine": termine,
        "favorite": favorite,
    }
    return await service.list_games({k: v for k, v in filters.items() if v is not None})


# ── Static path routes (must come BEFORE /{game_id} to avoid conflicts) ─────

@router.get("/export")
async def export_games(service: GameService = Depends(get_game_service)):
    """Download the whole collection as a JSON attachment."""
    games = await service.export_all()
    return JSONResponse(
        content=games,
        headers={"Content-Disposition": "attachment; filename=games.json"},
    )


# ── Dynamic path routes (/{game_id}) ────────────────────────────────────────

@router.get("/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, service: GameService = Depends(get_game_service)):
    """Get game details."""
    return await service.get(game_id)


@router.put("/{game_id}", response_model=GameResponse)
async def update_game(
    game_id: str,
    payload: dict[str, Any] = Body(...),
    service: GameService = Depends(get_game_service),
):
    """Update some fields of a game."""
    return await service.update(game_id, payload)


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, service: GameService = Depends(get_game_service)):
    """Delete a game."""
    await service.delete(game_id)
    return Response(status_code=204)


@router.post("/{game_id}/favorite", response_model=GameResponse)
async def toggle_favorite(game_id: str, service: GameService = Depends(get_game_service)):
    """Flip the favorite flag of a game."""
    return await service.toggle_favorite(game_id)
