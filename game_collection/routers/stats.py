"""Collection statistics route."""

from fastapi import APIRouter, Depends

from game_collection.models.game import StatsResponse
from game_collection.routers.games import get_game_service
from game_collection.services.game_service import GameService

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def collection_stats(service: GameService = Depends(get_game_service)):
    """Totals over the whole collection."""
    return await service.stats()
