"""Pydantic models for game records."""

from typing import Any

from pydantic import BaseModel


class GameResponse(BaseModel):
    id: str
    titre: str | None = None
    genre: list[Any] | None = None
    plateforme: list[Any] | None = None
    editeur: str | None = None
    developpeur: str | None = None
    annee_sortie: int | float | None = None
    temps_jeu_heures: int | float | None = 0
    termine: bool | None = False
    favorite: bool | None = False
    date_ajout: str
    date_modification: str


class StatsResponse(BaseModel):
    totalGames: int
    totalPlayTime: int | float
    finishedGames: int
    favoriteGames: int
