"""Game collection FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from game_collection import database
from game_collection.config import settings
from game_collection.errors import (
    InvalidIdError,
    NoFieldsError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from game_collection.routers import games, stats
from game_collection.services.game_service import GameService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    db = await database.connect(settings.db_path)
    app.state.game_service = GameService(db)
    logger.info("Database ready at %s", settings.db_path)

    yield

    app.state.game_service = None
    await database.close(db)


app = FastAPI(
    title="Game Collection",
    description="Personal video game collection manager",
    version=VERSION,
    lifespan=lifespan,
)

# CORS: localhost defaults plus any extra origins from GAMECOLLECTION_CORS_ORIGINS
_cors_origins = ["http://localhost:3000", "http://localhost:5173"]
_cors_origins.extend(settings.cors_origin_list)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error translation ──────────────────────────────────────────────────────

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"errors": exc.errors})


@app.exception_handler(InvalidIdError)
@app.exception_handler(NoFieldsError)
async def bad_request_handler(request: Request, exc: InvalidIdError | NoFieldsError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    return JSONResponse(status_code=500, content={"error": exc.message})


# API routers
app.include_router(games.router)
app.include_router(stats.router)


# Health check
@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}


# Serve the front-end after the API routes so it never shadows them
if settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
else:
    logger.warning("Static directory %s not found, front-end not served", settings.static_dir)
