"""Run the API with uvicorn: ``python -m game_collection``."""

import uvicorn

from game_collection.config import settings


def main() -> None:
    uvicorn.run(
        "game_collection.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
