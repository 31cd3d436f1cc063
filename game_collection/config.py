"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Game collection settings loaded from environment variables."""

    # Storage
    db_path: Path = Path("data/game_collection.db")

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000

    # Front-end files served at / when the directory exists
    static_dir: Path = Path("public")

    # CORS (comma-separated extra origins, in addition to localhost defaults)
    cors_origins: str = ""

    log_level: str = "INFO"

    model_config = {
        "env_prefix": "GAMECOLLECTION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Singleton instance
settings = Settings()
