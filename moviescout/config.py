"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

from moviescout.errors import ConfigurationError


class Settings(BaseSettings):
    """MovieScout settings loaded from environment variables."""

    # Required at startup (TMDB v4 read access token)
    tmdb_api_key: str = ""

    # Metadata API
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/w500"
    fetch_timeout_seconds: float = 10.0

    # Search behaviour
    debounce_ms: int = 500
    trending_limit: int = 5

    # Data paths
    data_dir: Path = Path("/data")
    db_path: Path = Path("/data/moviescout.db")

    # CORS (comma-separated extra origins, in addition to localhost defaults)
    cors_origins: str = ""

    log_level: str = "INFO"

    model_config = {
        "env_prefix": "MOVIESCOUT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def require_api_key(self) -> str:
        """Return the TMDB token, or fail before any request goes out unauthenticated."""
        key = self.tmdb_api_key.strip()
        if not key:
            raise ConfigurationError(
                "MOVIESCOUT_TMDB_API_KEY is not set. "
                "Create a TMDB read access token and export it before starting."
            )
        return key


# Singleton instance
settings = Settings()
