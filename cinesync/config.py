"""
Process configuration, read from environment variables (optionally via a .env file).
"""

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from cinesync.errors import ConfigurationError

DEFAULT_TMDB_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_IMAGE_HOST = "image.tmdb.org"


class Settings(BaseModel):
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = DEFAULT_TMDB_BASE_URL
    tmdb_language: str = "en-US"
    tmdb_timeout: float = 20.0
    tmdb_image_host: str = DEFAULT_IMAGE_HOST
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            tmdb_api_key=os.getenv("TMDB_API_KEY") or None,
            tmdb_base_url=os.getenv("TMDB_BASE_URL", DEFAULT_TMDB_BASE_URL),
            tmdb_language=os.getenv("TMDB_LANGUAGE", "en-US"),
            tmdb_timeout=float(os.getenv("TMDB_TIMEOUT", "20")),
            tmdb_image_host=os.getenv("TMDB_IMAGE_HOST", DEFAULT_IMAGE_HOST),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def require_tmdb_api_key(self) -> str:
        """Return the TMDB credential or fail fast when it is not configured."""
        if not self.tmdb_api_key:
            raise ConfigurationError("TMDB_API_KEY is required. Put it in your environment or .env file.")
        return self.tmdb_api_key


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
