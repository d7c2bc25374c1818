from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # `.env.prod` takes priority over `.env`
        env_file=(".env", ".env.prod")
    )

    # Falls back to database._build_database_url() when unset
    database_url: Optional[str] = None

    # Logging
    log_format: str = "json"
    log_level: str = "INFO"

    # The browser extension posts from linkedin.com pages
    cors_origins: List[str] = [
        "http://localhost",
        "http://localhost:5000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
        "https://www.linkedin.com",
    ]

    # Window used by /api/deadlines/upcoming when no ?days= is given
    upcoming_deadline_days: int = 7


@lru_cache()
def get_settings() -> Settings:
    return Settings()
