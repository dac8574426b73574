from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./tasks.sqlite3"
    DB_ECHO: bool = False

    API_BASE_URL: str = "http://localhost:3000/api"

    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    SYNC_ENABLED: bool = True
    SYNC_TRANSPORT: Literal["http", "loopback"] = "http"
    SYNC_BATCH_SIZE: int = Field(default=10, ge=1)
    SYNC_RETRY_ATTEMPTS: int = Field(default=3, ge=1)
    SYNC_INTERVAL_SECONDS: float = Field(default=300.0, gt=0)
    SYNC_PROBE_TIMEOUT: float = 5.0
    SYNC_REQUEST_TIMEOUT: float = 30.0

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
