"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    host: str = "0.0.0.0"
    port: int = 3000
    upload_dir: Path = Path("uploads")
    public_mount: str = "/uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    cors_allow_origins: str = "*"
    server_url: str = "http://localhost:3000"
    countdown_from: int = 3
    countdown_step_seconds: float = 0.85
    camera_settle_seconds: float = 0.25
    camera_user_index: int = 0
    camera_environment_index: int = 1
    snapshot_default_width: int = 1280
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
