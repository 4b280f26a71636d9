"""Client-side settings for talking to the task tracker API."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables."""

    TASKS_API_URL: str = "http://localhost:4000"
    TASKS_TOKEN_FILE: Path = Path.home() / ".tasktracker" / "token.json"
    TASKS_API_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )
