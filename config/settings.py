"""Settings configuration using pydantic-settings for environment variable management."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "tasktracker"

    JWT_SECRET: str = "change_me_in_production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    CORS_ORIGINS: str = "*"
    LOG_DIR: str = "logs"

    APP_NAME: str = "Task Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True
    )

    @field_validator("CORS_ORIGINS", "LOG_DIR", mode="before")
    @classmethod
    def strip_value(cls, v):
        """Strip surrounding whitespace from string settings."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_rounds(cls, v: int) -> int:
        """bcrypt only accepts work factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    def get_cors_origins(self) -> list[str]:
        """
        Parse comma-separated CORS origins into a list.

        Returns:
            List of origins (e.g., ['http://localhost:3000']), or ['*'] when unset
        """
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
