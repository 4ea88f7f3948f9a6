"""Core application configuration and settings.

Handles environment variables, repository backend selection and Redis
connection settings. Settings are resolved once at startup and passed
explicitly to the application factory.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


# Load environment variables
ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT / ".env")

REPOSITORY_INMEMORY = "INMEMORY"
REPOSITORY_REDIS = "REDIS"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: Optional[bool] = Field(default=None, alias="LOG_JSON")

    # Persistence backend: INMEMORY (dev/tests) or REDIS (production)
    repository_type: str = Field(default=REPOSITORY_REDIS, alias="REPOSITORY_TYPE")

    # Redis Configuration
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    redis_db: int = Field(default=0, alias="REDIS_DB")
    redis_socket_timeout: float = Field(default=5.0, alias="REDIS_SOCKET_TIMEOUT")
    employees_key_prefix: str = Field(default="corporate-employees:", alias="EMPLOYEES_KEY_PREFIX")
    bookings_key_prefix: str = Field(default="corporate-bookings:", alias="BOOKINGS_KEY_PREFIX")

    # API Settings
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ],
        alias="CORS_ORIGINS"
    )

    class Config:
        case_sensitive = False
        env_file = ".env"
        populate_by_name = True
        extra = "ignore"

    @property
    def use_json_logs(self) -> bool:
        """JSON logs are on in production unless LOG_JSON says otherwise."""
        if self.log_json is not None:
            return self.log_json
        return self.environment == "production"

    def validate_required_settings(self):
        """Validate that required settings are present."""
        if self.repository_type.upper() == REPOSITORY_REDIS and not self.redis_host:
            raise ValueError(
                "REDIS_HOST not set. Define REDIS_HOST in .env "
                "or set REPOSITORY_TYPE=INMEMORY for local development."
            )
        if self.redis_port <= 0:
            raise ValueError("REDIS_PORT must be a positive integer.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, resolved on first use."""
    return Settings()
