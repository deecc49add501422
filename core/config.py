"""
Application configuration using Pydantic Settings
"""

from pydantic import ValidationError
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional

from core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Migration settings with environment variable support"""

    # Destination database (PostgreSQL)
    PSQL_USER: str
    PSQL_PASS: str
    PSQL_HOST: str = "localhost"
    PSQL_PORT: int = 5432
    PSQL_DATABASE: Optional[str] = None  # libpq default: same as user

    # Source document store (CouchDB)
    COUCHDB_BASE_URL: str
    COUCHDB_DATABASE: str = "snippets"
    COUCHDB_TIMEOUT: Optional[float] = None  # seconds, None = wait forever

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Migration
    PAGE_SIZE: int = 1000
    CHECKPOINT_NAME: str = "couchdb_snippets"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def DATABASE_URL(self) -> URL:
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.PSQL_USER,
            password=self.PSQL_PASS,
            host=self.PSQL_HOST,
            port=self.PSQL_PORT,
            database=self.PSQL_DATABASE or self.PSQL_USER,
        )


def get_settings(**overrides) -> Settings:
    """
    Load settings from the environment.

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            "Missing or invalid migration settings",
            context={"fields": fields},
            original_exception=e
        )
