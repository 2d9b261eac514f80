"""
Configuration Management.

Loads secrets from config/.env (or the process environment) and settings
from config/settings/*.yaml.

Secrets (.env):
    JWT_SECRET, DB_PASSWORD, DATABASE_URL,
    CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET

Settings (YAML):
    application.yaml   - App identity, server, cors
    database.yaml      - Database connection and pool settings
    logging.yaml       - Logging configuration
    security.yaml      - JWT, password hashing, startup checks
    media.yaml         - Hosted media service (avatar uploads)
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notely.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    MediaSchema,
    SecuritySchema,
)


def find_project_root() -> Path:
    """Walk up from the working directory to the folder holding .project_root."""
    for candidate in (Path.cwd(), *Path.cwd().parents):
        if (candidate / ".project_root").exists():
            return candidate
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read one file from config/settings/ into a dict."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    return yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    jwt_secret: str
    db_password: str = ""
    database_url: str | None = None
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    try:
        return schema_cls.model_validate(load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    Typed view over config/settings/*.yaml.

    Every file is validated when the instance is built, so a bad key
    fails at startup rather than on first use.
    """

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    security: SecuritySchema
    media: MediaSchema

    _SECTIONS: dict[str, type[BaseModel]] = {
        "application": ApplicationSchema,
        "database": DatabaseSchema,
        "logging": LoggingSchema,
        "security": SecuritySchema,
        "media": MediaSchema,
    }

    def __init__(self) -> None:
        for section, schema_cls in self._SECTIONS.items():
            setattr(self, section, _load_validated(schema_cls, f"{section}.yaml"))


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Construct database URL from YAML config and secrets.

    A DATABASE_URL secret, when set, is used as-is.

    Args:
        async_driver: Use asyncpg driver if True, psycopg2 if False.

    Returns:
        Database connection URL string.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"
