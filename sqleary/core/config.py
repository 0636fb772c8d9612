"""
Configuration Management

Centralized configuration using Pydantic Settings. Every field can be
overridden with a SQLEARY_-prefixed environment variable or a .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Transport and dialect settings."""

    model_config = SettingsConfigDict(
        env_prefix="SQLEARY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Default transport when none is injected
    mode: str = "http"

    # HTTP transport
    http_url: str = "http://localhost:8080"
    http_endpoint: str = "/query"
    http_method: str = "POST"
    api_key: Optional[str] = None
    api_key_header: str = "X-API-Key"
    timeout: float = Field(default=30.0, gt=0)
    verify_ssl: bool = True

    # IPC transport
    ipc_host: str = "localhost"
    ipc_port: int = 6000
    ipc_authkey: Optional[str] = None
    ipc_channel: str = "sql"

    # Direct drivers
    sqlite_database: str = ":memory:"
    duckdb_database: str = ":memory:"

    # Dialect used for the random-order function and sqlglot validation
    sql_dialect: str = "sqlite"


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
