"""
Shared configuration management for Birdhouse services.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="BIRDHOUSE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Storage
    store_backend: Literal["memory", "database"] = Field(default="memory")
    database_url: str = Field(default="sqlite+aiosqlite:///./birdhouse.db")
    sql_echo: bool = Field(default=False)
    seed_database: bool = Field(default=False)

    # Page data source
    page_source: Literal["store", "rest", "graphql"] = Field(default="store")
    upstream_base_url: str = Field(default="http://localhost:8000")
    graphql_endpoint_url: str = Field(default="http://localhost:8000/api/graphql")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # Page assembly
    banner_group_id: str = Field(default="1", min_length=1)
    fallback_author_name: str = Field(default="John Doe")
    surface_upstream_errors: bool = Field(default=False)

    # Edge caching
    cache_fresh_minutes: int = Field(default=10, gt=0)
    cache_stale_days: int = Field(default=30, gt=0)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
