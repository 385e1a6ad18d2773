"""
Storage backends for the Statuses service.

- memory: read-only fixture tuples
- database: SQLAlchemy async ORM (SQLite via aiosqlite, PostgreSQL via asyncpg)
"""

from shared.config import BaseConfig

from .base import StatusRepository
from .database import DatabaseRepository
from .memory import InMemoryRepository


def build_repository(config: BaseConfig) -> StatusRepository:
    """Build the repository selected by ``store_backend``."""
    if config.store_backend == "database":
        return DatabaseRepository(config.database_url, echo=config.sql_echo)
    return InMemoryRepository()


__all__ = [
    "StatusRepository",
    "DatabaseRepository",
    "InMemoryRepository",
    "build_repository",
]
