"""
Demo data for a fresh database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from shared.logging import get_logger

from service_statuses.app.domain.models import Author
from service_statuses.app.storage.database import DatabaseRepository
from service_statuses.app.storage.memory import DEFAULT_BANNERS


DEMO_AUTHOR_NAME = "jack"

DEMO_STATUSES = (
    ("just setting up my app", datetime(2006, 3, 22, 11, 0, tzinfo=timezone.utc)),
    ("inviting coworkers", datetime(2014, 3, 22, 12, 0, tzinfo=timezone.utc)),
    ("MySQL server has gone away...?", None),
)


async def seed_demo_data(repository: DatabaseRepository) -> Optional[Author]:
    """Create the demo author with its statuses and the default banners.

    Does nothing and returns ``None`` when the database already holds data,
    so it is safe to run on every startup.
    """
    logger = get_logger("statuses.storage.seed")

    author = await repository.seed_if_empty(DEMO_AUTHOR_NAME, DEMO_STATUSES, DEFAULT_BANNERS)
    if author is None:
        logger.info("Database already seeded, skipping demo data")
        return None

    logger.info("Seeded demo data", author_id=author.id, statuses=len(DEMO_STATUSES))
    return author
