"""
Fixed in-memory collections standing in for a database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from service_statuses.app.domain.models import Author, Banner, Status
from service_statuses.app.storage.base import StatusRepository


DEFAULT_AUTHORS: Sequence[Author] = (
    Author(id="1", name="jack"),
)

DEFAULT_STATUSES: Sequence[Status] = (
    Status(
        id="2",
        author_id="1",
        body="inviting coworkers",
        created_at=datetime(2021, 5, 2, tzinfo=timezone.utc),
    ),
    Status(
        id="1",
        author_id="1",
        body="just setting up my app",
        created_at=datetime(2021, 5, 1, tzinfo=timezone.utc),
    ),
)

DEFAULT_BANNERS: Sequence[Banner] = (
    Banner(id="2", group_id="1", href=None),
    Banner(id="1", group_id="1", href=None),
)


class InMemoryRepository(StatusRepository):
    """Find-by-id scans over read-only tuples."""

    name = "memory"

    def __init__(
        self,
        statuses: Iterable[Status] = DEFAULT_STATUSES,
        authors: Iterable[Author] = DEFAULT_AUTHORS,
        banners: Iterable[Banner] = DEFAULT_BANNERS,
    ) -> None:
        self._statuses = tuple(statuses)
        self._authors = tuple(authors)
        self._banners = tuple(banners)

    async def get_status(self, status_id: str) -> Optional[Status]:
        return next((s for s in self._statuses if s.id == status_id), None)

    async def list_statuses(self) -> List[Status]:
        return sorted(self._statuses, key=lambda s: s.created_at, reverse=True)

    async def get_author(self, author_id: str) -> Optional[Author]:
        return next((a for a in self._authors if a.id == author_id), None)

    async def list_banners(self, group_id: str) -> List[Banner]:
        return [b for b in self._banners if b.group_id == group_id]
