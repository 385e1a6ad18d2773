"""
Storage interface shared by the in-memory fixtures and the database.
"""

from __future__ import annotations

import abc
from typing import List, Optional

from service_statuses.app.domain.models import Author, Banner, Status


class StatusRepository(abc.ABC):
    """Read access to statuses, authors and banners."""

    name: str = "repository"

    @abc.abstractmethod
    async def get_status(self, status_id: str) -> Optional[Status]:
        ...

    @abc.abstractmethod
    async def list_statuses(self) -> List[Status]:
        """All statuses, newest first."""

    @abc.abstractmethod
    async def get_author(self, author_id: str) -> Optional[Author]:
        ...

    @abc.abstractmethod
    async def list_banners(self, group_id: str) -> List[Banner]:
        """Banners of one group, in display order."""

    async def close(self) -> None:
        """Release resources held by the repository."""

    async def ping(self) -> bool:
        return True
