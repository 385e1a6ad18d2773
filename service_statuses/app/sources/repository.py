"""
Direct lookup through a storage repository (fixtures or ORM).
"""

from __future__ import annotations

from typing import Any, Optional

from shared.metrics import MetricsCollector

from service_statuses.app.sources.base import StatusSource, UpstreamPage
from service_statuses.app.storage.base import StatusRepository


class RepositorySource(StatusSource):
    """Serve page payloads straight from a repository."""

    def __init__(self, repository: StatusRepository, metrics: Optional[MetricsCollector] = None):
        self.name = repository.name
        super().__init__(metrics)
        self.repository = repository

    async def _fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        status = await self.repository.get_status(status_id)
        if status is None:
            self.logger.info("Status not found", status_id=status_id)
            return UpstreamPage(status=None, banners=[])

        banners = await self.repository.list_banners(banner_group_id)
        return UpstreamPage(
            status=status.to_payload(),
            banners=[banner.to_payload() for banner in banners],
        )

    async def _fetch_author(self, author_id: str) -> Any:
        author = await self.repository.get_author(author_id)
        return author.to_payload() if author is not None else None

    async def _fetch_statuses(self) -> Any:
        return [status.to_payload() for status in await self.repository.list_statuses()]
