"""
REST source calling the sibling ``/api`` endpoints over HTTP.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.errors import UpstreamError
from shared.metrics import MetricsCollector

from service_statuses.app.sources.base import StatusSource, UpstreamPage


class RestStatusSource(StatusSource):
    """Client for the statuses REST API."""

    name = "rest"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        super().__init__(metrics)
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    async def _fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        status = await self._get_json(f"/api/status/{quote(status_id, safe='')}")
        if status is None:
            return UpstreamPage(status=None, banners=[])

        banners = await self._get_json(
            "/api/banners",
            params={"groupId": banner_group_id},
            allow_missing=False,
        )
        return UpstreamPage(status=status, banners=banners)

    async def _fetch_author(self, author_id: str) -> Any:
        return await self._get_json(f"/api/authors/{quote(author_id, safe='')}")

    async def _fetch_statuses(self) -> Any:
        return await self._get_json("/api/status", allow_missing=False)

    async def _get_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        allow_missing: bool = True,
    ) -> Any:
        """GET ``path``; 404 yields ``None`` when ``allow_missing``."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            self.logger.error("REST upstream unreachable", url=url, error=str(exc))
            raise UpstreamError(self.name, str(exc), {"url": url}) from exc

        if response.status_code == 404 and allow_missing:
            self.logger.info("REST resource not found", url=url)
            return None

        if not response.is_success:
            self.logger.error(
                "REST upstream request failed",
                url=url,
                status_code=response.status_code,
                response=response.text
            )
            raise UpstreamError(
                self.name,
                f"Unexpected status {response.status_code}",
                {"url": url, "status_code": response.status_code}
            )

        try:
            return response.json()
        except ValueError as exc:
            self.logger.error("REST upstream returned invalid JSON", url=url)
            raise UpstreamError(self.name, "Invalid JSON body", {"url": url}) from exc
