"""
GraphQL source posting typed queries to the statuses GraphQL endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from shared.errors import UpstreamError
from shared.metrics import MetricsCollector

from service_statuses.app.sources.base import StatusSource, UpstreamPage


STATUS_PAGE_QUERY = """
query StatusPageProps($statusId: ID!, $bannerGroupId: ID!) {
  status(id: $statusId) {
    id
    body
    author: authorId
    createdAt
  }
  banners(groupId: $bannerGroupId) {
    id
    groupId
    href
  }
}
"""

AUTHOR_QUERY = """
query StatusAuthor($authorId: ID!) {
  author(id: $authorId) {
    id
    name
  }
}
"""

STATUSES_QUERY = """
query Statuses {
  statuses {
    id
    body
    author: authorId
    createdAt
  }
}
"""


class GraphQLStatusSource(StatusSource):
    """Client for the statuses GraphQL endpoint."""

    name = "graphql"

    def __init__(
        self,
        endpoint_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        super().__init__(metrics)
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._transport = transport

    async def _fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        data = await self._execute(
            STATUS_PAGE_QUERY,
            {"statusId": status_id, "bannerGroupId": banner_group_id},
            "StatusPageProps",
        )
        return UpstreamPage(status=data.get("status"), banners=data.get("banners"))

    async def _fetch_author(self, author_id: str) -> Any:
        data = await self._execute(AUTHOR_QUERY, {"authorId": author_id}, "StatusAuthor")
        return data.get("author")

    async def _fetch_statuses(self) -> Any:
        data = await self._execute(STATUSES_QUERY, {}, "Statuses")
        return data.get("statuses")

    async def _execute(self, query: str, variables: Dict[str, Any], operation_name: str) -> Dict[str, Any]:
        """Run one query and return its ``data`` object."""
        payload = {"query": query, "variables": variables, "operationName": operation_name}
        details = {"operation": operation_name}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint_url, json=payload)
        except httpx.HTTPError as exc:
            self.logger.error("GraphQL upstream unreachable", operation=operation_name, error=str(exc))
            raise UpstreamError(self.name, str(exc), details) from exc

        try:
            body = response.json()
        except ValueError as exc:
            self.logger.error(
                "GraphQL upstream returned invalid JSON",
                operation=operation_name,
                status_code=response.status_code
            )
            raise UpstreamError(self.name, "Invalid JSON body", details) from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            self.logger.error("GraphQL query rejected", operation=operation_name, errors=errors)
            raise UpstreamError(self.name, "Query rejected", {**details, "errors": errors})

        if not response.is_success:
            self.logger.error("GraphQL upstream request failed", operation=operation_name, status_code=response.status_code)
            raise UpstreamError(
                self.name,
                f"Unexpected status {response.status_code}",
                {**details, "status_code": response.status_code}
            )

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError(self.name, "Response carries no data", details)
        return data
