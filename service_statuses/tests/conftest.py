"""
Shared fixtures for Statuses service tests.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from shared.config import get_config
from shared.errors import UpstreamError

from service_statuses.app.caching.cache_control import CacheControlPolicy
from service_statuses.app.domain.resolver import StatusPageResolver
from service_statuses.app.sources.base import StatusSource, UpstreamPage
from service_statuses.app.storage.memory import InMemoryRepository


class StubSource(StatusSource):
    """Source returning canned payloads and recording every call."""

    name = "stub"

    def __init__(
        self,
        *,
        statuses: Optional[Dict[str, Any]] = None,
        authors: Optional[Dict[str, Any]] = None,
        banners: Any = None,
        listing: Any = None,
        page_error: Optional[Exception] = None,
        author_error: Optional[Exception] = None,
    ):
        super().__init__()
        self.statuses = statuses or {}
        self.authors = authors or {}
        self.banners = [] if banners is None else banners
        self.listing = [] if listing is None else listing
        self.page_error = page_error
        self.author_error = author_error
        self.calls: List[tuple] = []

    async def _fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        self.calls.append(("fetch_page", status_id, banner_group_id))
        if self.page_error is not None:
            raise self.page_error
        return UpstreamPage(status=self.statuses.get(status_id), banners=self.banners)

    async def _fetch_author(self, author_id: str) -> Any:
        self.calls.append(("fetch_author", author_id))
        if self.author_error is not None:
            raise self.author_error
        return self.authors.get(author_id)

    async def _fetch_statuses(self) -> Any:
        self.calls.append(("fetch_statuses",))
        if self.page_error is not None:
            raise self.page_error
        return self.listing


@pytest.fixture
def make_source():
    """Build :class:`StubSource` instances with canned payloads."""
    return StubSource


@pytest.fixture
def status_payload():
    """Well-formed upstream status payload."""
    return {
        "id": "1",
        "body": "just setting up my app",
        "author": "1",
        "createdAt": "2021-05-01T00:00:00.000Z",
    }


@pytest.fixture
def author_payload():
    return {"id": "1", "name": "jack"}


@pytest.fixture
def banner_payloads():
    return [
        {"id": "2", "groupId": "1", "href": None},
        {"id": "1", "groupId": "1", "href": "https://example.com/"},
    ]


@pytest.fixture
def cache_policy():
    return CacheControlPolicy.from_durations(fresh_minutes=10, stale_days=30)


@pytest.fixture
def make_resolver(cache_policy):
    """Build a resolver around any source."""

    def _make(source: StatusSource, **overrides) -> StatusPageResolver:
        options = {
            "cache_policy": cache_policy,
            "banner_group_id": "1",
            "fallback_author_name": "John Doe",
        }
        options.update(overrides)
        return StatusPageResolver(source, **options)

    return _make


@pytest.fixture
def memory_repository():
    return InMemoryRepository()


@pytest.fixture
def make_config():
    """Build a service config with overrides."""

    def _make(**overrides):
        options = {"env": "local", "log_level": "warning", "store_backend": "memory", "page_source": "store"}
        options.update(overrides)
        return get_config("statuses", 8000, **options)

    return _make


@pytest.fixture
def created_at():
    return datetime(2021, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def upstream_down():
    return UpstreamError("stub", "connection refused")
