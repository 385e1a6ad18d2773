"""
Unit tests for upstream sources.
"""

import json

import httpx
import pytest

from shared.config import get_config
from shared.errors import UpstreamError

from service_statuses.app.domain.models import Banner
from service_statuses.app.sources import (
    GraphQLStatusSource,
    RepositorySource,
    RestStatusSource,
    build_source,
)
from service_statuses.app.storage.memory import InMemoryRepository


class TestRepositorySource:
    """Test cases for RepositorySource."""

    @pytest.mark.asyncio
    async def test_fetch_page(self, memory_repository):
        page = await RepositorySource(memory_repository).fetch_page("1", "1")

        assert page.status == {
            "id": "1",
            "body": "just setting up my app",
            "author": "1",
            "createdAt": "2021-05-01T00:00:00Z",
        }
        assert [b["id"] for b in page.banners] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_fetch_page_not_found(self, memory_repository):
        page = await RepositorySource(memory_repository).fetch_page("999", "1")
        assert page.status is None

    @pytest.mark.asyncio
    async def test_fetch_author(self, memory_repository):
        source = RepositorySource(memory_repository)
        assert await source.fetch_author("1") == {"id": "1", "name": "jack"}
        assert await source.fetch_author("2") is None

    @pytest.mark.asyncio
    async def test_banner_group_filtering_preserves_order(self):
        repository = InMemoryRepository(banners=[
            Banner(id="1", group_id="1"),
            Banner(id="2", group_id="1"),
            Banner(id="3", group_id="2"),
        ])
        page = await RepositorySource(repository).fetch_page("1", "1")

        assert [b["id"] for b in page.banners] == ["1", "2"]

    def test_source_is_named_after_repository(self, memory_repository):
        assert RepositorySource(memory_repository).name == "memory"


class TestRestStatusSource:
    """Test cases for RestStatusSource."""

    @pytest.fixture
    def requests(self):
        return []

    def _source(self, handler, requests):
        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return RestStatusSource("http://upstream.test/", transport=httpx.MockTransport(_record))

    @pytest.mark.asyncio
    async def test_fetch_page(self, requests, status_payload, banner_payloads):
        def handler(request):
            if request.url.path == "/api/status/1":
                return httpx.Response(200, json=status_payload)
            if request.url.path == "/api/banners":
                return httpx.Response(200, json=banner_payloads)
            return httpx.Response(404, json={"message": "not found"})

        page = await self._source(handler, requests).fetch_page("1", "1")

        assert page.status == status_payload
        assert page.banners == banner_payloads
        assert [r.url.path for r in requests] == ["/api/status/1", "/api/banners"]
        assert requests[1].url.params["groupId"] == "1"

    @pytest.mark.asyncio
    async def test_not_found_skips_banners(self, requests):
        source = self._source(lambda request: httpx.Response(404, json={"message": "not found"}), requests)
        page = await source.fetch_page("999", "1")

        assert page.status is None
        assert len(requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [500, 502, 503, 401])
    async def test_non_success_status_raises(self, requests, status_code):
        source = self._source(lambda request: httpx.Response(status_code, text="boom"), requests)
        with pytest.raises(UpstreamError) as exc_info:
            await source.fetch_page("1", "1")
        assert exc_info.value.details["status_code"] == status_code
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, requests):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            await self._source(handler, requests).fetch_page("1", "1")
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, requests):
        source = self._source(lambda request: httpx.Response(200, text="<html>"), requests)
        with pytest.raises(UpstreamError):
            await source.fetch_page("1", "1")

    @pytest.mark.asyncio
    async def test_missing_banner_endpoint_raises(self, requests, status_payload):
        def handler(request):
            if request.url.path == "/api/status/1":
                return httpx.Response(200, json=status_payload)
            return httpx.Response(404)

        with pytest.raises(UpstreamError):
            await self._source(handler, requests).fetch_page("1", "1")

    @pytest.mark.asyncio
    async def test_fetch_author_and_statuses(self, requests, author_payload, status_payload):
        def handler(request):
            if request.url.path == "/api/authors/1":
                return httpx.Response(200, json=author_payload)
            if request.url.path == "/api/status":
                return httpx.Response(200, json=[status_payload])
            return httpx.Response(404)

        source = self._source(handler, requests)
        assert await source.fetch_author("1") == author_payload
        assert await source.fetch_author("2") is None
        assert await source.fetch_statuses() == [status_payload]


class TestGraphQLStatusSource:
    """Test cases for GraphQLStatusSource."""

    @pytest.fixture
    def requests(self):
        return []

    def _source(self, handler, requests):
        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(json.loads(request.content))
            return handler(request)

        return GraphQLStatusSource("http://upstream.test/api/graphql", transport=httpx.MockTransport(_record))

    @pytest.mark.asyncio
    async def test_fetch_page_sends_one_query(self, requests, status_payload, banner_payloads):
        body = {"data": {"status": status_payload, "banners": banner_payloads}}
        page = await self._source(lambda request: httpx.Response(200, json=body), requests).fetch_page("1", "2")

        assert page.status == status_payload
        assert page.banners == banner_payloads
        assert len(requests) == 1
        assert requests[0]["operationName"] == "StatusPageProps"
        assert requests[0]["variables"] == {"statusId": "1", "bannerGroupId": "2"}

    @pytest.mark.asyncio
    async def test_null_status_is_not_found(self, requests):
        body = {"data": {"status": None, "banners": []}}
        page = await self._source(lambda request: httpx.Response(200, json=body), requests).fetch_page("9", "1")
        assert page.status is None

    @pytest.mark.asyncio
    async def test_errors_raise(self, requests):
        body = {"data": None, "errors": [{"message": "Cannot query field"}]}
        source = self._source(lambda request: httpx.Response(400, json=body), requests)

        with pytest.raises(UpstreamError) as exc_info:
            await source.fetch_page("1", "1")
        assert exc_info.value.details["errors"] == body["errors"]

    @pytest.mark.asyncio
    async def test_partial_data_with_errors_raises(self, requests, status_payload):
        body = {"data": {"status": status_payload, "banners": None}, "errors": [{"message": "boom"}]}
        source = self._source(lambda request: httpx.Response(200, json=body), requests)

        with pytest.raises(UpstreamError):
            await source.fetch_page("1", "1")

    @pytest.mark.asyncio
    async def test_server_error_raises(self, requests):
        source = self._source(lambda request: httpx.Response(503, text="unavailable"), requests)
        with pytest.raises(UpstreamError):
            await source.fetch_page("1", "1")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, requests):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamError):
            await self._source(handler, requests).fetch_page("1", "1")

    @pytest.mark.asyncio
    async def test_fetch_author(self, requests, author_payload):
        body = {"data": {"author": author_payload}}
        source = self._source(lambda request: httpx.Response(200, json=body), requests)

        assert await source.fetch_author("1") == author_payload
        assert requests[0]["variables"] == {"authorId": "1"}


class TestBuildSource:
    """Test cases for source selection."""

    @pytest.mark.parametrize("page_source,expected", [
        ("store", RepositorySource),
        ("rest", RestStatusSource),
        ("graphql", GraphQLStatusSource),
    ])
    def test_selects_by_config(self, memory_repository, page_source, expected):
        config = get_config("statuses", 8000, page_source=page_source)
        assert isinstance(build_source(config, memory_repository), expected)

    def test_rest_source_uses_configured_base_url(self, memory_repository):
        config = get_config("statuses", 8000, page_source="rest", upstream_base_url="http://api.test/")
        assert build_source(config, memory_repository).base_url == "http://api.test"
