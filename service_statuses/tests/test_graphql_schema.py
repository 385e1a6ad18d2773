"""
Unit tests for the GraphQL schema.
"""

import pytest
from ariadne import graphql

from service_statuses.app.schema import schema
from service_statuses.app.sources.graphql import AUTHOR_QUERY, STATUS_PAGE_QUERY, STATUSES_QUERY
from service_statuses.app.storage.memory import InMemoryRepository


async def _execute(repository, query, variables=None):
    return await graphql(
        schema,
        {"query": query, "variables": variables or {}},
        context_value={"repository": repository},
    )


class TestGraphQLSchema:
    """Test cases for the statuses schema."""

    @pytest.mark.asyncio
    async def test_status_page_query(self, memory_repository):
        success, result = await _execute(
            memory_repository,
            STATUS_PAGE_QUERY,
            {"statusId": "1", "bannerGroupId": "1"},
        )

        assert success
        assert "errors" not in result
        assert result["data"]["status"] == {
            "id": "1",
            "body": "just setting up my app",
            "author": "1",
            "createdAt": "2021-05-01T00:00:00Z",
        }
        assert result["data"]["banners"] == [
            {"id": "2", "groupId": "1", "href": None},
            {"id": "1", "groupId": "1", "href": None},
        ]

    @pytest.mark.asyncio
    async def test_unknown_status_is_null(self, memory_repository):
        success, result = await _execute(
            memory_repository,
            STATUS_PAGE_QUERY,
            {"statusId": "999", "bannerGroupId": "1"},
        )

        assert success
        assert result["data"]["status"] is None

    @pytest.mark.asyncio
    async def test_nested_author(self, memory_repository):
        query = "{ statuses { id author { id name } } }"
        success, result = await _execute(memory_repository, query)

        assert success
        assert result["data"]["statuses"] == [
            {"id": "2", "author": {"id": "1", "name": "jack"}},
            {"id": "1", "author": {"id": "1", "name": "jack"}},
        ]

    @pytest.mark.asyncio
    async def test_author_query(self, memory_repository):
        success, result = await _execute(memory_repository, AUTHOR_QUERY, {"authorId": "1"})
        assert success
        assert result["data"]["author"] == {"id": "1", "name": "jack"}

    @pytest.mark.asyncio
    async def test_statuses_query(self, memory_repository):
        success, result = await _execute(memory_repository, STATUSES_QUERY)
        assert success
        assert [s["id"] for s in result["data"]["statuses"]] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_missing_variable_is_rejected(self, memory_repository):
        success, result = await _execute(memory_repository, STATUS_PAGE_QUERY, {"statusId": "1"})
        assert not success
        assert result["errors"]

    @pytest.mark.asyncio
    async def test_empty_banner_group(self):
        repository = InMemoryRepository(banners=())
        success, result = await _execute(repository, "{ banners(groupId: \"1\") { id } }")
        assert success
        assert result["data"]["banners"] == []
