"""
GraphQL schema for statuses, authors and banners.

Resolvers read from the repository placed in the execution context under
``"repository"``. Field and argument names are exposed in camelCase and
resolved in snake_case.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ariadne import ObjectType, QueryType, make_executable_schema
from graphql import GraphQLResolveInfo

from service_statuses.app.storage.base import StatusRepository


TYPE_DEFS = """
type Query {
  statuses: [Status!]!
  status(id: ID!): Status
  author(id: ID!): Author
  banners(groupId: ID!): [Banner!]!
}

type Status {
  id: ID!
  body: String!
  authorId: ID!
  author: Author
  createdAt: String!
}

type Author {
  id: ID!
  name: String!
}

type Banner {
  id: ID!
  groupId: ID!
  href: String
}
"""

query = QueryType()
status_type = ObjectType("Status")


def _repository(info: GraphQLResolveInfo) -> StatusRepository:
    return info.context["repository"]


@query.field("statuses")
async def resolve_statuses(_, info: GraphQLResolveInfo) -> List[Dict[str, Any]]:
    statuses = await _repository(info).list_statuses()
    return [status.model_dump(mode="json") for status in statuses]


@query.field("status")
async def resolve_status(_, info: GraphQLResolveInfo, id: str) -> Optional[Dict[str, Any]]:
    status = await _repository(info).get_status(id)
    return status.model_dump(mode="json") if status is not None else None


@query.field("author")
async def resolve_author(_, info: GraphQLResolveInfo, id: str) -> Optional[Dict[str, Any]]:
    author = await _repository(info).get_author(id)
    return author.model_dump(mode="json") if author is not None else None


@query.field("banners")
async def resolve_banners(_, info: GraphQLResolveInfo, group_id: str) -> List[Dict[str, Any]]:
    banners = await _repository(info).list_banners(group_id)
    return [banner.model_dump(mode="json") for banner in banners]


@status_type.field("author")
async def resolve_status_author(status: Dict[str, Any], info: GraphQLResolveInfo) -> Optional[Dict[str, Any]]:
    author = await _repository(info).get_author(status["author_id"])
    return author.model_dump(mode="json") if author is not None else None


schema = make_executable_schema(TYPE_DEFS, query, status_type, convert_names_case=True)
