"""
Upstream sources for status pages.

All strategies implement :class:`StatusSource`; the one in use is picked
from ``page_source`` when the service starts.
"""

from typing import Optional

import httpx

from shared.config import BaseConfig
from shared.metrics import MetricsCollector

from service_statuses.app.storage.base import StatusRepository

from .base import StatusSource, UpstreamPage
from .graphql import GraphQLStatusSource
from .repository import RepositorySource
from .rest import RestStatusSource


def build_source(
    config: BaseConfig,
    repository: StatusRepository,
    *,
    metrics: Optional[MetricsCollector] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StatusSource:
    """Build the source selected by ``page_source``."""
    if config.page_source == "rest":
        return RestStatusSource(
            config.upstream_base_url,
            timeout=config.upstream_timeout_seconds,
            transport=transport,
            metrics=metrics,
        )
    if config.page_source == "graphql":
        return GraphQLStatusSource(
            config.graphql_endpoint_url,
            timeout=config.upstream_timeout_seconds,
            transport=transport,
            metrics=metrics,
        )
    return RepositorySource(repository, metrics=metrics)


__all__ = [
    "StatusSource",
    "UpstreamPage",
    "GraphQLStatusSource",
    "RepositorySource",
    "RestStatusSource",
    "build_source",
]
