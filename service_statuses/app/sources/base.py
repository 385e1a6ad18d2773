"""
Upstream data source interface used by page assembly.

Sources return raw, untrusted payloads; validation happens in the domain
layer so every strategy goes through the same checks.
"""

from __future__ import annotations

import abc
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, TypeVar

from shared.logging import get_logger
from shared.metrics import MetricsCollector


T = TypeVar("T")


@dataclass(frozen=True)
class UpstreamPage:
    """Raw status page payload: ``status`` is ``None`` when not found."""

    status: Any
    banners: Any


class StatusSource(abc.ABC):
    """Resolve statuses by identifier from one upstream.

    Every call is attempted exactly once. Failures surface as
    :class:`shared.errors.UpstreamError`; "not found" is ``None``.
    """

    name: str = "source"

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.metrics = metrics
        self.logger = get_logger(f"statuses.sources.{self.name}")

    async def fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        return await self._observed("fetch_page", self._fetch_page(status_id, banner_group_id))

    async def fetch_author(self, author_id: str) -> Any:
        return await self._observed("fetch_author", self._fetch_author(author_id))

    async def fetch_statuses(self) -> Any:
        return await self._observed("fetch_statuses", self._fetch_statuses())

    @abc.abstractmethod
    async def _fetch_page(self, status_id: str, banner_group_id: str) -> UpstreamPage:
        ...

    @abc.abstractmethod
    async def _fetch_author(self, author_id: str) -> Any:
        ...

    @abc.abstractmethod
    async def _fetch_statuses(self) -> Any:
        ...

    async def _observed(self, operation: str, awaitable: Awaitable[T]) -> T:
        start_time = time.time()
        outcome = "ok"
        try:
            return await awaitable
        except Exception:
            outcome = "error"
            raise
        finally:
            if self.metrics is not None:
                self.metrics.increment_counter(
                    "upstream_requests_total",
                    source=self.name,
                    operation=operation,
                    outcome=outcome,
                )
                self.metrics.observe_histogram(
                    "upstream_request_duration_seconds",
                    time.time() - start_time,
                    source=self.name,
                    operation=operation,
                )
