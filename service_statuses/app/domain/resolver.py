"""
Request-time resolution of status pages.

One resolution per request, in strict order: identifier validation,
upstream fetch, shape validation, author binding, cache directive. Any
not-found outcome short-circuits and leaves the response headers untouched.
Nothing is cached in-process and failed upstream calls are not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, MutableMapping, Optional

from shared.errors import (
    BirdhouseException,
    InvalidIdentifierError,
    ShapeValidationError,
    UpstreamError,
)
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from service_statuses.app.caching.cache_control import CacheControlPolicy
from service_statuses.app.domain.models import AuthoredStatus, Status, StatusPageData
from service_statuses.app.domain.validation import (
    parse_author,
    parse_banners,
    parse_optional_status,
    parse_statuses,
    validate_identifier,
)
from service_statuses.app.sources.base import StatusSource


OUTCOME_OK = "ok"
OUTCOME_INVALID_IDENTIFIER = "invalid_identifier"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_UPSTREAM_ERROR = "upstream_error"
OUTCOME_INVALID_SHAPE = "invalid_shape"


@dataclass(frozen=True)
class _Resolution:
    outcome: str
    error: Optional[BirdhouseException] = None

    @property
    def found(self) -> bool:
        return self.outcome == OUTCOME_OK

    @property
    def upstream_failed(self) -> bool:
        return self.outcome in (OUTCOME_UPSTREAM_ERROR, OUTCOME_INVALID_SHAPE)


@dataclass(frozen=True)
class PageResolution(_Resolution):
    """Result of one page resolution; ``page`` is ``None`` unless ``ok``."""

    page: Optional[StatusPageData] = None


@dataclass(frozen=True)
class HomeResolution(_Resolution):
    entries: Optional[List[AuthoredStatus]] = None


def _failure_outcome(exc: BirdhouseException) -> str:
    if isinstance(exc, InvalidIdentifierError):
        return OUTCOME_INVALID_IDENTIFIER
    if isinstance(exc, ShapeValidationError):
        return OUTCOME_INVALID_SHAPE
    return OUTCOME_UPSTREAM_ERROR


class StatusPageResolver:
    """Assembles :class:`StatusPageData` from a :class:`StatusSource`."""

    def __init__(
        self,
        source: StatusSource,
        *,
        cache_policy: CacheControlPolicy,
        banner_group_id: str,
        fallback_author_name: str,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.source = source
        self.cache_policy = cache_policy
        self.banner_group_id = banner_group_id
        self.fallback_author_name = fallback_author_name
        self.metrics = metrics
        self.logger = get_logger("statuses.resolver")

    async def resolve(self, raw_status_id: object, headers: MutableMapping[str, str]) -> PageResolution:
        """Resolve the status page for ``raw_status_id``.

        On success the cache directive is written to ``headers`` exactly
        once; on any other outcome ``headers`` is not touched.
        """
        try:
            status_id = validate_identifier(raw_status_id)
            upstream = await self.source.fetch_page(status_id, self.banner_group_id)
            status = parse_optional_status(upstream.status)
            if status is None:
                return self._finish("status", PageResolution(OUTCOME_NOT_FOUND), status_id=status_id)
            banners = parse_banners(upstream.banners)
        except (InvalidIdentifierError, UpstreamError, ShapeValidationError) as exc:
            return self._finish(
                "status",
                PageResolution(_failure_outcome(exc), error=exc),
                status_id=repr(raw_status_id),
            )

        entry = await self.bind_author(status)
        page = StatusPageData(entry=entry, banners=banners)

        self.cache_policy.apply(headers)
        return self._finish("status", PageResolution(OUTCOME_OK, page=page), status_id=status_id)

    async def resolve_home(self) -> HomeResolution:
        """Resolve the home listing (no cache directive)."""
        try:
            statuses = parse_statuses(await self.source.fetch_statuses())
        except (UpstreamError, ShapeValidationError) as exc:
            return self._finish("home", HomeResolution(_failure_outcome(exc), error=exc))

        entries = [await self.bind_author(status) for status in statuses]
        return self._finish("home", HomeResolution(OUTCOME_OK, entries=entries))

    async def bind_author(self, status: Status) -> AuthoredStatus:
        """Attach the author's display name, falling back when unresolved."""
        try:
            payload = await self.source.fetch_author(status.author_id)
            if payload is not None:
                author = parse_author(payload)
                return AuthoredStatus(status=status, author=author, author_name=author.name)
        except (UpstreamError, ShapeValidationError) as exc:
            self.logger.warning(
                "Author lookup failed, using fallback name",
                status_id=status.id,
                author_id=status.author_id,
                error=exc.message,
            )
        else:
            self.logger.info(
                "Author not found, using fallback name",
                status_id=status.id,
                author_id=status.author_id,
            )
        return AuthoredStatus(status=status, author=None, author_name=self.fallback_author_name)

    def _finish(self, page: str, resolution, **context):
        if self.metrics is not None:
            self.metrics.increment_counter("page_resolutions_total", page=page, outcome=resolution.outcome)

        if resolution.outcome == OUTCOME_OK:
            self.logger.debug("Page resolved", page=page, **context)
        elif resolution.error is not None:
            self.logger.warning(
                "Page resolution failed",
                page=page,
                outcome=resolution.outcome,
                code=resolution.error.code,
                error=resolution.error.message,
                **context
            )
        else:
            self.logger.info("Page not found", page=page, outcome=resolution.outcome, **context)
        return resolution
