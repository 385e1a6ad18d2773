"""
Statuses service for Birdhouse.

Serves the server-rendered pages (home listing, status page), the REST and
GraphQL endpoints backed by the repository, and the shared health/metrics
routes.
"""

from pathlib import Path
from typing import Dict, Optional

import httpx
from ariadne import graphql
from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import NotFoundError

from service_statuses.app.caching.cache_control import CacheControlPolicy
from service_statuses.app.domain.resolver import StatusPageResolver
from service_statuses.app.domain.validation import validate_identifier
from service_statuses.app.schema import schema
from service_statuses.app.sources import build_source
from service_statuses.app.storage import DatabaseRepository, StatusRepository, build_repository
from service_statuses.app.storage.seed import seed_demo_data


TEMPLATES_DIR = Path(__file__).parent / "templates"


class StatusesService(BaseService):
    """Statuses service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        repository: Optional[StatusRepository] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("statuses", 8000, config)
        self.repository = repository or build_repository(self.config)
        self.source = build_source(self.config, self.repository, metrics=self.metrics, transport=transport)
        self.cache_policy = CacheControlPolicy.from_durations(
            fresh_minutes=self.config.cache_fresh_minutes,
            stale_days=self.config.cache_stale_days,
        )
        self.resolver = StatusPageResolver(
            self.source,
            cache_policy=self.cache_policy,
            banner_group_id=self.config.banner_group_id,
            fallback_author_name=self.config.fallback_author_name,
            metrics=self.metrics,
        )
        self.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

        self._setup_api_routes()
        self._setup_graphql_routes()
        self._setup_page_routes()

        self.app.state.statuses_service = self
        self.logger.info(
            "Statuses service configured",
            store_backend=self.repository.name,
            page_source=self.source.name,
        )

    async def on_startup(self) -> None:
        if isinstance(self.repository, DatabaseRepository):
            await self.repository.create_schema()
            if self.config.seed_database:
                await seed_demo_data(self.repository)

    async def on_shutdown(self) -> None:
        await self.repository.close()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"store": "ok" if await self.repository.ping() else "error"}

    def _setup_page_routes(self):
        """Server-rendered pages."""

        @self.app.get("/", response_class=HTMLResponse)
        async def home(request: Request):
            resolution = await self.resolver.resolve_home()
            if not resolution.found:
                return self._render_failure(request, resolution)
            return self.templates.TemplateResponse(request, "home.html", {"entries": resolution.entries})

        @self.app.get("/statuses/{status_id}", response_class=HTMLResponse)
        async def status_page(request: Request, status_id: str):
            headers: Dict[str, str] = {}
            resolution = await self.resolver.resolve(status_id, headers)
            if not resolution.found:
                return self._render_failure(request, resolution)
            return self.templates.TemplateResponse(
                request,
                "status.html",
                {"page": resolution.page},
                headers=headers,
            )

    def _render_failure(self, request: Request, resolution):
        if self.config.surface_upstream_errors and resolution.upstream_failed:
            return self.templates.TemplateResponse(
                request,
                "error.html",
                {"title": "Upstream unavailable", "message": "The status could not be loaded."},
                status_code=502,
            )
        return self.templates.TemplateResponse(
            request,
            "error.html",
            {"title": "Not found", "message": "This page could not be found."},
            status_code=404,
        )

    def _setup_api_routes(self):
        """REST endpoints over the repository."""

        @self.app.exception_handler(NotFoundError)
        async def not_found_handler(request: Request, exc: NotFoundError):
            self.logger.info("Resource not found", path=request.url.path, **exc.details)
            return JSONResponse(status_code=exc.status_code, content={"message": "not found"})

        @self.app.get("/api/status")
        async def list_statuses():
            return [status.to_payload() for status in await self.repository.list_statuses()]

        @self.app.get("/api/status/{status_id}")
        async def get_status(status_id: str):
            status = await self.repository.get_status(validate_identifier(status_id))
            if status is None:
                raise NotFoundError("status", status_id)
            return status.to_payload()

        @self.app.get("/api/authors/{author_id}")
        async def get_author(author_id: str):
            author = await self.repository.get_author(validate_identifier(author_id))
            if author is None:
                raise NotFoundError("author", author_id)
            return author.to_payload()

        @self.app.get("/api/banners")
        async def list_banners(group_id: str = Query(..., alias="groupId")):
            banners = await self.repository.list_banners(validate_identifier(group_id))
            return [banner.to_payload() for banner in banners]

    def _setup_graphql_routes(self):
        """GraphQL endpoint over the repository."""

        @self.app.post("/api/graphql")
        async def graphql_endpoint(request: Request):
            try:
                data = await request.json()
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"errors": [{"message": "Request body is not valid JSON"}]},
                )

            success, result = await graphql(
                schema,
                data,
                context_value={"request": request, "repository": self.repository},
                introspection=self.config.env == "local",
                debug=self.config.env == "local",
            )
            return JSONResponse(status_code=200 if success else 400, content=result)


def create_app(config: Optional[ServiceConfig] = None, **kwargs) -> FastAPI:
    """Create the Statuses FastAPI application."""
    return StatusesService(config, **kwargs).app


if __name__ == "__main__":
    StatusesService().run()
