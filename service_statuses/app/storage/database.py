"""
SQL persistence for statuses through the SQLAlchemy async ORM.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import DateTime, Integer, String, Text, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from shared.errors import UpstreamError
from shared.logging import get_logger

from service_statuses.app.domain.models import Author, Banner, Status
from service_statuses.app.storage.base import StatusRepository


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class AuthorRow(Base):
    __tablename__ = "authors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255))


class StatusRow(Base):
    __tablename__ = "statuses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    body: Mapped[str] = mapped_column(Text)
    # Plain reference: a deleted author leaves the status in place.
    author_id: Mapped[str] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)


class BannerRow(Base):
    __tablename__ = "banners"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    group_id: Mapped[str] = mapped_column(String(64), index=True)
    href: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0)


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine; in-memory SQLite shares one connection."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DatabaseRepository(StatusRepository):
    """Statuses, authors and banners stored in a relational database."""

    name = "database"

    def __init__(self, database_url: str, *, echo: bool = False, engine: Optional[AsyncEngine] = None):
        self.engine = engine or build_engine(database_url, echo=echo)
        self._sessions = async_sessionmaker(bind=self.engine, expire_on_commit=False, class_=AsyncSession)
        self.logger = get_logger("statuses.storage.database")

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.logger.info("Database schema ensured")

    async def close(self) -> None:
        await self.engine.dispose()

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            self.logger.warning("Database ping failed", error=str(exc))
            return False

    async def get_status(self, status_id: str) -> Optional[Status]:
        row = await self._get(StatusRow, status_id)
        return self._status(row) if row is not None else None

    async def list_statuses(self) -> List[Status]:
        rows = await self._all(select(StatusRow).order_by(StatusRow.created_at.desc()))
        return [self._status(row) for row in rows]

    async def get_author(self, author_id: str) -> Optional[Author]:
        row = await self._get(AuthorRow, author_id)
        return Author(id=row.id, name=row.name) if row is not None else None

    async def list_banners(self, group_id: str) -> List[Banner]:
        rows = await self._all(
            select(BannerRow)
            .where(BannerRow.group_id == group_id)
            .order_by(BannerRow.position, BannerRow.id)
        )
        return [Banner(id=row.id, group_id=row.group_id, href=row.href) for row in rows]

    async def add_author(self, name: str, *, author_id: Optional[str] = None) -> Author:
        row = AuthorRow(id=author_id or _new_id(), name=name)
        await self._add([row])
        return Author(id=row.id, name=row.name)

    async def add_status(
        self,
        author_id: str,
        body: str,
        *,
        status_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Status:
        row = StatusRow(
            id=status_id or _new_id(),
            author_id=author_id,
            body=body,
            created_at=created_at or _utcnow(),
        )
        await self._add([row])
        return self._status(row)

    async def add_banners(self, banners: Iterable[Banner]) -> None:
        await self._add([
            BannerRow(id=banner.id, group_id=banner.group_id, href=banner.href, position=position)
            for position, banner in enumerate(banners)
        ])

    async def seed_if_empty(
        self,
        author_name: str,
        statuses: Iterable[Tuple[str, Optional[datetime]]],
        banners: Iterable[Banner],
    ) -> Optional[Author]:
        """Insert one author with its statuses and the banners in a single
        transaction. Returns ``None`` without writing when any author or
        banner already exists."""
        try:
            async with self._sessions() as session, session.begin():
                existing_author = await session.scalar(select(AuthorRow.id).limit(1))
                existing_banner = await session.scalar(select(BannerRow.id).limit(1))
                if existing_author is not None or existing_banner is not None:
                    return None

                author = AuthorRow(id=_new_id(), name=author_name)
                session.add(author)
                session.add_all([
                    StatusRow(id=_new_id(), author_id=author.id, body=body, created_at=created_at or _utcnow())
                    for body, created_at in statuses
                ])
                session.add_all([
                    BannerRow(id=banner.id, group_id=banner.group_id, href=banner.href, position=position)
                    for position, banner in enumerate(banners)
                ])
        except SQLAlchemyError as exc:
            raise self._failure(exc) from exc
        return Author(id=author.id, name=author.name)

    async def delete_author(self, author_id: str) -> None:
        try:
            async with self._sessions() as session, session.begin():
                row = await session.get(AuthorRow, author_id)
                if row is not None:
                    await session.delete(row)
        except SQLAlchemyError as exc:
            raise self._failure(exc) from exc

    @staticmethod
    def _status(row: StatusRow) -> Status:
        return Status(id=row.id, body=row.body, author_id=row.author_id, created_at=_as_utc(row.created_at))

    async def _get(self, model, identifier: str):
        try:
            async with self._sessions() as session:
                return await session.get(model, identifier)
        except SQLAlchemyError as exc:
            raise self._failure(exc) from exc

    async def _all(self, statement) -> list:
        try:
            async with self._sessions() as session:
                result = await session.scalars(statement)
                return list(result.all())
        except SQLAlchemyError as exc:
            raise self._failure(exc) from exc

    async def _add(self, rows: list) -> None:
        try:
            async with self._sessions() as session, session.begin():
                session.add_all(rows)
        except SQLAlchemyError as exc:
            raise self._failure(exc) from exc

    def _failure(self, exc: SQLAlchemyError) -> UpstreamError:
        self.logger.error("Database operation failed", error=str(exc))
        return UpstreamError("database", str(exc))
