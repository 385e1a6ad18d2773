"""
Domain records for statuses, authors and banners.

Upstream payloads use camelCase keys (``createdAt``, ``groupId``) and carry
the author as a plain reference under ``author``; the models accept both
those aliases and the Python field names.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON shape served by the REST API."""
        return self.model_dump(by_alias=True, mode="json")


class Author(_Record):
    """Named originator of a status."""

    id: StrictStr = Field(min_length=1)
    name: StrictStr


class Status(_Record):
    """Short authored text record."""

    id: StrictStr = Field(min_length=1)
    body: StrictStr
    author_id: StrictStr = Field(alias="author")
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at", mode="before")
    @classmethod
    def _require_iso_string(cls, value: Any) -> Any:
        # Payloads carry ISO-8601 strings; numbers would be read as epochs.
        if isinstance(value, (str, datetime)):
            return value
        raise ValueError("createdAt must be an ISO-8601 string")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Banner(_Record):
    """Promotional display unit belonging to a banner group."""

    id: StrictStr = Field(min_length=1)
    group_id: StrictStr = Field(alias="groupId")
    href: Optional[StrictStr] = None


@dataclass(frozen=True)
class AuthoredStatus:
    """A status bound to the display name of its author."""

    status: Status
    author_name: str
    author: Optional[Author] = None


@dataclass(frozen=True)
class StatusPageData:
    """Request-scoped aggregate handed to the status page template."""

    entry: AuthoredStatus
    banners: Tuple[Banner, ...] = ()

    @property
    def status(self) -> Status:
        return self.entry.status

    @property
    def author_name(self) -> str:
        return self.entry.author_name
