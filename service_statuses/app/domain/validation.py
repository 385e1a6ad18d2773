"""
Boundary validation for route identifiers and upstream payloads.

Upstream payloads are untrusted: every entity is validated as a whole and
rejected outright when any required field is missing or mistyped.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from shared.errors import InvalidIdentifierError, ShapeValidationError

from service_statuses.app.domain.models import Author, Banner, Status


_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,64}")

_BANNERS = TypeAdapter(List[Banner])
_STATUSES = TypeAdapter(List[Status])


def validate_identifier(value: Any) -> str:
    """Return ``value`` if it is a usable identifier, else raise."""
    if not isinstance(value, str) or not _IDENTIFIER_PATTERN.fullmatch(value):
        raise InvalidIdentifierError(value)
    return value


def _errors(exc: ValidationError) -> List[dict]:
    return [
        {"loc": ".".join(str(part) for part in error["loc"]), "type": error["type"]}
        for error in exc.errors()
    ]


def parse_status(payload: Any) -> Status:
    try:
        return Status.model_validate(payload)
    except ValidationError as exc:
        raise ShapeValidationError("status", _errors(exc)) from exc


def parse_author(payload: Any) -> Author:
    try:
        return Author.model_validate(payload)
    except ValidationError as exc:
        raise ShapeValidationError("author", _errors(exc)) from exc


def parse_banners(payload: Any) -> Tuple[Banner, ...]:
    """Validate a banner list; one malformed banner rejects the list."""
    try:
        return tuple(_BANNERS.validate_python(payload))
    except ValidationError as exc:
        raise ShapeValidationError("banners", _errors(exc)) from exc


def parse_statuses(payload: Any) -> Tuple[Status, ...]:
    try:
        return tuple(_STATUSES.validate_python(payload))
    except ValidationError as exc:
        raise ShapeValidationError("statuses", _errors(exc)) from exc


def parse_optional_status(payload: Any) -> Optional[Status]:
    """Like :func:`parse_status` but passes ``None`` (not found) through."""
    if payload is None:
        return None
    return parse_status(payload)
