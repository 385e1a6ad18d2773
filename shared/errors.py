"""
Shared error handling for Birdhouse services.
"""

from typing import Dict, Any, Optional

from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class BirdhouseException(Exception):
    """Base exception for Birdhouse services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidIdentifierError(BirdhouseException):
    """Malformed route identifier."""

    status_code = 404

    def __init__(self, value: Any, message: str = "Invalid identifier"):
        super().__init__("INVALID_IDENTIFIER", message, {"value": repr(value)})


class NotFoundError(BirdhouseException):
    """Requested resource does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__("NOT_FOUND", f"{resource} not found", {"resource": resource, "id": identifier})


class ShapeValidationError(BirdhouseException):
    """Upstream payload does not match the expected record structure."""

    status_code = 502

    def __init__(self, entity: str, errors: Optional[list] = None):
        super().__init__(
            "SHAPE_VALIDATION_ERROR",
            f"Invalid {entity} payload",
            {"entity": entity, "errors": errors or []}
        )


class UpstreamError(BirdhouseException):
    """Upstream data source failed or answered with a non-success status."""

    status_code = 502

    def __init__(self, source: str, message: str = "Upstream error", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_ERROR", f"{source}: {message}", details)
        self.source = source
