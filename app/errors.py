from __future__ import annotations
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base for every failure surfaced to a caller; maps to one HTTP status."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidArgument(ValidationError):
    """A well-formed value that the referenced entity does not accept."""


class Unauthorized(AppError):
    status_code = 401
    default_message = "Authentication token required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class Internal(AppError):
    status_code = 500
