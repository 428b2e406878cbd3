"""Application error taxonomy.

Services and auth dependencies raise these; the handlers registered in
main.py turn them into the `{success: false, message}` envelope with the
matching HTTP status. Nothing here is retried.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map 1:1 onto an HTTP status."""

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authorized to access this route"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized to access this route"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"


class ValidationFailed(AppError):
    """Payload failed field constraints. Carries a per-field error list."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.errors = errors or []

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class Conflict(AppError):
    """Unique-constraint violation (duplicate email, slug, ...)."""

    status_code = 400
    default_message = "Duplicate field value entered"


class InternalError(AppError):
    status_code = 500
    default_message = "Server Error"
