"""Failure taxonomy shared by the server handlers and the client proxies.

Hierarchy:
    RestCommonsError (base)
    ├── NotFoundError      → 404, id or parent id does not resolve
    ├── ValidationFailure  → 400, carries a field-addressable ErrorResponse
    ├── ConflictError      → 409, storage rejected a write (unique/foreign key)
    ├── UpstreamFailure    → 5xx, unexpected status or transport failure
    └── DecodeError        → body from the other side is not the agreed shape

None of these are logged where they are raised. They propagate to the
immediate caller, which decides presentation or retry policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rest_commons.schemas.generic import ErrorResponse


class RestCommonsError(Exception):
    """Base exception for all resource handler and proxy failures.

    Attributes:
        message: Human-readable description.
        status: HTTP status the failure maps to (None when it has no mapping).
    """

    status: int | None = None

    def __init__(self, message: str = "Request failed", *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_error_response(self) -> ErrorResponse:
        from rest_commons.schemas.generic import ErrorResponse

        return ErrorResponse(status=self.status, message=self.message)


class NotFoundError(RestCommonsError):
    """Raised when an id (or a parent id) does not resolve."""

    status = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"{resource} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ValidationFailure(RestCommonsError):
    """Raised when request data fails field-level validation.

    Always carries an ErrorResponse so callers can inspect every
    field path and every message, not just the first one.
    """

    status = 400

    def __init__(self, error_response: ErrorResponse) -> None:
        super().__init__(error_response.message or "Validation failed", status=error_response.status or 400)
        self.error_response = error_response

    @property
    def fields(self) -> dict[str, list[str]]:
        return {path: list(messages) for path, messages in self.error_response.fields.items()}

    def to_error_response(self) -> ErrorResponse:
        return self.error_response


class ConflictError(RestCommonsError):
    """Raised when the storage backend rejects a write."""

    status = 409


class UpstreamFailure(RestCommonsError):
    """Raised for 5xx answers, unexpected statuses and transport errors.

    Attributes:
        status: Status code of the answer, None for transport errors.
        body: Raw body text (or transport diagnostic) for troubleshooting.
    """

    status = 502

    def __init__(self, body: str, *, status: int | None = None, message: str | None = None) -> None:
        if message is None:
            message = f"Upstream request failed with status {status}" if status else "Upstream request failed"
        super().__init__(message)
        self.status = status
        self.body = body


class DecodeError(RestCommonsError):
    """Raised when a page, DTO or error body does not have the agreed shape."""
