"""Generic wire schemas shared by the CRUD server and the client proxies."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from rest_commons.schemas.paging import PageRequest

T = TypeVar("T")

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class PageResult(BaseModel, Generic[T]):
    """One page of a sorted listing.

    Wire keys are camelCase (``pageSize``, ``totalElements``, ``totalPages``).
    """

    content: list[T]
    page: int
    page_size: int
    total_elements: int
    total_pages: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @classmethod
    def of(cls, content: Sequence[Any], page_request: PageRequest, total_elements: int) -> PageResult:
        """Build a page from its content and the overall match count.

        ``total_pages`` is 0 for an empty collection; a page past the end
        has empty content but still reports the correct totals.
        """
        total_pages = math.ceil(total_elements / page_request.page_size) if total_elements > 0 else 0
        return cls(
            content=list(content),
            page=page_request.page,
            page_size=page_request.page_size,
            total_elements=total_elements,
            total_pages=total_pages,
        )


class ErrorResponse(BaseModel):
    """Uniform error body: status, message and field path → messages.

    Field entries are only ever appended to, so repeated failures on
    one field accumulate in arrival order.
    """

    status: int | None = None
    message: str | None = None
    fields: dict[str, list[str]] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": 400,
                "message": "Validation failed",
                "fields": {"email": ["value is not a valid email address"]},
            }
        },
    )

    def add_field(self, path: str, message: str) -> ErrorResponse:
        """Append a message for ``path``, creating the entry when missing."""
        self.fields.setdefault(path, []).append(message)
        return self

    def has_field(self, path: str) -> bool:
        return path in self.fields

    def first_field_value(self, path: str) -> str | None:
        """Return the first message for ``path`` or None when absent or empty."""
        messages = self.fields.get(path)
        return messages[0] if messages else None

    @classmethod
    def from_validation_errors(
        cls,
        errors: Iterable[Mapping[str, Any]],
        *,
        status: int = 400,
        message: str | None = "Validation failed",
    ) -> ErrorResponse:
        """Build an ErrorResponse from pydantic-style error dicts.

        The leading location segment (``body``, ``query`` ...) added by
        FastAPI is dropped, the rest is joined with dots.
        """
        response = cls(status=status, message=message)
        for error in errors:
            response.add_field(field_path(error.get("loc", ())), str(error.get("msg", "invalid value")))
        return response


def field_path(location: Sequence[Any]) -> str:
    parts = [str(part) for part in location]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) if parts else "body"


class NotFoundResponse(BaseModel):
    """Standard 404 error response."""

    status: int = 404
    message: str
    fields: dict[str, list[str]] = Field(default_factory=dict)
