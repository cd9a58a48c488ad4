"""Page request model and its query-parameter / JSON-body codec.

Query parameters::

    page=<int>&pageSize=<int>&sort=<field>,<asc|desc>[&sort=...]

``sort`` repeats; earlier values are more significant. The direction is
case-insensitive on input and lower-cased on the wire.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, TypeVar

from rest_commons.exceptions import DecodeError, ValidationFailure
from rest_commons.schemas.generic import ErrorResponse, PageResult

T = TypeVar("T")

PAGE_PARAM = "page"
PAGE_SIZE_PARAM = "pageSize"
SORT_PARAM = "sort"

# Largest page index accepted from a query string (signed 64-bit)
MAX_PAGE = 2**63 - 1


class SortDirection(Enum):
    """Sort direction, lower-case on the wire."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str) -> SortDirection:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown sort direction '{value}'") from None


@dataclasses.dataclass(frozen=True)
class SortOrder:
    """One sort criterion."""

    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def asc(cls, field: str) -> SortOrder:
        return cls(field, SortDirection.ASC)

    @classmethod
    def desc(cls, field: str) -> SortOrder:
        return cls(field, SortDirection.DESC)

    def to_param(self) -> str:
        return f"{self.field},{self.direction.value}"


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Page index (0-based), page size and ordered sort criteria."""

    page: int
    page_size: int
    sort: tuple[SortOrder, ...] = ()

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must not be negative")
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        # Accept any sequence of orders, store a tuple to keep the instance hashable.
        object.__setattr__(self, "sort", tuple(self.sort))

    def next(self) -> PageRequest:
        return dataclasses.replace(self, page=self.page + 1)


def encode_page_request(page_request: PageRequest) -> list[tuple[str, str]]:
    """Encode a PageRequest as ordered query parameters."""
    params: list[tuple[str, str]] = []
    if page_request.page is not None and page_request.page >= 0:
        params.append((PAGE_PARAM, str(page_request.page)))
    if page_request.page_size is not None and page_request.page_size >= 0:
        params.append((PAGE_SIZE_PARAM, str(page_request.page_size)))
    for order in page_request.sort:
        params.append((SORT_PARAM, order.to_param()))
    return params


def parse_sort(values: Sequence[str]) -> tuple[SortOrder, ...]:
    """Parse repeated ``sort`` values.

    ``name,desc`` sorts one field, ``name,email,desc`` applies the
    direction to both fields and a value without direction sorts ascending.
    """
    orders: list[SortOrder] = []
    for value in values:
        parts = [part.strip() for part in value.split(",") if part.strip()]
        if not parts:
            continue
        direction = SortDirection.ASC
        if len(parts) > 1 and parts[-1].lower() in {d.value for d in SortDirection}:
            direction = SortDirection.parse(parts.pop())
        orders.extend(SortOrder(field, direction) for field in parts)
    return tuple(orders)


def parse_page_request(
    params: Mapping[str, Any],
    *,
    default_page_size: int,
    max_page_size: int | None = None,
) -> PageRequest:
    """Parse query parameters into a PageRequest.

    Unset ``page`` means page 0, unset ``pageSize`` means
    ``default_page_size``. Malformed values raise ValidationFailure
    with one field entry per offending parameter.
    """
    errors = ErrorResponse(status=400, message="Invalid paging parameters")

    page = _parse_int(params, PAGE_PARAM, default=0, minimum=0, maximum=MAX_PAGE, errors=errors)
    page_size = _parse_int(params, PAGE_SIZE_PARAM, default=default_page_size, minimum=1, errors=errors)
    if page_size is not None and max_page_size is not None and page_size > max_page_size:
        errors.add_field(PAGE_SIZE_PARAM, f"must be less than or equal to {max_page_size}")

    sort: tuple[SortOrder, ...] = ()
    try:
        sort = parse_sort(_get_all(params, SORT_PARAM))
    except ValueError as exc:
        errors.add_field(SORT_PARAM, str(exc))

    if errors.fields:
        raise ValidationFailure(errors)
    return PageRequest(page=page, page_size=page_size, sort=sort)


def decode_page_result(body: Any, element_decoder: Callable[[Any], T]) -> PageResult[T]:
    """Decode a paged JSON body, mapping ``content`` through ``element_decoder``."""
    if not isinstance(body, Mapping):
        raise DecodeError("Paged body must be a JSON object")

    content = body.get("content", [])
    if not isinstance(content, list):
        raise DecodeError("Paged body 'content' must be a list")

    scalars: dict[str, int] = {}
    for key in ("page", "pageSize", "totalElements", "totalPages"):
        value = body.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"Paged body '{key}' must be an integer, got {value!r}")
        scalars[key] = value

    return PageResult(
        content=[element_decoder(item) for item in content],
        page=scalars["page"],
        page_size=scalars["pageSize"],
        total_elements=scalars["totalElements"],
        total_pages=scalars["totalPages"],
    )


def _get_all(params: Mapping[str, Any], key: str) -> list[str]:
    # Starlette's QueryParams and MultiDicts expose getlist for repeated keys.
    if hasattr(params, "getlist"):
        return [str(value) for value in params.getlist(key)]
    value = params.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def _parse_int(
    params: Mapping[str, Any],
    key: str,
    *,
    default: int,
    minimum: int,
    maximum: int | None = None,
    errors: ErrorResponse,
) -> int | None:
    values = _get_all(params, key)
    if not values or values[-1] == "":
        return default
    try:
        value = int(values[-1])
    except ValueError:
        errors.add_field(key, "must be an integer")
        return None
    if value < minimum:
        errors.add_field(key, f"must be greater than or equal to {minimum}")
        return None
    if maximum is not None and value > maximum:
        errors.add_field(key, f"must be less than or equal to {maximum}")
        return None
    return value
