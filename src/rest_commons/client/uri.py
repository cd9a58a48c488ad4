"""Slash normalization and path joining for resource URLs.

Every helper is idempotent: applying it to its own output changes nothing.
"""

from __future__ import annotations

from urllib.parse import quote


def ensure_ends_with_slash(uri: str) -> str:
    return uri if uri.endswith("/") else f"{uri}/"


def quote_segment(value: object) -> str:
    """Percent-escape an id so it stays one path segment.

    ``/``, ``?`` and ``#`` are escaped too, so an id can never address
    another endpoint.
    """
    text = str(value)
    if not text:
        raise ValueError("path segment must not be empty")
    return quote(text, safe="")


def join_url(base: str, *segments: object, trailing_slash: bool = False) -> str:
    """Append ``segments`` to ``base`` with exactly one ``/`` between parts.

    Leading and trailing slashes of every fragment are ignored, inner
    slashes are kept, empty segments are skipped. Segments are used as
    given; pass ids through ``quote_segment`` first.

    >>> join_url("http://host/api/", "/42/", "employees/", trailing_slash=True)
    'http://host/api/42/employees/'
    """
    url = base.rstrip("/")
    for segment in segments:
        part = str(segment).strip("/")
        if part:
            url = f"{url}/{part}"
    return ensure_ends_with_slash(url) if trailing_slash else url
