"""Helpers for shortening strings to a fixed length."""

from __future__ import annotations


def shorten_left(value: str | None, length: int, ellipsis: str = "...") -> str:
    """Keep the beginning of ``value``, ending with ``ellipsis`` when cut.

    >>> shorten_left("hello again in the world", 10)
    'hello a...'
    """
    if value is None:
        return ""
    if len(value) <= length:
        return value
    keep = max(length - len(ellipsis), 0)
    return value[:keep] + ellipsis[: length - keep]


def shorten_right(value: str | None, length: int, ellipsis: str = "...") -> str:
    """Keep the end of ``value``, starting with ``ellipsis`` when cut.

    >>> shorten_right("hello again in java and rest", 10)
    '...nd rest'
    """
    if value is None:
        return ""
    if len(value) <= length:
        return value
    keep = max(length - len(ellipsis), 0)
    return ellipsis[: length - keep] + (value[-keep:] if keep else "")
