"""Tests for string shortening helpers."""

from rest_commons.core.strings import shorten_left, shorten_right

LONG_VALUE = "hello again in the wold of java and rest"


class TestShortenLeft:
    def test_none(self) -> None:
        assert shorten_left(None, 10, "...") == ""

    def test_short_value_unchanged(self) -> None:
        assert shorten_left("hello", 10, "...") == "hello"

    def test_too_long(self) -> None:
        result = shorten_left(LONG_VALUE, 10, "...")
        assert len(result) == 10
        assert result == "hello a..."

    def test_length_shorter_than_ellipsis(self) -> None:
        assert shorten_left(LONG_VALUE, 2, "...") == ".."


class TestShortenRight:
    def test_none(self) -> None:
        assert shorten_right(None, 10, "...") == ""

    def test_short_value_unchanged(self) -> None:
        assert shorten_right("hello", 10, "...") == "hello"

    def test_too_long(self) -> None:
        result = shorten_right(LONG_VALUE, 10, "...")
        assert len(result) == 10
        assert result == "...nd rest"
