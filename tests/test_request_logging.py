"""Tests for the request logging middleware."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rest_commons.core.logging import ACCESS_LOGGER
from rest_commons.middleware.logging import RequestLoggingMiddleware


def make_client(**options) -> TestClient:
    app = FastAPI()

    @app.get("/items")
    def list_items() -> dict:
        return {"ok": True}

    app.add_middleware(RequestLoggingMiddleware, **options)
    return TestClient(app)


@pytest.fixture
def access_records(caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch):
    # configure_logging detaches the access logger from the root handlers
    monkeypatch.setattr(logging.getLogger(ACCESS_LOGGER), "propagate", True)
    caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

    def records() -> list[str]:
        return [r.getMessage() for r in caplog.records if r.name == ACCESS_LOGGER]

    return records


def test_logs_one_line_per_request(access_records) -> None:
    response = make_client().get("/items", headers={"X-Request-ID": "req-1"})

    assert response.headers["X-Request-ID"] == "req-1"
    [line] = access_records()
    assert line.startswith("[req-1] GET /items -> 200 (")
    assert line.endswith(" ms)")


def test_duration_can_be_disabled(access_records) -> None:
    make_client(duration=False).get("/items", headers={"X-Request-ID": "req-2"})

    assert access_records() == ["[req-2] GET /items -> 200"]


def test_long_targets_are_trimmed(access_records) -> None:
    make_client(duration=False, trim_length=20).get("/items", params={"q": "x" * 50})

    [line] = access_records()
    target = line.split(" ")[2]
    assert len(target) == 20
    assert target.startswith("/items?q=")
    assert target.endswith("...")


def test_disabled_logging_still_tags_response(access_records) -> None:
    response = make_client(enabled=False).get("/items")

    assert response.headers["X-Request-ID"]
    assert access_records() == []


def test_custom_header_name(access_records) -> None:
    response = make_client(header_name="X-Correlation-ID").get("/items", headers={"X-Correlation-ID": "corr"})

    assert response.headers["X-Correlation-ID"] == "corr"
