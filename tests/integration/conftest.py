"""Integration test fixtures: real uvicorn server + file-based SQLite."""

from __future__ import annotations

import asyncio
import os
import socket
import threading
import time
from pathlib import Path

import httpx
import pytest
import uvicorn
from sqlalchemy import text

from rest_commons.client import ChildCrudRestResource, CrudRestResource, RestClient
from rest_commons.core.config import get_settings
from rest_commons.schemas.company import CompanyRead
from rest_commons.schemas.employee import EmployeeRead

_SQLITE_PATH = Path("/tmp/rest_commons_integration_test.db")
_DATABASE_URL = f"sqlite:///{_SQLITE_PATH}"


def _find_free_port() -> int:
    """Bind to port 0 on localhost to get a free port from the OS."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def integration_server():
    """Start a real uvicorn server backed by a file-based SQLite DB.

    Yields the base URL (``http://127.0.0.1:<port>``). The app's lifespan
    creates the engine and, with ``REST_COMMONS_CREATE_SCHEMA`` set, the tables.
    """
    if _SQLITE_PATH.exists():
        _SQLITE_PATH.unlink()
    os.environ["REST_COMMONS_DATABASE_URL"] = _DATABASE_URL
    os.environ["REST_COMMONS_CREATE_SCHEMA"] = "true"
    get_settings.cache_clear()

    port = _find_free_port()
    config = uvicorn.Config(
        "rest_commons.main:app",
        host="127.0.0.1",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)

    thread = threading.Thread(target=asyncio.run, args=(server.serve(),), daemon=True)
    thread.start()

    base_url = f"http://127.0.0.1:{port}"
    for _ in range(30):
        try:
            resp = httpx.get(f"{base_url}/api/v1/healthz", timeout=1.0)
            if resp.status_code == 200:
                break
        except httpx.ConnectError:
            pass
        time.sleep(0.1)
    else:
        raise RuntimeError("Integration server did not become ready in time")

    yield base_url

    server.should_exit = True
    thread.join(timeout=5)
    os.environ.pop("REST_COMMONS_CREATE_SCHEMA", None)
    get_settings.cache_clear()
    if _SQLITE_PATH.exists():
        _SQLITE_PATH.unlink()


@pytest.fixture(scope="session")
def base_url(integration_server: str) -> str:
    return integration_server


@pytest.fixture
def http_client(base_url: str):
    """Yield an ``httpx.Client`` pointed at the integration server."""
    with httpx.Client(base_url=base_url) as client:
        yield client


@pytest.fixture
def rest_client():
    with RestClient(timeout=5.0) as client:
        yield client


@pytest.fixture
def companies(base_url: str, rest_client: RestClient) -> CrudRestResource[CompanyRead]:
    return CrudRestResource(f"{base_url}/api/v1/companies", CompanyRead, rest_client)


@pytest.fixture
def employees(base_url: str, rest_client: RestClient) -> ChildCrudRestResource[EmployeeRead]:
    return ChildCrudRestResource(f"{base_url}/api/v1/companies", "employees", EmployeeRead, rest_client)


def _do_clean_tables() -> None:
    """Delete all rows, children first."""
    from rest_commons.main import app

    session = app.state.db_session_factory()
    try:
        session.execute(text("DELETE FROM employees"))
        session.execute(text("DELETE FROM companies"))
        session.commit()
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _clean_tables(integration_server: str):
    """Empty the tables *before* every test ("clean before" pattern)."""
    _do_clean_tables()
    yield
