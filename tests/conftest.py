"""Shared test fixtures."""

import pytest
import sqlalchemy as sa
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from rest_commons.client import ChildCrudRestResource, CrudRestResource, RestClient
from rest_commons.db.base import Base
from rest_commons.models.company import Company
from rest_commons.models.employee import Employee
from rest_commons.schemas.company import CompanyRead
from rest_commons.schemas.employee import EmployeeRead

API_ROOT = "http://testserver/api/v1"


@pytest.fixture(scope="session", autouse=True)
def set_test_env(monkeypatch_session):
    """Set test environment variables before any tests run.

    Uses session scope to set once for all tests, avoiding module-level side effects.
    """
    monkeypatch_session.setenv("REST_COMMONS_DATABASE_URL", "sqlite:///:memory:")
    # Clear settings cache to pick up test environment
    from rest_commons.core.config import get_settings
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def monkeypatch_session():
    """Session-scoped monkeypatch for environment setup."""
    from _pytest.monkeypatch import MonkeyPatch
    mp = MonkeyPatch()
    yield mp
    mp.undo()


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for test isolation."""
    engine = sa.create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=sa.pool.StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session from test engine."""
    session = Session(db_engine)
    yield session
    session.close()


@pytest.fixture
def app(db_engine, db_session: Session) -> FastAPI:
    """Create test app with overridden database dependency."""
    from sqlalchemy.orm import sessionmaker

    from rest_commons.app import create_app
    from rest_commons.db.session import get_db

    app = create_app()

    app.state.db_engine = db_engine
    app.state.db_session_factory = sessionmaker(bind=db_engine)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def rest_client(client: TestClient) -> RestClient:
    """RestClient sending through the in-process test client."""
    return RestClient(client)


@pytest.fixture
def company_resource(rest_client: RestClient) -> CrudRestResource[CompanyRead]:
    return CrudRestResource(f"{API_ROOT}/companies", CompanyRead, rest_client)


@pytest.fixture
def employee_resource(rest_client: RestClient) -> ChildCrudRestResource[EmployeeRead]:
    return ChildCrudRestResource(f"{API_ROOT}/companies", "employees", EmployeeRead, rest_client)


@pytest.fixture
def company_factory(db_session: Session):
    """Factory fixture for creating companies in tests.

    Usage:
        def test_something(company_factory):
            company = company_factory(name="acme")
    """

    def _create_company(
        name: str | None = "testcompany",
        email: str = "test@company.org",
        url: str | None = "https://company.org",
    ) -> Company:
        company = Company(email=email, name=name, url=url)
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _create_company


@pytest.fixture
def employee_factory(db_session: Session):
    """Factory fixture for creating employees of a company."""

    def _create_employee(
        company: Company,
        first_name: str = "Ada",
        last_name: str = "Lovelace",
        email: str | None = None,
    ) -> Employee:
        employee = Employee(first_name=first_name, last_name=last_name, email=email)
        employee.company_id = company.id
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee

    return _create_employee
