from __future__ import annotations

import logging
from collections.abc import Generator
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from rest_commons.db.base import Base

if TYPE_CHECKING:
    from fastapi import FastAPI

    from rest_commons.core.config import Settings

logger = logging.getLogger(__name__)


def init_db(app: FastAPI, settings: Settings) -> None:
    """Create the engine and session factory and keep them on ``app.state``.

    Tables are created when ``settings.create_schema`` is set, which is
    meant for SQLite development databases and demos.
    """
    engine = create_engine(settings.database_url)
    if settings.create_schema:
        # Import models so their tables are registered on the metadata
        import rest_commons.models  # noqa: F401

        Base.metadata.create_all(engine)
        logger.info("Database schema created")
    app.state.db_engine = engine
    app.state.db_session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def close_db(app: FastAPI) -> None:
    if hasattr(app.state, "db_engine"):
        app.state.db_engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield one session per request, rolled back when the request fails."""
    session_factory: sessionmaker = request.app.state.db_session_factory
    session = session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
