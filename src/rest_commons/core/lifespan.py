from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rest_commons.core.config import get_settings
from rest_commons.db.session import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment)
    init_db(app, settings)
    try:
        yield
    finally:
        close_db(app)
        logger.info("Stopped %s", settings.app_name)
