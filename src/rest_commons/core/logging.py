from __future__ import annotations

import logging
import logging.config

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ACCESS_LOGGER = "rest_commons.access"


def configure_logging(level: str) -> None:
    log_level = level.upper()
    handler = {"handlers": ["default"], "level": log_level, "propagate": False}

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": DEFAULT_LOG_FORMAT},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            }
        },
        "root": {"handlers": ["default"], "level": log_level},
        "loggers": {
            ACCESS_LOGGER: dict(handler),
            "uvicorn": dict(handler),
            "uvicorn.error": dict(handler),
            # Request logging middleware replaces uvicorn's access lines
            "uvicorn.access": {"handlers": ["default"], "level": "WARNING", "propagate": False},
        },
    }

    logging.config.dictConfig(logging_config)
