"""Global exception handlers rendering failures as ErrorResponse bodies.

    RestCommonsError        → its own status, ErrorResponse body
    RequestValidationError  → 400, one field entry per pydantic error
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rest_commons.exceptions import RestCommonsError
from rest_commons.schemas.generic import ErrorResponse

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(RestCommonsError)
    async def rest_commons_error_handler(request: Request, exc: RestCommonsError) -> JSONResponse:
        error_response = exc.to_error_response()
        status_code = error_response.status or exc.status or status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.info("%s %s failed with %d: %s", request.method, request.url.path, status_code, exc.message)
        return JSONResponse(status_code=status_code, content=error_response.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        error_response = ErrorResponse.from_validation_errors(exc.errors(), status=status.HTTP_400_BAD_REQUEST)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response.model_dump())
