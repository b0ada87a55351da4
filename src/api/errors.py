"""Translate exceptions into HTTP responses. Body: {"detail": <message>, "error": <exception name>} so clients can tell failures apart."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import GameError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: object, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"detail": detail, "error": error}),
    )


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
        )
    else:
        logger.info(
            "%s %s rejected (%s): %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc,
        )
    return _error_response(exc.status_code, str(exc), type(exc).__name__)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST, exc.errors(), "RequestValidationError"
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Storage error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error", "StorageError"
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GameError, game_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
