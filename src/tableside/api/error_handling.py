from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableside.api.middleware.request_id import get_request_id
from tableside.application.errors import (
    ApplicationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from tableside.application.ports.repositories import PersistenceError


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _application_error_handler(status_code: int):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        app_exc = cast(ApplicationError, exc)
        return _error_response(
            status_code=status_code,
            code=app_exc.code,
            message=str(app_exc),
            details=app_exc.details,
        )

    return handler


async def _persistence_error_handler(_: Request, exc: Exception) -> JSONResponse:
    return _error_response(
        status_code=500,
        code="PERSISTENCE_FAILURE",
        message="storage operation failed",
    )


_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return _error_response(
        status_code=http_exc.status_code,
        code=_HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
        message=str(http_exc.detail) if http_exc.detail else "request failed",
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Handlers resolve along the MRO, so every subclass inherits its base's status.
    mappings: list[tuple[type[Exception], int]] = [
        (NotFoundError, 404),
        (InvalidInputError, 400),
        (ConflictError, 409),
        (ApplicationError, 400),
    ]

    for exc_cls, status_code in mappings:
        app.add_exception_handler(exc_cls, _application_error_handler(status_code))

    app.add_exception_handler(PersistenceError, _persistence_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
