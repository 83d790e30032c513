"""Error taxonomy shared by both record services.

Handlers raise :class:`ApiError` subclasses; the app turns them into
``{"error": "<message>"}`` JSON bodies with the subclass' status code.
Store exceptions are translated in one place by :func:`store_errors`; anything
else that escapes a handler becomes a 500 with the same body shape.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class StoreFailure(ApiError):
    status_code = 500


_CONFLICT_ERRORS = (psycopg.errors.UniqueViolation, psycopg.errors.ForeignKeyViolation)
_INPUT_ERRORS = (psycopg.errors.NotNullViolation, psycopg.errors.CheckViolation, psycopg.DataError)


def translate_store_error(exc: psycopg.Error, message: str) -> ApiError:
    if isinstance(exc, _CONFLICT_ERRORS):
        return Conflict(message)
    if isinstance(exc, _INPUT_ERRORS):
        return InvalidInput(message)
    return StoreFailure(message)


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Log any store error raised in the block and re-raise it as an ApiError.

    ``message`` is the fixed, client-facing text; the store's own message
    only goes to the log.
    """
    try:
        yield
    except psycopg.Error as exc:
        log.exception("%s: %s", message, exc)
        raise translate_store_error(exc, message) from exc


def _api_error_response(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def _validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"error": "Invalid request", "detail": _jsonable_errors(exc.errors())},
        status_code=422,
    )


def _jsonable_errors(errors) -> list[dict]:
    out = []
    for e in errors:
        out.append({
            "loc": [str(part) for part in e.get("loc", ())],
            "msg": str(e.get("msg", "")),
            "type": str(e.get("type", "")),
        })
    return out


def _unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    # The access middleware has already logged the traceback.
    log.error("unhandled error on %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_response)
    app.add_exception_handler(RequestValidationError, _validation_error_response)
    app.add_exception_handler(Exception, _unhandled_error_response)
