"""Exception handlers that render failures in the API envelope.

Every error response has the shape ``{"success": false, "message", "error"}``.
Handlers are looked up along the exception's class hierarchy, so
``StaleOrderError`` gets its own 409 even though it is a ``ValidationError``.
Concurrent writes caught by the store (``ExpectedVersionError``) are 409 too.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError, ValidationError

from orders.errors import (
    AuthenticationError,
    AuthorizationError,
    PersistenceError,
    StaleOrderError,
    describe,
)

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str, error=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": jsonable_encoder(error)},
    )


async def _validation(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, describe(exc), exc.messages)


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error(400, describe(exc), exc.messages)


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Invalid request", exc.errors())


async def _stale(request: Request, exc: StaleOrderError) -> JSONResponse:
    return _error(409, describe(exc), exc.messages)


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("version_conflict", path=request.url.path, error=str(exc))
    return _error(409, "Order was modified by another request", describe(exc))


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error(404, describe(exc))


async def _unauthenticated(request: Request, exc: AuthenticationError) -> JSONResponse:
    return _error(401, describe(exc))


async def _forbidden(request: Request, exc: AuthorizationError) -> JSONResponse:
    return _error(403, describe(exc))


async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("persistence_failed", path=request.url.path, error=str(exc))
    return _error(500, "Error processing order", describe(exc))


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return _error(500, "Internal server error", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(StaleOrderError, _stale)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(AuthenticationError, _unauthenticated)
    app.add_exception_handler(AuthorizationError, _forbidden)
    app.add_exception_handler(PersistenceError, _persistence)
    app.add_exception_handler(Exception, _unexpected)
