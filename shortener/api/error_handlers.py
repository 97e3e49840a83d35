"""
Exception Handlers

Every error leaving the API has the same body: type, code, message and an
optional action. Debug details are logged here and never serialized.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.core.exceptions import (
    APIError,
    ErrorType,
    InvalidInputError,
    NotFoundError,
    ensure_api_error,
)
from shortener.core.rate_limit import rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


def error_response(error: APIError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if exc.error_type is ErrorType.INTERNAL:
        logger.error(
            f"{request.method} {request.url.path} failed: "
            f"code={exc.code} debug={exc.debug}"
        )
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(InvalidInputError("invalid-request", "Request parameters are invalid."))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        error = NotFoundError("route-not-found", "The requested resource does not exist.")
    else:
        error_type = ErrorType.INTERNAL if exc.status_code >= 500 else ErrorType.BAD_REQUEST
        error = APIError("http-error", str(exc.detail), error_type=error_type)
    return JSONResponse(status_code=exc.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = ensure_api_error(exc)
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {error.debug}",
        exc_info=exc,
    )
    return error_response(error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
