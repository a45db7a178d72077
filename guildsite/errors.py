"""
Error taxonomy and the JSON error envelope used by every endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Failure that maps directly onto an HTTP status and client-safe message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationMissing(ApiError):
    status_code = 500
    default_message = "Server configuration error: Missing Bot Token"


class ValidationFailure(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized: Incorrect Password"


class StoreUnavailable(ApiError):
    status_code = 503
    default_message = "Settings store unavailable"


class UpstreamError(Exception):
    """
    Discord REST call failed.

    Carries the upstream status and body for server-side logging only; routes
    translate it into a generic message before it reaches a client.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamUnavailable(UpstreamError):
    """Network failure, timeout or 5xx from Discord."""


class UpstreamUnauthorized(UpstreamError):
    """Discord rejected the bot token (401)."""


class UpstreamForbidden(UpstreamError):
    """The bot lacks permission for the resource (403)."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def _http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return error_response(400, "Invalid request body")


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return error_response(500, ApiError.default_message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
