"""Error taxonomy and the handlers that render every failure as {"erro": message}."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors with a client-safe message and an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error."

    def __init__(
        self,
        message: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request."


class AuthenticationError(AppError):
    """Bad credentials or a missing, malformed or expired token. Messages stay generic."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required."


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found."


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict."


class InternalError(AppError):
    pass


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"erro": message}, headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    # loc is e.g. ("body", "email"); the leading segment only says where it came from.
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg", "invalid value"))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    if not loc:
        return f"Invalid request body: {msg}."
    return f"Invalid field '{'.'.join(loc)}': {msg}."


async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return error_response(exc.status_code, exc.message, exc.headers)


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error.",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
