"""
Global exception handling for the application.
Every error leaves the API inside the {success, message, data} envelope.
"""

from typing import Mapping, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import responses
from app.core.constants import ErrorMessages

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)


class ValidationException(AppError):
    """User-correctable payload error."""
    def __init__(self, message: str = ErrorMessages.VALIDATION_ERROR):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ConflictException(AppError):
    """Duplicate value on a unique field. Reported as a validation error."""
    def __init__(self, message: str = ErrorMessages.RESOURCE_EXISTS):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class UnauthorizedException(AppError):
    """Missing or unusable credentials."""
    def __init__(self, message: str = ErrorMessages.UNAUTHORIZED):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class ForbiddenException(AppError):
    """Authenticated but lacking capability or ownership."""
    def __init__(self, message: str = ErrorMessages.FORBIDDEN):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = ErrorMessages.NOT_FOUND):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class RateLimitExceededException(AppError):
    def __init__(self, message: str = ErrorMessages.RATE_LIMIT_EXCEEDED, retry_after: int = 1):
        super().__init__(
            message,
            status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class QRCodeGenerationError(AppError):
    def __init__(self, message: str = ErrorMessages.QR_GENERATION_FAILED):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Application error", path=request.url.path, error=exc.message)
    return responses.error(exc.status_code, exc.message, headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = ErrorMessages.ENDPOINT_NOT_FOUND
    else:
        message = str(exc.detail)
    return responses.error(exc.status_code, message, headers=getattr(exc, "headers", None))


async def request_validation_handler(
    request: Request, exc: RequestValidationError | ValidationError
) -> JSONResponse:
    """Malformed JSON or wrongly-typed fields, reported like any validation error."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return responses.error(
        status.HTTP_400_BAD_REQUEST,
        ", ".join(messages) or ErrorMessages.VALIDATION_ERROR,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally. No stack trace reaches the client."""
    logger.exception("Unexpected error occurred", path=request.url.path)
    return responses.error(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorMessages.INTERNAL_ERROR)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
