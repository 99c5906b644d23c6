"""
Uniform response envelope.
Every endpoint answers {"success": bool, "message": str, "data": any | null}.
"""

from typing import Any, Mapping, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.constants import ErrorMessages, SuccessMessages


def envelope(success: bool, message: str = "", data: Any = None) -> dict:
    return {
        "success": success,
        "message": message,
        "data": jsonable_encoder(data, by_alias=True),
    }


def success(
    message: str = "",
    data: Any = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(True, message, data))


def error(
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    message: str = ErrorMessages.INTERNAL_ERROR,
    data: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(False, message, data),
        headers=dict(headers) if headers else None,
    )


def created(message: str = SuccessMessages.CREATED, data: Any = None) -> JSONResponse:
    return success(message, data, status.HTTP_201_CREATED)


def updated(message: str = SuccessMessages.UPDATED, data: Any = None) -> JSONResponse:
    return success(message, data)


def deleted(message: str = SuccessMessages.DELETED) -> JSONResponse:
    return success(message, None)


def empty_list(message: str = "No se encontraron elementos") -> JSONResponse:
    return success(message, [])


def list_or_empty(items: list, message: str, empty_message: str) -> JSONResponse:
    """Send the list, or an empty-list envelope with its own message."""
    if not items:
        return empty_list(empty_message)
    return success(message, items)
