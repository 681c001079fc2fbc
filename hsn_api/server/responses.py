"""
Standard API response helpers.

Every endpoint answers with the same envelope (see ``schemas.ApiResponse``)::

    {"success": bool, "message": str, "data": Any}

Pydantic payloads are encoded by alias, so their keys are camelCase.
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _envelope(ok: bool, message: str, data: Any, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": ok, "message": message, "data": data}),
    )


def success(data: Any = None, message: str = "Success", status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return _envelope(True, message, data, status_code)


def error(message: str = "Error", status_code: int = status.HTTP_400_BAD_REQUEST, data: Any = None) -> JSONResponse:
    return _envelope(False, message, data, status_code)


def created(data: Any = None, message: str = "Created successfully") -> JSONResponse:
    return success(data, message, status.HTTP_201_CREATED)


def not_found(message: str = "Resource not found") -> JSONResponse:
    return error(message, status.HTTP_404_NOT_FOUND)


def server_error(message: str = "Internal server error") -> JSONResponse:
    return error(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
