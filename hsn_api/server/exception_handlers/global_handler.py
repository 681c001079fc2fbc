"""
Exception Handlers for the FastAPI Application.

This module provides the global exception handler that catches all unhandled
exceptions and logs detailed information including error ID, request context
and full traceback, plus the handlers that shape framework errors (unknown
routes, validation failures, unavailable database) into the standard
``{success, message, data}`` envelope.
"""

import traceback
import uuid
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hsn_api.core.logging_config import get_logger
from hsn_api.core.monitoring import log_error
from hsn_api.server import responses
from hsn_api.server.bootstrap import DatabaseUnavailableError
from hsn_api.server.schemas import BLANK_FIELD_ERROR, INVALID_EMAIL_ERROR

logger = get_logger(__name__)


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings is not None and settings.is_development)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = uuid.uuid4().hex[:12]
    stack = traceback.format_exception(type(exc), exc, exc.__traceback__)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    content: Dict[str, Any] = {
        "success": False,
        "message": "Internal server error",
        "data": None,
        "error_id": error_id,
    }
    if _is_development(request):
        content["error_type"] = type(exc).__name__
        content["stack"] = "".join(stack)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method, ...) in the envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Endpoint not found"
    else:
        message = str(exc.detail)
    response = responses.error(message, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Summarize request validation errors in one message.

    Missing or blank fields are reported first, all at once; then an invalid
    email; then anything else.
    """
    missing: List[str] = []
    invalid_email = False
    for err in errors:
        loc = err.get("loc") or ()
        if err["type"] == "missing" and tuple(loc) == ("body",):
            return "Request body is required"
        if err["type"] in ("missing", BLANK_FIELD_ERROR):
            field = str(loc[-1]) if loc else "body"
            if field not in missing:
                missing.append(field)
        elif err["type"] == INVALID_EMAIL_ERROR:
            invalid_email = True

    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    if invalid_email:
        return "Invalid email format"
    details = "; ".join(
        f"{'.'.join(str(part) for part in (err.get('loc') or ())[1:]) or 'body'}: {err['msg']}" for err in errors
    )
    return f"Invalid request: {details}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer request validation failures with 400."""
    message = validation_message(exc.errors())
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return responses.error(message, status.HTTP_400_BAD_REQUEST)


async def database_unavailable_handler(request: Request, exc: DatabaseUnavailableError) -> JSONResponse:
    """Answer requests that need a database that could not be prepared with 503."""
    return responses.error(exc.message, status.HTTP_503_SERVICE_UNAVAILABLE)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DatabaseUnavailableError, database_unavailable_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
