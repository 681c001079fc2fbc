"""
Request body size limit middleware.

Rejects requests whose declared ``Content-Length`` exceeds the configured
limit with ``413`` before the body is read.
"""

from typing import Callable

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from hsn_api.core.logging_config import get_logger
from hsn_api.server import responses

logger = get_logger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than ``max_body_bytes``."""

    def __init__(self, app, max_body_bytes: int):
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                return responses.error("Invalid Content-Length header", status.HTTP_400_BAD_REQUEST)
            if declared > self.max_body_bytes:
                logger.warning(
                    f"Rejected request body of {declared} bytes: {request.method} {request.url.path}",
                    extra={"limit": self.max_body_bytes},
                )
                return responses.error("Request entity too large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        return await call_next(request)
