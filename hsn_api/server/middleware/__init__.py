"""
Middleware package for the HSN API server.

This package contains custom middleware for request logging, security
headers and request body limits.
"""

from .body_size_limit import BodySizeLimitMiddleware
from .request_logging import RequestLoggingMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = ["BodySizeLimitMiddleware", "RequestLoggingMiddleware", "SecurityHeadersMiddleware"]
