"""
Monitoring and Tracing Configuration Module.

This module provides optional integration with Pydantic Logfire for tracing
the HSN API, including:
- API endpoint tracing
- Database operation monitoring
- Form submission events
- Error tracking

Logfire is only configured when ``LOGFIRE_ENABLED`` is set and a token is
available. Every helper below degrades to a debug log line when Logfire is
not installed or not configured.
"""

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)

LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "hsn-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")

LOGFIRE_TRACE_SQLALCHEMY = os.getenv("LOGFIRE_TRACE_SQLALCHEMY", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_FASTAPI = os.getenv("LOGFIRE_TRACE_FASTAPI", "true").lower() in ("true", "1", "yes")


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance. When provided, endpoint tracing is
            enabled as well.

    Returns:
        True when Logfire was configured, False otherwise.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set. Monitoring will not work.")
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )

        if LOGFIRE_TRACE_SQLALCHEMY:
            try:
                logfire.instrument_sqlalchemy()
                logger.info("Logfire: SQLAlchemy instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument SQLAlchemy: {e}")

        if LOGFIRE_TRACE_FASTAPI and app is not None:
            try:
                logfire.instrument_fastapi(app=app)
                logger.info("Logfire: FastAPI instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument FastAPI: {e}")

        logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
        return True

    except ImportError:
        logger.warning("Logfire is enabled but 'logfire' package is not installed.")
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
    return False


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        import logfire

        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_submission(project: str, kind: str, record_id: Optional[int], **attributes: Any) -> None:
    """
    Log a stored form submission.

    Args:
        project: Project the submission belongs to
        kind: Submission kind (``contact`` or ``newsletter``)
        record_id: Primary key of the stored row
        **attributes: Extra attributes attached to the event
    """
    try:
        import logfire

        logfire.info(
            "Form submission stored",
            project=project,
            kind=kind,
            record_id=record_id,
            **attributes,
        )
    except Exception:
        logger.debug(f"Could not log submission to Logfire: {project}/{kind} id={record_id}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        import logfire

        logfire.error(
            f"{error_type}: {error_message}",
            **(context or {}),
        )
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
