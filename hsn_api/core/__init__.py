"""
Core utilities and configuration for the HSN API.

This package provides core functionality including logging configuration,
monitoring, single-flight coordination and the database layer.
"""

from hsn_api.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
