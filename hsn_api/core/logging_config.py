"""
Logging setup for the HSN API.

``setup_logging`` applies one ``logging.config.dictConfig`` schema: a console
handler, an optional DEBUG file handler (``ENABLE_FILE_LOGGING``) and the
levels of our own packages and of the noisier dependencies. Defaults are read
from the application settings; arguments override them.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FILE_NAME = "hsn_api.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FORMATS = {
    "simple": "%(levelname)-8s %(name)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s [%(name)s %(filename)s:%(lineno)d] %(message)s",
    "json": (
        '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
        '"line": %(lineno)d, "message": "%(message)s"}'
    ),
}

LOGGER_LEVELS = {
    "hsn_api": "INFO",
    "hsn_api.core.database": "DEBUG",
    "hsn_api.projects": "DEBUG",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "aiosmtplib": "WARNING",
    "asyncio": "WARNING",
}


def build_logging_config(level: str, log_format: str, log_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Build the ``dictConfig`` schema.

    Args:
        level: Console level; the root logger itself stays at DEBUG
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``
        log_file: Where the DEBUG file handler writes, ``None`` for console only
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level.upper(), "formatter": "line"},
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_file),
            "encoding": "utf-8",
            "level": "DEBUG",
            "formatter": "line",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"line": {"format": FORMATS.get(log_format, FORMATS["detailed"]), "datefmt": DATE_FORMAT}},
        "handlers": handlers,
        "loggers": {name: {"level": name_level} for name, name_level in LOGGER_LEVELS.items()},
        "root": {"level": "DEBUG", "handlers": list(handlers)},
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override ``LOG_LEVEL``
        log_format: Override ``LOG_FORMAT``
        enable_file: Allow the file handler; it is only added when
            ``ENABLE_FILE_LOGGING`` is switched on as well
    """
    # Imported here: the settings package imports modules that log through this one.
    from hsn_api.server.core.config import settings

    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format

    log_file = None
    if enable_file and settings.enable_file_logging:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

    logging.config.dictConfig(build_logging_config(level, fmt, log_file))
    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={fmt}, file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get the logger of a module (pass ``__name__``)."""
    return logging.getLogger(name)
