"""
Logging Configuration
=====================
loguru setup shared by the app, uvicorn and the AWS SDK.

Text output (development) shows the request ID and the emitting module
for every line; other environments emit one JSON object per line with
the same context under ``record.extra``.
"""

import sys
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from club_cms.core.config import Settings, settings as default_settings


# ============================================================================
# FORMATS & CONTEXT
# ============================================================================

# Every record carries these; RequestLoggingMiddleware and get_logger override them
CONTEXT_DEFAULTS: Dict[str, str] = {"request_id": "-", "logger_name": "club_cms"}

TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[request_id]} | {extra[logger_name]}:{function}:{line} | {message}"
)

COLOR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{extra[logger_name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Standard-library loggers routed into loguru, with their floor level
INTERCEPTED_LOGGERS: Dict[str, int] = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "uvicorn.error": logging.INFO,
    "fastapi": logging.INFO,
    "botocore": logging.WARNING,
}

logger.configure(extra=CONTEXT_DEFAULTS)


class InterceptHandler(logging.Handler):
    """
    Redirect standard logging records to loguru

    The stdlib logger name becomes ``logger_name`` so library lines are
    attributed the same way as ours.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames to report the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(logger_name=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


# ============================================================================
# SETUP
# ============================================================================

def build_handlers(
    config: Optional[Settings] = None,
    log_dir: Union[str, Path] = "logs",
) -> List[Dict[str, Any]]:
    """
    Handler specs for ``logger.configure``

    Development gets colored stdout plus a daily rotated text file under
    ``log_dir``; everything else gets serialized JSON on stdout.
    """
    config = config or default_settings

    if not config.is_development:
        return [{
            "sink": sys.stdout,
            "format": "{message}",
            "level": "INFO",
            "serialize": True,
            "backtrace": False,
            "diagnose": False,
        }]

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    return [
        {
            "sink": sys.stdout,
            "format": COLOR_FORMAT,
            "level": "DEBUG" if config.DEBUG else "INFO",
            "colorize": True,
            "backtrace": True,
            "diagnose": True,
        },
        {
            "sink": log_dir / "club_cms_{time:YYYY-MM-DD}.log",
            "format": TEXT_FORMAT,
            "level": "DEBUG",
            "rotation": "00:00",
            "retention": "7 days",
            "compression": "zip",
        },
    ]


def intercept_standard_logging() -> None:
    """Route uvicorn, fastapi and botocore records through loguru"""
    for name, level in INTERCEPTED_LOGGERS.items():
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.setLevel(level)
        stdlib_logger.propagate = False


def setup_logging(
    config: Optional[Settings] = None,
    log_dir: Union[str, Path] = "logs",
) -> None:
    """Replace loguru's default sink with the handlers for this environment"""
    config = config or default_settings

    logger.configure(handlers=build_handlers(config, log_dir), extra=CONTEXT_DEFAULTS)
    intercept_standard_logging()

    logger.info("Logging configured for {} environment", config.ENVIRONMENT)


def get_logger(name: Optional[str] = None):
    """
    Get a logger instance

    Args:
        name: Module name shown in text output and JSON ``extra``

    Returns:
        logger: loguru logger, bound to ``name`` when given
    """
    if name:
        return logger.bind(logger_name=name)
    return logger
