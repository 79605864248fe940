"""
Logging configuration for the Flood Watch service.

Besides the usual console, application and error logs, refresh cycles get
a log of their own: the monitor, scheduler and feed client loggers write
to `floodwatch_cycles.log` at `CYCLE_LOG_LEVEL`, so a cycle can be traced
at DEBUG without turning up the rest of the service.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from floodwatch.config import settings

# Loggers that take part in a refresh cycle
CYCLE_LOGGERS = (
    "floodwatch.services.monitor",
    "floodwatch.services.scheduler",
    "floodwatch.services.feeds",
)

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir: Optional[Union[str, Path]] = None):
    """
    Configure application logging.

    Args:
        log_dir: Directory for the log files, defaults to `settings.LOG_DIR`

    Returns:
        The root logger
    """
    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(settings.LOG_LEVEL)
    logger.handlers.clear()

    if settings.DEBUG:
        log_format = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        log_format = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    logger.addHandler(_rotating(log_dir / "floodwatch.log", logging.INFO, log_format))
    logger.addHandler(_rotating(log_dir / "floodwatch_errors.log", logging.ERROR, log_format))

    cycle_level = logging.getLevelName(settings.CYCLE_LOG_LEVEL.upper())
    cycle_handler = _rotating(log_dir / "floodwatch_cycles.log", cycle_level, log_format)
    for name in CYCLE_LOGGERS:
        cycle_logger = logging.getLogger(name)
        cycle_logger.setLevel(cycle_level)
        cycle_logger.handlers.clear()
        cycle_logger.addHandler(cycle_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("=" * 60)
    logger.info("Flood Watch - Logging initialized")
    logger.info(f"Log Level: {settings.LOG_LEVEL}, cycle log level: {settings.CYCLE_LOG_LEVEL}")
    logger.info(f"Log directory: {log_dir}")
    logger.info("=" * 60)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, typically called with `__name__`."""
    return logging.getLogger(name)
