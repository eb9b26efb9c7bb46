"""
Logging utilities for the itinerary coordinate resolver.

Library telemetry (tier decisions, geocode calls and failures, cache
evictions, batch progress) goes to the "itinerary_geo" logger through the
log_* helpers. initialize_logger attaches console and file handlers to the
root logger once per process; until then the messages follow whatever
logging the host application has configured.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

LIBRARY_LOGGER_NAME = "itinerary_geo"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_logger_initialized = False


def _build_handlers(log_file: str) -> List[logging.Handler]:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    # The file keeps per-request DEBUG detail the console leaves out
    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    return [console_handler, file_handler]


def initialize_logger(log_level: Optional[str] = None,
                      log_file: str = "logs/itinerary_geo.log") -> None:
    """
    Configure root logging for an application embedding the resolver.

    Safe to call repeatedly; only the first call has any effect.

    Args:
        log_level: Level name (DEBUG, INFO, ...); LOG_LEVEL from the
            environment when omitted, unknown names mean INFO
        log_file: Path of the DEBUG-level log file
    """
    global _logger_initialized

    if _logger_initialized:
        return

    level_name = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in _build_handlers(log_file):
        root_logger.addHandler(handler)

    _logger_initialized = True

    logging.getLogger(LIBRARY_LOGGER_NAME).info(
        f"Logger initialized with level {logging.getLevelName(level)}, file: {log_file}"
    )


def log_debug(message: str) -> None:
    """Log per-request detail, such as individual tier decisions."""
    logging.getLogger(LIBRARY_LOGGER_NAME).debug(message)


def log_info(message: str) -> None:
    """
    Log an info message.

    Args:
        message: Message to log
    """
    logging.getLogger(LIBRARY_LOGGER_NAME).info(message)


def log_warning(message: str) -> None:
    """Log a degraded outcome (failed geocode, fallback used)."""
    logging.getLogger(LIBRARY_LOGGER_NAME).warning(message)


def log_error(message: str) -> None:
    logging.getLogger(LIBRARY_LOGGER_NAME).error(message)
