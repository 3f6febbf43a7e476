"""
Logging configuration for the GeoJoin block/submission overlay system.

Console output is plain text in development and one JSON document per line in
production. Both formats carry the thread name, so records written by the
worker threads of a concurrent join run can be told apart. An optional
rotating log file uses the same formatter as the console.
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import List, Optional


LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5

PLAIN_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers kept at WARNING whatever the configured level
QUIET_LOGGERS = ("shapely", "shapely.geos")

_RESERVED_RECORD_KEYS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage',
    'taskName', 'message', 'asctime',
])


class JSONFormatter(logging.Formatter):
    """Formats each record as a single-line JSON document.

    Values passed through ``logger.x(..., extra={...})`` become top-level
    keys; values without a JSON form are rendered with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        document = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'thread': record.threadName,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            document['exception'] = self.formatException(record.exc_info)

        document.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        )
        return json.dumps(document, default=str)


def _build_formatter(environment: str) -> logging.Formatter:
    if environment == "production":
        return JSONFormatter(datefmt='%Y-%m-%d %H:%M:%S')
    return logging.Formatter(PLAIN_FORMAT)


def _build_handlers(environment: str, log_dir: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            filename=log_path / f"geojoin_{environment}.log",
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT
        ))

    formatter = _build_formatter(environment)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(environment: str = "development",
                  log_level: str = "INFO",
                  log_dir: Optional[str] = None) -> None:
    """
    Configure the root logger for a GeoJoin environment.

    Any handlers already on the root logger are replaced.

    Args:
        environment: Environment name; "production" selects JSON output
        log_level: Logging level name (DEBUG/INFO/WARNING/ERROR)
        log_dir: Directory for a rotating ``geojoin_<environment>.log`` file (optional)

    Raises:
        AttributeError: If log_level is not a known logging level name
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = _build_handlers(environment, log_dir)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_performance(func):
    """Decorator logging the start, duration and any failure of a call.

    Records go to the logger of the module defining ``func``; exceptions are
    logged and re-raised unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        started = time.perf_counter()

        logger.info(f"Starting {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed {func.__name__} after {time.perf_counter() - started:.3f}s: {e}")
            raise

        logger.info(f"Completed {func.__name__} in {time.perf_counter() - started:.3f}s")
        return result

    return wrapper
