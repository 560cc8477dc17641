"""
Library Logging

Library modules get their loggers from get_logger() and never attach
handlers on their own. configure_logger() applies the logging settings to
the "cachekit" logger: it always sets the level, and installs handlers only
when console or file output is asked for.
"""

import os
import sys
import json
import time
import logging
import functools
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar, Union, cast

from cachekit.common.exceptions import ConfigurationError

ROOT_LOGGER_NAME = "cachekit"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-26s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Set on handlers installed by configure_logger()
_OWNED_FLAG = "_cachekit_owned"

F = TypeVar('F', bound=Callable[..., Any])

__all__ = [
    'ROOT_LOGGER_NAME',
    'JsonFormatter',
    'configure_logger',
    'get_logger',
    'log_execution_time'
]


class JsonFormatter(logging.Formatter):
    """
    Formats each record as a single-line JSON object.

    The cache name and call duration, when passed as extras, become
    top-level keys so log pipelines can filter on them.
    """

    EXTRA_FIELDS = ("cache", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logger(
    level: Union[str, int] = logging.INFO,
    use_json: bool = False,
    log_file: Optional[str] = None,
    console: bool = False,
    name: str = ROOT_LOGGER_NAME
) -> logging.Logger:
    """
    Set the library log level and, optionally, where records are written.

    Calling it again replaces the handlers a previous call installed.
    Handlers the application attached itself are left alone.

    Args:
        level: Level name or number
        use_json: Format records with JsonFormatter instead of plain text
        log_file: Append records to this file, creating its directory
        console: Write records to stderr
        name: Logger to configure

    Returns:
        The configured logger

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    target = logging.getLogger(name)
    target.setLevel(level)

    for handler in [h for h in target.handlers if getattr(h, _OWNED_FLAG, False)]:
        target.removeHandler(handler)
        handler.close()

    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        try:
            directory = os.path.dirname(log_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file {log_file}: {e}", config_key="log_file") from e

    formatter = JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_FLAG, True)
        target.addHandler(handler)

    return target


def get_logger(name: str) -> logging.Logger:
    """Get a library logger. Pass __name__ so it sits under the cachekit logger."""
    return logging.getLogger(name)


def log_execution_time(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG
) -> Callable[[F], F]:
    """
    Decorator logging how long each call took, including calls that raise.

    The duration is attached to the record as the duration_ms extra.

    Args:
        logger: Logger to use (defaults to the decorated function's module logger)
        level: Level of the timing records
    """
    def decorator(func: F) -> F:
        target = logger or logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            outcome = "failed"
            try:
                result = func(*args, **kwargs)
                outcome = "finished"
                return result
            finally:
                if target.isEnabledFor(level):
                    elapsed_ms = (time.perf_counter() - start) * 1000
                    target.log(
                        level,
                        f"{func.__qualname__} {outcome} in {elapsed_ms:.2f} ms",
                        extra={"duration_ms": round(elapsed_ms, 3)}
                    )

        return cast(F, wrapper)
    return decorator
