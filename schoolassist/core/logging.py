"""
Logging utilities

``get_logger`` hands out adapters that merge bound context into every
record's ``extra``; ``log_execution_time`` times service operations at DEBUG.
Handlers and formatters are installed by ``schoolassist.config.logging``.
"""

import logging
import time
from functools import partialmethod, wraps
from typing import Any, Dict, Optional


class LoggerAdapter:
    """Wraps a stdlib logger and attaches bound key/value context"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context: Dict[str, Any] = {}

    def add_context(self, **kwargs):
        """Bind values to every following record"""
        self._context.update(kwargs)
        return self

    def _log(self, level: int, message: str, *args, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        # bound context wins over per-call extra
        kwargs['extra'] = {**(kwargs.get('extra') or {}), **self._context}
        # report the caller's frame, not this adapter's
        kwargs.setdefault('stacklevel', 2)
        self.logger.log(level, message, *args, **kwargs)

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)
    error = partialmethod(_log, logging.ERROR)
    critical = partialmethod(_log, logging.CRITICAL)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        kwargs.setdefault('stacklevel', 3)
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """Adapter over ``logging.getLogger(name)``; the package logger by default."""
    return LoggerAdapter(logging.getLogger(name or "schoolassist"))


def log_execution_time(logger_name: Optional[str] = None):
    """
    Log how long the decorated call took, at DEBUG.

    Failures are logged with the exception type and re-raised unchanged.

    Args:
        logger_name: Logger to use; defaults to the decorated function's module
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)
        name = func.__qualname__

        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.debug(
                    "%s failed after %.3fs", name, time.perf_counter() - started,
                    extra={'function': name, 'error_type': type(e).__name__},
                )
                raise
            logger.debug(
                "%s completed in %.3fs", name, time.perf_counter() - started,
                extra={'function': name},
            )
            return result

        return wrapper
    return decorator
