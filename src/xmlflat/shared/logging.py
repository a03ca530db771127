"""Structured logging utilities for xmlflat.

Records emitted through CorrelationLogger always carry the component name and
the caller's correlation id in their ``extra`` mapping.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class TimedOperation:
    """Elapsed-time holder yielded by CorrelationLogger.timed()."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.started = time.perf_counter()
        self.elapsed_ms = 0.0

    def stop(self) -> float:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000
        return self.elapsed_ms


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split('.')[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with correlation info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log exception message with correlation info and traceback."""
        self.logger.exception(message, extra=self._get_extra(extra))

    @contextmanager
    def timed(
        self,
        operation: str,
        extra: Optional[Dict[str, Any]] = None
    ) -> Iterator[TimedOperation]:
        """Time a block and log its duration at DEBUG level.

        The yielded TimedOperation exposes ``elapsed_ms`` once the block exits,
        also when it exits with an exception.
        """
        timer = TimedOperation(operation)
        try:
            yield timer
        finally:
            timer.stop()
            details = {"operation": operation, "elapsed_ms": round(timer.elapsed_ms, 3)}
            if extra:
                details.update(extra)
            self.debug(f"{operation} finished", extra=details)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
