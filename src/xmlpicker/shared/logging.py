"""Structured logging utilities for streaming XML picking.

Every record carries the component that emitted it and the correlation ID of
the parse run, plus any context bound to the logger (selector, namespace
mode, source name), so output from several concurrent parses can be told
apart.
"""

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(component)s] %(message)s"


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for parse run tracking
            component: Component name for structured logging
            context: Extra fields attached to every record
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger sharing this one's identity with extra context."""
        merged = dict(self.context)
        merged.update(context)
        return CorrelationLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        combined_extra.update(self.context)
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def is_debug_enabled(self) -> bool:
        """Check whether DEBUG records would be emitted."""
        return self.logger.isEnabledFor(logging.DEBUG)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log error message with correlation info."""
        self.logger.error(message, extra=self._get_extra(extra))


class _ComponentDefaults(logging.Filter):
    """Fill in component/correlation_id for records from foreign loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "correlation_id"):
            record.correlation_id = None
        return True


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up root logging for command line use.

    Args:
        verbose: Emit DEBUG records
        quiet: Only emit ERROR records
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if not any(isinstance(f, _ComponentDefaults) for f in handler.filters):
            handler.addFilter(_ComponentDefaults())


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for parse run tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
