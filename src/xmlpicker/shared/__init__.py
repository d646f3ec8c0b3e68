"""Shared utilities for streaming XML picking.

This module provides configuration objects, the error taxonomy, run
statistics and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    LimitsConfig,
    NamespaceMode,
    PickerConfig,
    StreamConfig,
)
from .errors import (
    ChildLimitError,
    DepthLimitError,
    LimitExceededError,
    MismatchedEndElementError,
    NamespaceResolutionError,
    ParserStateError,
    PickerError,
    StructuralError,
    TokenLimitError,
    UnexpectedEndElementError,
    UnexpectedEOFError,
    UnexpectedTokenError,
    XMLSyntaxError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import BuildStatistics

__all__ = [
    "BuildStatistics",
    "ChildLimitError",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DepthLimitError",
    "LimitExceededError",
    "LimitsConfig",
    "MismatchedEndElementError",
    "NamespaceMode",
    "NamespaceResolutionError",
    "ParserStateError",
    "PickerConfig",
    "PickerError",
    "StreamConfig",
    "StructuralError",
    "TokenLimitError",
    "UnexpectedEndElementError",
    "UnexpectedEOFError",
    "UnexpectedTokenError",
    "XMLSyntaxError",
    "configure_logging",
    "get_logger",
]
