"""Shared utilities for rsx parsing.

This module provides the configuration object, the syntax error type and the
correlation-aware logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import RsxSyntaxError
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "ParserConfig",
    "RsxSyntaxError",
    "get_logger",
]
