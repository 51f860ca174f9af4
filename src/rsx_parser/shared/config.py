"""Configuration classes for rsx parsing.

The parser configuration is immutable so that a single instance can be shared
between any number of concurrent parses.
"""

from dataclasses import dataclass, fields
from typing import Any, List, Mapping, Optional


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configures the tree builder behavior.

    Attributes:
        flatten: Whether the returned node tree is nested or flat. When set,
            every node's children are moved out to follow it in the result
            list, yielding a single pre-order sequence.
        max_depth: Optional cap on element nesting depth. ``None`` leaves
            nesting bounded only by the interpreter's recursion limit, which
            at the default limit of 1000 frames allows roughly 300 levels
            before ``RecursionError``; set a cap to get an ``RsxSyntaxError``
            instead.
        correlation_id: Optional correlation ID attached to log records.
    """

    flatten: bool = False
    max_depth: Optional[int] = None
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not isinstance(self.flatten, bool):
            raise ConfigValidationError(
                "flatten must be a bool", field_name="flatten"
            )
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise ConfigValidationError(
                    "max_depth must be an int or None", field_name="max_depth"
                )
            if self.max_depth <= 0:
                raise ConfigValidationError(
                    "max_depth must be > 0 or None", field_name="max_depth"
                )
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a str or None", field_name="correlation_id"
            )

    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default nested-tree configuration."""
        return cls()

    @classmethod
    def flat(cls) -> "ParserConfig":
        """Create a configuration producing a flat pre-order node list."""
        return cls(flatten=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParserConfig":
        """Build a configuration from a plain mapping, e.g. loaded JSON.

        Raises:
            ConfigValidationError: On unknown keys or invalid values
        """
        known = [f.name for f in fields(cls)]
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=known,
            )
        return cls(**dict(data))

    def to_dict(self) -> dict:
        """Convert configuration to dictionary representation."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
