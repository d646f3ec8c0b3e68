"""Configuration classes for streaming XML picking.

This module provides configuration objects for the tokenizer, tree builder
and input layer. All of them validate themselves on construction.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_MAX_DEPTH = 1000
DEFAULT_MAX_CHILDREN = 1000
DEFAULT_CHUNK_SIZE = 64 * 1024


class NamespaceMode(Enum):
    """Namespace handling policy, selected once per parse."""

    EXPAND = "expand"  # Names carry resolved namespace URIs
    STRIP = "strip"    # All namespace information is discarded
    PREFIX = "prefix"  # Literal prefixes kept, declarations tracked per node

    @classmethod
    def from_name(cls, name: str) -> "NamespaceMode":
        """Look up a mode by its command line spelling."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = [mode.value for mode in cls]
            raise ValueError(
                f"namespace mode must be one of {valid}, got {name!r}"
            ) from None


@dataclass
class LimitsConfig:
    """Resource caps; violating any of them is fatal for the parse."""

    max_depth: int = DEFAULT_MAX_DEPTH
    max_children: int = DEFAULT_MAX_CHILDREN
    max_tokens: Optional[int] = None  # None means unlimited

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if self.max_children <= 0:
            raise ValueError("max_children must be > 0")
        if self.max_tokens is not None and self.max_tokens < 0:
            raise ValueError("max_tokens must be >= 0 or None")


@dataclass
class StreamConfig:
    """Configuration for reading the byte source."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    auto_decompress: bool = True

    def __post_init__(self) -> None:
        """Validate stream configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("limits", "stream")


@dataclass(frozen=True)
class PickerConfig:
    """Complete configuration for one picking run.

    Immutable, so a single instance can be shared between parses running in
    different threads.
    """

    selector: str = ""
    namespace_mode: NamespaceMode = NamespaceMode.PREFIX
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete picker configuration."""
        try:
            if isinstance(self.namespace_mode, str):
                object.__setattr__(
                    self, "namespace_mode", NamespaceMode.from_name(self.namespace_mode)
                )
            if not isinstance(self.selector, str):
                raise ValueError("selector must be a string")
            self.limits.__post_init__()
            self.stream.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "PickerConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New PickerConfig instance with overrides applied

        Example:
            >>> config = PickerConfig()
            >>> new_config = config.override(
            ...     selector="/feed/entry",
            ...     limits__max_depth=64,
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENTS:
            current_config = getattr(self, field_name)
            if isinstance(nested_overrides.get(field_name), dict):
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e

        for key, value in nested_overrides.items():
            if key not in _COMPONENTS:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "selector": self.selector,
            "namespace_mode": self.namespace_mode.value,
            "limits": {
                "max_depth": self.limits.max_depth,
                "max_children": self.limits.max_children,
                "max_tokens": self.limits.max_tokens,
            },
            "stream": {
                "chunk_size": self.stream.chunk_size,
                "auto_decompress": self.stream.auto_decompress,
            },
            "correlation_id": self.correlation_id,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PickerConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos in configuration files surface
        instead of being ignored.
        """
        known = {"selector", "namespace_mode", "limits", "stream", "correlation_id"}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=[f"Valid keys: {sorted(known)}"],
            )
        try:
            kwargs: Dict[str, Any] = {}
            if "selector" in data:
                kwargs["selector"] = data["selector"]
            if "namespace_mode" in data:
                kwargs["namespace_mode"] = NamespaceMode.from_name(data["namespace_mode"])
            if "limits" in data:
                kwargs["limits"] = LimitsConfig(**data["limits"])
            if "stream" in data:
                kwargs["stream"] = StreamConfig(**data["stream"])
            if "correlation_id" in data:
                kwargs["correlation_id"] = data["correlation_id"]
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "PickerConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "PickerConfig":
        """Create the default configuration (root element, prefix mode)."""
        return cls()

    @classmethod
    def untrusted_input(cls, selector: str = "") -> "PickerConfig":
        """Create configuration with tight caps for documents from unknown sources."""
        return cls(
            selector=selector,
            limits=LimitsConfig(
                max_depth=64,
                max_children=256,
                max_tokens=1_000_000,
            ),
        )
