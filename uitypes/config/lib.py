"""Centralized environment configuration management for uitypes.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from uitypes.config import EnvVar, get_environment
    >>>
    >>> depth = get_environment(EnvVar.UITYPES_MAX_DEPTH)  # Returns int
    >>> depth = get_environment(EnvVar.UITYPES_MAX_DEPTH, override=16)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "UITYPES_MAX_DEPTH").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by uitypes.

    Categories:
        - logging: Log output configuration
        - resolution: Composer limits
        - catalogue: Built-in type catalogue selection
        - annotation: Field annotation parsing
    """

    UITYPES_LOG_LEVEL = EnvConfig(
        name="UITYPES_LOG_LEVEL",
        default="WARNING",
        var_type=str,
        description="Log level applied by setup_logging() when none is given",
        category="logging",
    )
    UITYPES_MAX_DEPTH = EnvConfig(
        name="UITYPES_MAX_DEPTH",
        default=64,
        var_type=int,
        description="Maximum nesting of supertype/generic resolution",
        category="resolution",
    )
    UITYPES_CATALOGUE = EnvConfig(
        name="UITYPES_CATALOGUE",
        default="std",
        var_type=str,
        description="Built-in catalogue loaded by load_engine() (std, pub)",
        category="catalogue",
    )
    UITYPES_STRICT_ANNOTATIONS = EnvConfig(
        name="UITYPES_STRICT_ANNOTATIONS",
        default=False,
        var_type=bool,
        description="Reject unrecognised values of known annotation keys",
        category="annotation",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int or bool).

    Example:
        >>> get_environment(EnvVar.UITYPES_MAX_DEPTH)
        64
        >>> get_environment(EnvVar.UITYPES_MAX_DEPTH, override=8)
        8
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_max_depth(override: int | None = None) -> int:
    """Get the resolution depth bound. Non-positive values fall back to the default."""
    depth = get_environment(EnvVar.UITYPES_MAX_DEPTH, override=override)
    if depth < 1:
        return EnvVar.UITYPES_MAX_DEPTH.value.default
    return depth


def get_log_level() -> str:
    """Get the configured log level name."""
    return str(get_environment(EnvVar.UITYPES_LOG_LEVEL)).upper()


def get_default_catalogue() -> str:
    """Get the name of the built-in catalogue to load by default."""
    return get_environment(EnvVar.UITYPES_CATALOGUE)


def strict_annotations() -> bool:
    """Whether unrecognised values of known annotation keys are rejected."""
    return get_environment(EnvVar.UITYPES_STRICT_ANNOTATIONS)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, resolution, catalogue,
                 annotation). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_max_depth",
    "get_log_level",
    "get_default_catalogue",
    "strict_annotations",
    # Introspection
    "list_environment_variables",
]
