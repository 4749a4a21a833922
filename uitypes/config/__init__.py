"""Centralized configuration management for uitypes.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from uitypes.config import EnvVar, get_environment
    >>>
    >>> depth = get_environment(EnvVar.UITYPES_MAX_DEPTH)  # Returns int: 64
    >>> depth = get_environment(EnvVar.UITYPES_MAX_DEPTH, override=16)

Environment Variable Categories:
    logging: Log level for setup_logging()
    resolution: Composer recursion bound
    catalogue: Built-in catalogue selection
    annotation: Strictness of field annotation parsing
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_catalogue,
    get_environment,
    get_environment_info,
    get_log_level,
    get_max_depth,
    list_environment_variables,
    strict_annotations,
)

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
