"""Error taxonomy for the datatype engine."""

from .lib import (
    ArityError,
    CompositionConflictError,
    CyclicValueError,
    DefinitionError,
    DuplicateDefinitionError,
    ExpressionSyntaxError,
    InheritanceCycleError,
    RegistryFrozenError,
    ResolutionDepthError,
    SchemaError,
    UnknownFieldError,
    UnknownTypeError,
)

__all__ = [
    "SchemaError",
    "ExpressionSyntaxError",
    "DefinitionError",
    "UnknownTypeError",
    "DuplicateDefinitionError",
    "RegistryFrozenError",
    "ArityError",
    "CompositionConflictError",
    "InheritanceCycleError",
    "ResolutionDepthError",
    "UnknownFieldError",
    "CyclicValueError",
]
