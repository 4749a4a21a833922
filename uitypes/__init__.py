"""uitypes: datatype resolution and validation for virtual user interfaces."""

from uitypes.composer import Composer, ResolvedField, ResolvedSchema, field_annotations
from uitypes.engine import TypeEngine, load_engine
from uitypes.errors import SchemaError
from uitypes.expression import parse
from uitypes.registry import Registry
from uitypes.validation import ValidationFailure, ValidationResult, Validator

__all__ = [
    # Engine
    "TypeEngine",
    "load_engine",
    # Building blocks
    "parse",
    "Registry",
    "Composer",
    "ResolvedSchema",
    "ResolvedField",
    "field_annotations",
    # Validation
    "Validator",
    "ValidationResult",
    "ValidationFailure",
    # Errors
    "SchemaError",
]
