"""Runtime validation of plain data against resolved UI types."""

from .lib import (
    MISSING,
    ValidationFailure,
    ValidationResult,
    Validator,
    is_absent,
)

__all__ = [
    # Absence
    "MISSING",
    "is_absent",
    # Results
    "ValidationFailure",
    "ValidationResult",
    # Validator
    "Validator",
]
