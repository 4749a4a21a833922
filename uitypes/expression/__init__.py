"""Type expression trees and the compact expression grammar parser.

Example usage:
    >>> from uitypes.expression import parse, Optional, Reference
    >>> parse("W?") == Optional(Reference("W"))
    True
"""

from .lib import Token, parse, tokenize
from .models import (
    PRIMITIVE_NAMES,
    EnumSet,
    Generic,
    Intersection,
    Literal,
    Mapping,
    Optional,
    Primitive,
    Reference,
    Sequence,
    TypeExpression,
    Union,
    is_struct_shaped,
    iter_references,
    substitute,
)

__all__ = [
    # Parser
    "parse",
    "tokenize",
    "Token",
    # Expression variants
    "PRIMITIVE_NAMES",
    "Primitive",
    "Reference",
    "Literal",
    "EnumSet",
    "Union",
    "Intersection",
    "Optional",
    "Sequence",
    "Mapping",
    "Generic",
    "TypeExpression",
    # Tree utilities
    "substitute",
    "iter_references",
    "is_struct_shaped",
]
