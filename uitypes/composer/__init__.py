"""Composition of type definitions into flattened, generic-free schemas."""

from .lib import Composer, Resolved, ResolvedField, ResolvedSchema, field_annotations

__all__ = [
    "Composer",
    "Resolved",
    "ResolvedField",
    "ResolvedSchema",
    "field_annotations",
]
