"""Type registry: qualified name to immutable type definition."""

from .lib import (
    PRELUDE,
    AliasDef,
    FieldDef,
    GenericParameter,
    RawStructDefinition,
    Registry,
    StructDef,
    TypeDefinition,
    build_definition,
    flatten_tables,
)

__all__ = [
    # Definitions
    "GenericParameter",
    "FieldDef",
    "StructDef",
    "AliasDef",
    "TypeDefinition",
    # Raw tables
    "RawStructDefinition",
    "build_definition",
    "flatten_tables",
    # Registry
    "PRELUDE",
    "Registry",
]
