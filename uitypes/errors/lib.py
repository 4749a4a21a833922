"""Exception taxonomy for the datatype engine.

Every structural failure raised while parsing, registering or composing types
derives from SchemaError. Validation of runtime values does not raise these
(apart from CyclicValueError); mismatches are returned as ValidationResult data.
"""


class SchemaError(Exception):
    """Base exception for datatype engine errors."""


class ExpressionSyntaxError(SchemaError):
    """Raised when an expression or annotation string is malformed.

    Attributes:
        raw: The offending source text.
        offset: Character offset of the problem within raw.
        reason: Short description without the location suffix.
    """

    def __init__(self, reason: str, raw: str, offset: int):
        super().__init__(f"{reason} at offset {offset} in {raw!r}")
        self.reason = reason
        self.raw = raw
        self.offset = offset


class DefinitionError(SchemaError):
    """Raised when a raw table entry cannot be turned into a definition."""

    def __init__(self, name: str, message: str):
        super().__init__(f"Invalid definition '{name}': {message}")
        self.name = name


class UnknownTypeError(SchemaError):
    """Raised when a type name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown type '{name}'")
        self.name = name


class DuplicateDefinitionError(SchemaError):
    """Raised when a name is registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Type '{name}' is already defined")
        self.name = name


class RegistryFrozenError(SchemaError):
    """Raised when registering into a registry after the build phase."""

    def __init__(self, name: str):
        super().__init__(f"Cannot register '{name}': registry is frozen")
        self.name = name


class ArityError(SchemaError):
    """Raised when a generic application supplies the wrong number of arguments.

    Attributes:
        name: Generic type name.
        expected: Number of declared parameters.
        given: Number of supplied arguments.
    """

    def __init__(self, name: str, expected: int, given: int, message: str = ""):
        super().__init__(
            message
            or f"Type '{name}' takes {expected} generic argument(s), {given} given"
        )
        self.name = name
        self.expected = expected
        self.given = given


class CompositionConflictError(SchemaError):
    """Raised when two peer supertypes declare the same field differently.

    Attributes:
        field: Name of the clashing field.
        first: Supertype that contributed the field first.
        second: Supertype that contributed the clashing declaration.
    """

    def __init__(self, field: str, first: str, second: str, detail: str = ""):
        message = f"Field '{field}' is declared differently by '{first}' and '{second}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.field = field
        self.first = first
        self.second = second


class InheritanceCycleError(SchemaError):
    """Raised when a supertype chain leads back to a type being composed."""

    def __init__(self, chain: list[str]):
        super().__init__("Cyclic supertype chain: " + " -> ".join(chain))
        self.chain = chain


class ResolutionDepthError(SchemaError):
    """Raised when generic instantiation nests deeper than the configured bound."""

    def __init__(self, name: str, max_depth: int):
        super().__init__(
            f"Resolution of '{name}' exceeded the maximum depth of {max_depth}"
        )
        self.name = name
        self.max_depth = max_depth


class UnknownFieldError(SchemaError):
    """Raised when asking a resolved schema for a field it does not have."""

    def __init__(self, schema: str, field: str):
        super().__init__(f"Schema '{schema}' has no field '{field}'")
        self.schema = schema
        self.field = field


class CyclicValueError(SchemaError):
    """Raised when a runtime value contains a reference cycle."""

    def __init__(self, path: str):
        super().__init__(f"Cyclic value detected at {path}")
        self.path = path


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
