"""Type registry and raw definition tables.

Definitions are built once from static tables and never mutated. A raw
table entry is one of:

- an expression string, registered as an alias ('UI.Length|number')
- the string '{}', registered as a struct without fields
- a mapping with optional '$macro' (generic parameters) and '$super'
  (supertype expression) keys plus field name to field string entries

Example:
    >>> registry = Registry()
    >>> _ = registry.register("UI.Sizeable", {"height": "UI.Size?", "width": "UI.Size?"})
    >>> registry.lookup("UI.Sizeable").fields["width"].expression
    Optional(inner=Reference(name='UI.Size'))
"""

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from uitypes.annotation import EMPTY_ANNOTATIONS, AnnotationSet, extract_annotations
from uitypes.core import get_logger
from uitypes.errors import (
    DefinitionError,
    DuplicateDefinitionError,
    ExpressionSyntaxError,
    RegistryFrozenError,
    UnknownTypeError,
)
from uitypes.expression import (
    PRIMITIVE_NAMES,
    Optional,
    Reference,
    TypeExpression,
    is_struct_shaped,
    iter_references,
    parse,
)

logger = get_logger("registry")

_QUALIFIED_NAME = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")
_PARAMETER_NAME = re.compile(r"[A-Za-z_$][\w$]*")
_FIELD_NAME = re.compile(r"[A-Za-z_][\w]*")

EMPTY_STRUCT = "{}"


# =============================================================================
# Definitions
# =============================================================================


@dataclass(frozen=True)
class GenericParameter:
    """A macro parameter with an optional default.

    Attributes:
        name: Placeholder name referenced by field expressions.
        default: Expression bound when an application omits the argument.
    """

    name: str
    default: TypeExpression | None = None

    @classmethod
    def from_raw(cls, raw: str) -> "GenericParameter":
        """Parse the 'W=UI.Widget' or bare 'T' macro syntax."""
        name, sep, default = raw.partition("=")
        name = name.strip()
        if not _PARAMETER_NAME.fullmatch(name):
            raise ExpressionSyntaxError(f"invalid parameter name {name!r}", raw, 0)
        if not sep:
            return cls(name)
        return cls(name, parse(default.strip()))

    def __str__(self) -> str:
        return self.name if self.default is None else f"{self.name}={self.default}"


@dataclass(frozen=True)
class FieldDef:
    """A declared struct field."""

    name: str
    expression: TypeExpression
    annotations: AnnotationSet = EMPTY_ANNOTATIONS
    raw: str = ""


@dataclass(frozen=True)
class StructDef:
    """Struct definition with own fields and an optional supertype expression.

    The fields mapping is read-only once the definition exists.
    """

    name: str
    fields: MappingProxyType[str, FieldDef] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    supertype: TypeExpression | None = None
    parameters: tuple[GenericParameter, ...] = ()

    def __post_init__(self):
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class AliasDef:
    """Definition that names a type expression."""

    name: str
    expression: TypeExpression
    parameters: tuple[GenericParameter, ...] = ()

    @property
    def struct_shaped(self) -> bool:
        """Whether the alias composes struct types, e.g. 'UI.Input+UI.Layout'."""
        return is_struct_shaped(self.expression)


TypeDefinition = StructDef | AliasDef


# =============================================================================
# Raw table parsing
# =============================================================================


class RawStructDefinition(BaseModel):
    """Validated shape of a struct table entry."""

    macro: list[str] = Field(default_factory=list)
    super_: str | None = None
    entries: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _split_entry(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        return {
            "macro": data.get("$macro", []),
            "super_": data.get("$super"),
            "entries": {k: v for k, v in data.items() if k not in ("$macro", "$super")},
        }

    @field_validator("macro", mode="before")
    @classmethod
    def _single_macro(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("entries")
    @classmethod
    def _field_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not _FIELD_NAME.fullmatch(name):
                raise ValueError(f"invalid field name {name!r}")
        return value


def _parameters(name: str, macros: list[str]) -> tuple[GenericParameter, ...]:
    parameters = tuple(GenericParameter.from_raw(m) for m in macros)
    seen: set[str] = set()
    for parameter in parameters:
        if parameter.name in seen:
            raise DefinitionError(name, f"duplicate parameter '{parameter.name}'")
        seen.add(parameter.name)
    return parameters


def _field(owner: str, name: str, raw: str) -> FieldDef:
    try:
        text, annotations = extract_annotations(raw)
    except ExpressionSyntaxError as exc:
        raise ExpressionSyntaxError(f"{owner}.{name}: {exc.reason}", exc.raw, exc.offset) from exc
    try:
        expression = parse(text)
    except ExpressionSyntaxError as exc:
        # offsets point into the declared string, leading blanks included
        offset = exc.offset + len(raw) - len(raw.lstrip())
        raise ExpressionSyntaxError(f"{owner}.{name}: {exc.reason}", raw, offset) from exc
    return FieldDef(name, expression, annotations, raw)


def build_definition(name: str, raw: Any) -> TypeDefinition:
    """Turn a raw table entry into a TypeDefinition.

    Args:
        name: Qualified type name.
        raw: Expression string, '{}', mapping entry or a ready definition.

    Returns:
        StructDef or AliasDef.

    Raises:
        DefinitionError: When the entry has the wrong shape.
        ExpressionSyntaxError: When an expression inside the entry is malformed.
    """
    if isinstance(raw, (StructDef, AliasDef)):
        if raw.name != name:
            raise DefinitionError(name, f"definition is named '{raw.name}'")
        return raw

    if isinstance(raw, str):
        if raw.strip() == EMPTY_STRUCT:
            return StructDef(name)
        try:
            return AliasDef(name, parse(raw))
        except ExpressionSyntaxError as exc:
            raise ExpressionSyntaxError(f"{name}: {exc.reason}", exc.raw, exc.offset) from exc

    if isinstance(raw, Mapping):
        try:
            entry = RawStructDefinition.model_validate(raw)
        except ValidationError as exc:
            raise DefinitionError(name, str(exc)) from exc
        try:
            parameters = _parameters(name, entry.macro)
            supertype = parse(entry.super_) if entry.super_ else None
        except ExpressionSyntaxError as exc:
            raise ExpressionSyntaxError(f"{name}: {exc.reason}", exc.raw, exc.offset) from exc
        fields = {k: _field(name, k, v) for k, v in entry.entries.items()}
        return StructDef(name, fields, supertype, parameters)

    raise DefinitionError(name, f"unsupported entry of type {type(raw).__name__}")


def _is_namespace(value: Mapping) -> bool:
    # Nested tables group types under capitalized names; fields are lower-case
    return bool(value) and all(
        isinstance(k, str) and k[:1].isupper() for k in value.keys()
    )


def flatten_tables(
    tables: Mapping[str, Any] | Iterable[tuple[str, Any]], prefix: str = ""
) -> list[tuple[str, Any]]:
    """Flatten nested namespace tables into (qualified name, raw entry) pairs.

    Example:
        >>> flatten_tables({"UI": {"Flow": {"Cut": '"never"_"reverse"'}}})
        [('UI.Flow.Cut', '"never"_"reverse"')]
    """
    items = tables.items() if isinstance(tables, Mapping) else tables
    flat: list[tuple[str, Any]] = []
    for key, value in items:
        name = f"{prefix}{key}"
        if isinstance(value, Mapping) and _is_namespace(value):
            flat.extend(flatten_tables(value, f"{name}."))
        else:
            flat.append((name, value))
    return flat


# =============================================================================
# Registry
# =============================================================================


PRELUDE: dict[str, Any] = {
    # a flag is set or absent
    "Flag": "boolean?",
    # text is a single line or a list of lines
    "Text": "string|[string]",
    "Maybe": AliasDef("Maybe", Optional(Reference("T")), (GenericParameter("T"),)),
}


class Registry:
    """Mapping from qualified type name to its definition.

    Registration happens during a build phase; after freeze() the registry is
    read-only and safe to share between threads.

    Attributes:
        frozen: Whether the build phase has ended.
    """

    def __init__(self, prelude: bool = True):
        self._definitions: dict[str, TypeDefinition] = {}
        self.frozen = False
        if prelude:
            for name, raw in PRELUDE.items():
                self.register(name, raw)

    def register(self, name: str, definition: Any) -> TypeDefinition:
        """Register one definition.

        Args:
            name: Qualified type name.
            definition: Raw table entry or TypeDefinition.

        Returns:
            The registered TypeDefinition.

        Raises:
            DuplicateDefinitionError: If the name is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        if self.frozen:
            raise RegistryFrozenError(name)
        if not _QUALIFIED_NAME.fullmatch(name) or name in PRIMITIVE_NAMES:
            raise DefinitionError(name, "not a valid type name")
        if name in self._definitions:
            raise DuplicateDefinitionError(name)
        built = build_definition(name, definition)
        self._definitions[name] = built
        logger.debug(f"Registered {type(built).__name__} '{name}'")
        return built

    def register_all(
        self, tables: Mapping[str, Any] | Iterable[tuple[str, Any]]
    ) -> list[str]:
        """Register every entry of a (possibly nested) table.

        Returns:
            Qualified names in registration order.
        """
        names = []
        for name, raw in flatten_tables(tables):
            self.register(name, raw)
            names.append(name)
        logger.info(f"Registered {len(names)} type definitions")
        return names

    def freeze(self) -> None:
        """End the build phase."""
        self.frozen = True

    def lookup(self, name: str) -> TypeDefinition:
        """Get a definition by name.

        Raises:
            UnknownTypeError: If the name is not registered.
        """
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._definitions)

    def unresolved_references(self) -> dict[str, list[str]]:
        """Find references to names that are neither registered nor parameters.

        Returns:
            Definition name to sorted list of missing names.
        """
        missing: dict[str, list[str]] = {}
        for name, definition in self._definitions.items():
            params = {p.name for p in definition.parameters}
            expressions = [p.default for p in definition.parameters if p.default]
            if isinstance(definition, AliasDef):
                expressions.append(definition.expression)
            else:
                if definition.supertype is not None:
                    expressions.append(definition.supertype)
                expressions.extend(f.expression for f in definition.fields.values())
            dangling = {
                ref
                for expr in expressions
                for ref in iter_references(expr)
                if ref not in params and ref not in self._definitions
            }
            if dangling:
                missing[name] = sorted(dangling)
        return missing

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)


__all__ = [
    "GenericParameter",
    "FieldDef",
    "StructDef",
    "AliasDef",
    "TypeDefinition",
    "RawStructDefinition",
    "build_definition",
    "flatten_tables",
    "PRELUDE",
    "Registry",
]
