"""Composition of registered definitions into resolved schemas.

The composer flattens supertype chains, binds generic parameters and checks
field conflicts between peer supertypes. Results are memoized per
(name, argument tuple) for the lifetime of the composer.

Example:
    >>> composer = Composer(registry)
    >>> frame = composer.resolve("UI.Frame")
    >>> list(frame.fields)
    ['hidden', 'status', 'index', 'subject', 'height', 'width']
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from uitypes.annotation import AnnotationSet
from uitypes.config import get_max_depth
from uitypes.core import get_logger
from uitypes.errors import (
    ArityError,
    CompositionConflictError,
    DefinitionError,
    InheritanceCycleError,
    ResolutionDepthError,
    UnknownFieldError,
)
from uitypes.expression import (
    Generic,
    Intersection,
    Reference,
    TypeExpression,
    is_struct_shaped,
    substitute,
)
from uitypes.registry import FieldDef, Registry, StructDef, TypeDefinition

logger = get_logger("composer")

CacheKey = tuple[str, tuple[TypeExpression, ...]]


def _label(name: str, args: tuple[TypeExpression, ...]) -> str:
    if not args:
        return name
    return f"{name}({','.join(str(a) for a in args)})"


@dataclass(frozen=True)
class ResolvedField:
    """A field of a resolved schema.

    Attributes:
        name: Field name.
        expression: Field type with every generic parameter substituted.
        annotations: Synchronization tags declared on the field.
        origin: Name of the definition that declared the field.
    """

    name: str
    expression: TypeExpression
    annotations: AnnotationSet
    origin: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "type": str(self.expression),
            "annotations": self.annotations.to_dict(),
            "origin": self.origin,
        }


@dataclass(frozen=True)
class ResolvedSchema:
    """Flattened field table of a struct-shaped type.

    Attributes:
        name: Definition name.
        args: Generic arguments, defaults included.
        fields: Read-only mapping of field name to ResolvedField, supertype
            fields first.
        lineage: Label of every instantiation composed into this schema,
            e.g. 'Decorator(Widget)'.
    """

    name: str
    args: tuple[TypeExpression, ...]
    fields: MappingProxyType[str, ResolvedField] = field(hash=False)
    lineage: frozenset[str]

    def __post_init__(self):
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def field(self, name: str) -> ResolvedField:
        """Get a field by name.

        Raises:
            UnknownFieldError: If the schema has no such field.
        """
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownFieldError(str(self), name) from None

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __str__(self) -> str:
        return _label(self.name, self.args)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "args": [str(a) for a in self.args],
            "lineage": sorted(self.lineage),
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
        }


Resolved = ResolvedSchema | TypeExpression


def field_annotations(schema: ResolvedSchema, field_name: str) -> AnnotationSet:
    """Get the annotations of a resolved field.

    Raises:
        UnknownFieldError: If the schema has no such field.
    """
    return schema.field(field_name).annotations


class Composer:
    """Resolves type names and generic arguments against a registry.

    The only mutable state is the result cache. Writes use setdefault, so
    concurrent resolutions of the same key converge on one stored value.

    Attributes:
        registry: Source of definitions.
        max_depth: Bound on nested supertype/generic resolution.
    """

    def __init__(self, registry: Registry, max_depth: int | None = None):
        self.registry = registry
        self.max_depth = get_max_depth(max_depth)
        self._schemas: dict[CacheKey, ResolvedSchema] = {}
        self._expressions: dict[CacheKey, TypeExpression] = {}

    # -- public API ---------------------------------------------------------

    def resolve(self, name: str, args: tuple[TypeExpression, ...] | list = ()) -> Resolved:
        """Resolve a type name applied to generic arguments.

        Structs and aliases over struct compositions ('A+B') resolve to a
        ResolvedSchema. Every other alias resolves to its substituted
        TypeExpression.

        Args:
            name: Qualified type name.
            args: Positional generic arguments; omitted trailing arguments
                take the parameter defaults.

        Raises:
            UnknownTypeError: If a definition is missing.
            ArityError: If too many arguments are given, or a parameter
                without default is left unbound.
            CompositionConflictError: If peer supertypes disagree on a field.
        """
        definition = self.registry.lookup(name)
        if self._composes(definition):
            return self._struct(name, tuple(args), ())
        bindings, full_args = self._bind(definition, tuple(args))
        key = (name, full_args)
        cached = self._expressions.get(key)
        if cached is not None:
            return cached
        result = substitute(definition.expression, bindings)
        return self._expressions.setdefault(key, result)

    def resolve_struct(
        self, name: str, args: tuple[TypeExpression, ...] | list = ()
    ) -> ResolvedSchema:
        """Resolve a name that must denote a struct-shaped type.

        Aliases naming a single struct reference are followed.

        Raises:
            DefinitionError: If the type is not struct-shaped.
        """
        return self._struct(name, tuple(args), ())

    def resolve_expression(self, expr: TypeExpression) -> Resolved:
        """Resolve a Reference or Generic expression node."""
        if isinstance(expr, Reference):
            return self.resolve(expr.name)
        if isinstance(expr, Generic):
            return self.resolve(expr.base, expr.args)
        return expr

    @property
    def cache_size(self) -> int:
        """Number of memoized resolutions."""
        return len(self._schemas) + len(self._expressions)

    def clear_cache(self) -> None:
        """Drop every memoized resolution."""
        self._schemas.clear()
        self._expressions.clear()

    # -- binding ------------------------------------------------------------

    def _bind(
        self, definition: TypeDefinition, args: tuple[TypeExpression, ...]
    ) -> tuple[dict[str, TypeExpression], tuple[TypeExpression, ...]]:
        params = definition.parameters
        if len(args) > len(params):
            raise ArityError(definition.name, len(params), len(args))
        bindings: dict[str, TypeExpression] = {}
        full: list[TypeExpression] = []
        for index, param in enumerate(params):
            if index < len(args):
                value = args[index]
            elif param.default is not None:
                # defaults may mention parameters bound before them
                value = substitute(param.default, bindings)
            else:
                raise ArityError(
                    definition.name,
                    len(params),
                    len(args),
                    f"Type '{definition.name}' requires an argument for "
                    f"parameter '{param.name}'",
                )
            bindings[param.name] = value
            full.append(value)
        return bindings, tuple(full)

    # -- composition --------------------------------------------------------

    @staticmethod
    def _composes(definition: TypeDefinition) -> bool:
        return isinstance(definition, StructDef) or isinstance(
            definition.expression, Intersection
        )

    def _struct(
        self, name: str, args: tuple[TypeExpression, ...], chain: tuple[CacheKey, ...]
    ) -> ResolvedSchema:
        definition = self.registry.lookup(name)
        bindings, full_args = self._bind(definition, args)
        key = (name, full_args)
        cached = self._schemas.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {name}")
            return cached

        if isinstance(definition, StructDef):
            supertype = definition.supertype
            own_fields = definition.fields
        else:
            supertype = definition.expression
            own_fields = {}
            if not is_struct_shaped(supertype):
                raise DefinitionError(
                    name, f"'{supertype}' is not a composition of struct types"
                )

        if key in chain:
            raise InheritanceCycleError([_label(n, a) for n, a in chain] + [name])
        if len(chain) >= self.max_depth:
            raise ResolutionDepthError(name, self.max_depth)

        schema = self._compose(
            name,
            full_args,
            substitute(supertype, bindings) if supertype is not None else None,
            own_fields,
            bindings,
            chain + (key,),
        )
        return self._schemas.setdefault(key, schema)

    def _compose(
        self,
        name: str,
        args: tuple[TypeExpression, ...],
        supertype: TypeExpression | None,
        own_fields: Mapping[str, FieldDef],
        bindings: dict[str, TypeExpression],
        chain: tuple[CacheKey, ...],
    ) -> ResolvedSchema:
        fields: dict[str, ResolvedField] = {}
        contributors: dict[str, ResolvedSchema] = {}
        lineage = {_label(name, args)}

        if supertype is not None:
            members = (
                supertype.members if isinstance(supertype, Intersection) else (supertype,)
            )
            for member in members:
                parent = self._member(name, member, chain)
                lineage |= parent.lineage
                self._merge(fields, contributors, parent)

        # own fields shadow inherited ones and come last
        for field_def in own_fields.values():
            fields.pop(field_def.name, None)
            fields[field_def.name] = ResolvedField(
                field_def.name,
                substitute(field_def.expression, bindings),
                field_def.annotations,
                name,
            )

        schema = ResolvedSchema(name, args, fields, frozenset(lineage))
        logger.debug(f"Composed {schema} with {len(fields)} fields")
        return schema

    def _member(
        self, owner: str, member: TypeExpression, chain: tuple[CacheKey, ...]
    ) -> ResolvedSchema:
        if isinstance(member, Reference):
            return self._struct(member.name, (), chain)
        if isinstance(member, Generic):
            return self._struct(member.base, member.args, chain)
        raise DefinitionError(owner, f"supertype member '{member}' is not a type name")

    @staticmethod
    def _merge(
        fields: dict[str, ResolvedField],
        contributors: dict[str, ResolvedSchema],
        parent: ResolvedSchema,
    ) -> None:
        for field_name, resolved in parent.fields.items():
            existing = fields.get(field_name)
            if existing is None:
                fields[field_name] = resolved
                contributors[field_name] = parent
                continue
            if existing.expression == resolved.expression:
                continue

            first = contributors[field_name]
            if str(first) != str(parent):
                # a descendant overrides what its ancestor declared
                if str(parent) in first.lineage:
                    continue
                if str(first) in parent.lineage:
                    fields[field_name] = resolved
                    contributors[field_name] = parent
                    continue

            logger.warning(
                f"Field '{field_name}' conflicts between {first} and {parent}"
            )
            raise CompositionConflictError(
                field_name,
                str(first),
                str(parent),
                f"{existing.expression} vs {resolved.expression}",
            )


__all__ = [
    "ResolvedField",
    "ResolvedSchema",
    "Resolved",
    "Composer",
    "field_annotations",
]
