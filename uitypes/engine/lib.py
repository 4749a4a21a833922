"""Public entry point tying registry, composer and validator together.

Example:
    >>> engine = load_engine("std")
    >>> schema = engine.resolve_widget("UI.Frame", ["UI.Button"])
    >>> engine.validate({"subject": {"hidden": True}}, schema).valid
    False
"""

from collections.abc import Iterable, Mapping
from typing import Any

from uitypes.annotation import AnnotationSet
from uitypes.catalogue import get_catalogue
from uitypes.composer import Composer, ResolvedSchema, field_annotations
from uitypes.config import get_default_catalogue
from uitypes.core import get_logger
from uitypes.errors import UnknownTypeError
from uitypes.expression import TypeExpression, parse
from uitypes.registry import Registry
from uitypes.validation import ValidationResult, Validator

logger = get_logger("engine")


class TypeEngine:
    """Resolves and validates virtual UI datatypes.

    Tables are registered once with register_all(), which ends the build
    phase. Afterwards the engine only reads the registry and may be shared.

    Attributes:
        registry: Definitions by qualified name.
        composer: Memoizing resolver over the registry.
        validator: Value checker backed by the composer.
    """

    def __init__(self, registry: Registry | None = None, max_depth: int | None = None):
        self.registry = registry if registry is not None else Registry()
        self.composer = Composer(self.registry, max_depth=max_depth)
        self.validator = Validator(self.composer)

    def register_all(
        self,
        tables: Mapping[str, Any] | Iterable[tuple[str, Any]],
        strict: bool = False,
    ) -> list[str]:
        """Register raw tables and freeze the registry.

        Args:
            tables: Flat or nested tables, or ordered (name, entry) pairs.
            strict: Raise on references to unregistered names instead of
                logging them.

        Returns:
            Qualified names registered by this call.

        Raises:
            UnknownTypeError: In strict mode, for the first dangling reference.
        """
        names = self.registry.register_all(tables)
        self.registry.freeze()

        missing = self.registry.unresolved_references()
        for owner, dangling in missing.items():
            logger.warning(f"{owner} references unregistered types: {', '.join(dangling)}")
        if strict and missing:
            raise UnknownTypeError(min(ref for refs in missing.values() for ref in refs))
        return names

    def resolve_widget(
        self, type_name: str, generic_args: Iterable[TypeExpression | str] = ()
    ) -> ResolvedSchema:
        """Resolve a struct-shaped type to its flattened schema.

        Args:
            type_name: Qualified type name.
            generic_args: Expressions or raw expression strings.
        """
        args = tuple(parse(a) if isinstance(a, str) else a for a in generic_args)
        return self.composer.resolve_struct(type_name, args)

    def validate(
        self, value: Any, schema: ResolvedSchema | TypeExpression | str
    ) -> ValidationResult:
        """Validate a value against a schema, expression or type name."""
        return self.validator.validate(value, schema)

    def field_annotations(
        self, schema: ResolvedSchema | str, field_name: str
    ) -> AnnotationSet:
        """Get the annotations of a field of a schema or struct type name."""
        if isinstance(schema, str):
            schema = self.resolve_widget(schema)
        return field_annotations(schema, field_name)

    def required_fields(self, schema: ResolvedSchema | str) -> list[str]:
        """Names of the fields a value must carry."""
        return self.validator.required_fields(schema)


def load_engine(
    catalogue: str | None = None, max_depth: int | None = None, strict: bool = True
) -> TypeEngine:
    """Build an engine from a built-in catalogue.

    Args:
        catalogue: 'std' or 'pub'. Defaults to UITYPES_CATALOGUE.
        max_depth: Resolution depth bound. Defaults to UITYPES_MAX_DEPTH.
        strict: Fail on dangling references.
    """
    name = catalogue or get_default_catalogue()
    engine = TypeEngine(max_depth=max_depth)
    engine.register_all(get_catalogue(name), strict=strict)
    logger.info(f"Loaded catalogue '{name}' with {len(engine.registry)} types")
    return engine


__all__ = ["TypeEngine", "load_engine"]
