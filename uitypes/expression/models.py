"""Type expression tree.

Expressions are frozen dataclasses, so they are hashable and compare
structurally. `str()` renders an expression back to the compact grammar.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

PRIMITIVE_NAMES = frozenset({"boolean", "number", "string", "none"})


def _quote(value: str) -> str:
    return f'"{value}"'


@dataclass(frozen=True)
class Primitive:
    """Built-in scalar kind: boolean, number, string or none."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Reference:
    """Named reference to a registered type or a bound generic parameter."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Literal:
    """A single string literal."""

    value: str

    def __str__(self) -> str:
        return _quote(self.value)


@dataclass(frozen=True)
class EnumSet:
    """Disjoint set of string literals. Member order does not matter."""

    values: frozenset[str]

    def __str__(self) -> str:
        return "_".join(_quote(v) for v in sorted(self.values))


@dataclass(frozen=True)
class Union:
    """Value must match at least one member."""

    members: tuple[TypeExpression, ...]

    def __str__(self) -> str:
        return "|".join(_operand(m, Union) for m in self.members)


@dataclass(frozen=True)
class Intersection:
    """Struct composition of every member."""

    members: tuple[TypeExpression, ...]

    def __str__(self) -> str:
        return "+".join(_operand(m, Intersection) for m in self.members)


@dataclass(frozen=True)
class Optional:
    """Inner type or absence."""

    inner: TypeExpression

    def __str__(self) -> str:
        inner = self.inner
        if isinstance(inner, (Union, Intersection, EnumSet, Optional)):
            return f"({inner})?"
        return f"{inner}?"


@dataclass(frozen=True)
class Sequence:
    """Ordered list of inner values."""

    inner: TypeExpression

    def __str__(self) -> str:
        return f"[{self.inner}]"


@dataclass(frozen=True)
class Mapping:
    """Dictionary with arbitrary keys and inner values."""

    inner: TypeExpression

    def __str__(self) -> str:
        return f"<{self.inner}>"


@dataclass(frozen=True)
class Generic:
    """Application of a generic type to positional arguments."""

    base: str
    args: tuple[TypeExpression, ...]

    def __str__(self) -> str:
        return f"{self.base}({','.join(str(a) for a in self.args)})"


TypeExpression = (
    Primitive
    | Reference
    | Literal
    | EnumSet
    | Union
    | Intersection
    | Optional
    | Sequence
    | Mapping
    | Generic
)


def _operand(expr: TypeExpression, parent: type) -> str:
    # Literal sets, nested operators of the same kind and lower-precedence
    # operands need explicit grouping to parse back to the same tree
    if isinstance(expr, (EnumSet, parent)) or (
        isinstance(expr, Union) and parent is Intersection
    ):
        return f"({expr})"
    return str(expr)


def substitute(
    expr: TypeExpression, bindings: dict[str, TypeExpression]
) -> TypeExpression:
    """Replace parameter references with their bound expressions.

    Args:
        expr: Expression that may reference generic parameters.
        bindings: Parameter name to bound expression.

    Returns:
        New expression with every bound Reference replaced. The input is
        returned unchanged when nothing was bound.
    """
    if not bindings:
        return expr
    if isinstance(expr, Reference):
        return bindings.get(expr.name, expr)
    if isinstance(expr, Generic):
        return Generic(expr.base, tuple(substitute(a, bindings) for a in expr.args))
    if isinstance(expr, Union):
        return Union(tuple(substitute(m, bindings) for m in expr.members))
    if isinstance(expr, Intersection):
        return Intersection(tuple(substitute(m, bindings) for m in expr.members))
    if isinstance(expr, Optional):
        return Optional(substitute(expr.inner, bindings))
    if isinstance(expr, Sequence):
        return Sequence(substitute(expr.inner, bindings))
    if isinstance(expr, Mapping):
        return Mapping(substitute(expr.inner, bindings))
    return expr


def iter_references(expr: TypeExpression) -> Iterator[str]:
    """Yield every type name referenced by an expression, generics included."""
    if isinstance(expr, Reference):
        yield expr.name
    elif isinstance(expr, Generic):
        yield expr.base
        for arg in expr.args:
            yield from iter_references(arg)
    elif isinstance(expr, (Union, Intersection)):
        for member in expr.members:
            yield from iter_references(member)
    elif isinstance(expr, (Optional, Sequence, Mapping)):
        yield from iter_references(expr.inner)


def is_struct_shaped(expr: TypeExpression) -> bool:
    """Whether an expression can only denote a composition of struct types."""
    if isinstance(expr, (Reference, Generic)):
        return True
    if isinstance(expr, Intersection):
        return all(isinstance(m, (Reference, Generic)) for m in expr.members)
    return False


__all__ = [
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
    "substitute",
    "iter_references",
    "is_struct_shaped",
]
