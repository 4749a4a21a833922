"""Runtime validation of plain data against resolved UI types.

Values are the JSON-like structures a widget state is made of: dicts, lists,
strings, numbers, booleans and None. Validation never raises for data
mismatches; it collects every failure with a dotted path starting at "root".

Example:
    >>> validator = Validator(composer)
    >>> result = validator.validate({"hidden": True}, "UI.Widget")
    >>> result.valid
    True
"""

from dataclasses import dataclass, field
from typing import Any

from uitypes.composer import Composer, ResolvedSchema
from uitypes.core import get_logger
from uitypes.errors import CyclicValueError, ResolutionDepthError
from uitypes.expression import (
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
)

logger = get_logger("validation")

ROOT_PATH = "root"


class _Missing:
    """Marker for a struct key that is not present at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_absent(value: Any) -> bool:
    """Whether a value counts as absent (None or MISSING)."""
    return value is None or value is MISSING


@dataclass
class ValidationFailure:
    """A single mismatch between a value and its type.

    Attributes:
        path: Location of the value, e.g. 'root.widgets[2].status'.
        reason: Human-readable description.
        error_type: Category of the failure.
    """

    path: str
    reason: str
    error_type: str

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-friendly dictionary."""
        return {"path": self.path, "reason": self.reason, "error_type": self.error_type}


@dataclass
class ValidationResult:
    """Outcome of validating one value.

    Attributes:
        failures: Every failure found, in traversal order.
    """

    failures: list[ValidationFailure] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True when no failure was found."""
        return not self.failures

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "valid": self.valid,
            "failures": [f.to_dict() for f in self.failures],
        }


Target = ResolvedSchema | TypeExpression


class Validator:
    """Checks values against resolved schemas and type expressions.

    Attributes:
        composer: Resolves references met during validation.
    """

    def __init__(self, composer: Composer):
        self.composer = composer

    def validate(self, value: Any, schema: Target | str) -> ValidationResult:
        """Validate a value.

        DAG-shaped values are accepted on purpose: a container shared by two
        fields is checked twice, and only a container that reappears inside
        itself is a cycle.

        Args:
            value: Data to check.
            schema: ResolvedSchema, TypeExpression, or a registered type name.

        Returns:
            ValidationResult with every failure found.

        Raises:
            UnknownTypeError: If the schema references an unregistered type.
            CyclicValueError: If a container value contains itself.
        """
        target = self.composer.resolve(schema) if isinstance(schema, str) else schema
        result = ValidationResult()
        self._check(value, target, ROOT_PATH, set(), 0, result.failures)
        logger.debug(f"Validated value against {target}: {len(result.failures)} failures")
        return result

    def required_fields(self, schema: ResolvedSchema | str) -> list[str]:
        """Names of the fields a value of the schema must carry."""
        if isinstance(schema, str):
            schema = self.composer.resolve_struct(schema)
        return [
            name
            for name, resolved in schema.fields.items()
            if not self.admits_absence(resolved.expression)
        ]

    def admits_absence(self, expr: TypeExpression) -> bool:
        """Whether an absent value satisfies the expression.

        True for Optional, the none primitive, unions with such a branch and
        references to aliases that resolve to one of these (Flag, Maybe(X)).
        """
        return self._admits_absence(expr, frozenset())

    def _admits_absence(self, expr: TypeExpression, seen: frozenset[str]) -> bool:
        if isinstance(expr, Optional):
            return True
        if isinstance(expr, Primitive):
            return expr.name == "none"
        if isinstance(expr, Union):
            return any(self._admits_absence(m, seen) for m in expr.members)
        if isinstance(expr, Intersection):
            return all(self._admits_absence(m, seen) for m in expr.members)
        if isinstance(expr, (Reference, Generic)):
            label = str(expr)
            if label in seen:
                return False
            resolved = self.composer.resolve_expression(expr)
            if isinstance(resolved, ResolvedSchema):
                return False
            return self._admits_absence(resolved, seen | {label})
        return False

    # -- traversal ----------------------------------------------------------

    def _check(
        self,
        value: Any,
        target: Target,
        path: str,
        active: set[int],
        depth: int,
        failures: list[ValidationFailure],
    ) -> None:
        if isinstance(target, ResolvedSchema):
            self._check_struct(value, target, path, active, failures)
        elif isinstance(target, Optional):
            if not is_absent(value):
                self._check(value, target.inner, path, active, depth, failures)
        elif isinstance(target, Primitive):
            self._check_primitive(value, target, path, failures)
        elif isinstance(target, (Reference, Generic)):
            # alias chains that never reach a value-consuming node are bounded
            if depth >= self.composer.max_depth:
                raise ResolutionDepthError(str(target), self.composer.max_depth)
            resolved = self.composer.resolve_expression(target)
            self._check(value, resolved, path, active, depth + 1, failures)
        elif is_absent(value):
            failures.append(
                ValidationFailure(path, f"missing required value of type {target}", "missing")
            )
        elif isinstance(target, Literal):
            if not (isinstance(value, str) and value == target.value):
                failures.append(
                    ValidationFailure(
                        path, f"{value!r} is not the literal {str(target)}", "invalid_literal"
                    )
                )
        elif isinstance(target, EnumSet):
            if not (isinstance(value, str) and value in target.values):
                failures.append(
                    ValidationFailure(
                        path,
                        f"{value!r} is not one of {sorted(target.values)}",
                        "invalid_enum",
                    )
                )
        elif isinstance(target, Sequence):
            self._check_sequence(value, target, path, active, failures)
        elif isinstance(target, Mapping):
            self._check_mapping(value, target, path, active, failures)
        elif isinstance(target, Union):
            self._check_union(value, target, path, active, depth, failures)
        elif isinstance(target, Intersection):
            for member in target.members:
                self._check(value, member, path, active, depth, failures)
        else:
            raise TypeError(f"Unsupported type expression: {target!r}")

    @staticmethod
    def _check_primitive(
        value: Any, target: Primitive, path: str, failures: list[ValidationFailure]
    ) -> None:
        if target.name == "none":
            if not is_absent(value):
                failures.append(
                    ValidationFailure(
                        path, f"expected no value, got {type(value).__name__}", "type_mismatch"
                    )
                )
            return
        if is_absent(value):
            failures.append(
                ValidationFailure(path, f"missing required {target.name}", "missing")
            )
            return

        if target.name == "boolean":
            ok = isinstance(value, bool)
        elif target.name == "number":
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        else:
            ok = isinstance(value, str)
        if not ok:
            failures.append(
                ValidationFailure(
                    path,
                    f"expected {target.name}, got {type(value).__name__}",
                    "type_mismatch",
                )
            )

    def _check_struct(
        self,
        value: Any,
        schema: ResolvedSchema,
        path: str,
        active: set[int],
        failures: list[ValidationFailure],
    ) -> None:
        if is_absent(value):
            failures.append(ValidationFailure(path, f"missing required {schema}", "missing"))
            return
        if not isinstance(value, dict):
            failures.append(
                ValidationFailure(
                    path,
                    f"expected {schema} object, got {type(value).__name__}",
                    "type_mismatch",
                )
            )
            return

        self._enter(value, path, active)
        try:
            for name, resolved in schema.fields.items():
                field_path = f"{path}.{name}"
                field_value = value.get(name, MISSING)
                if is_absent(field_value):
                    if not self.admits_absence(resolved.expression):
                        failures.append(
                            ValidationFailure(
                                field_path,
                                f"missing required field '{name}' of {schema}",
                                "missing_field",
                            )
                        )
                    continue
                self._check(field_value, resolved.expression, field_path, active, 0, failures)
        finally:
            active.discard(id(value))

    def _check_sequence(
        self,
        value: Any,
        target: Sequence,
        path: str,
        active: set[int],
        failures: list[ValidationFailure],
    ) -> None:
        if not isinstance(value, (list, tuple)):
            failures.append(
                ValidationFailure(
                    path, f"expected sequence, got {type(value).__name__}", "type_mismatch"
                )
            )
            return
        self._enter(value, path, active)
        try:
            for index, item in enumerate(value):
                self._check(item, target.inner, f"{path}[{index}]", active, 0, failures)
        finally:
            active.discard(id(value))

    def _check_mapping(
        self,
        value: Any,
        target: Mapping,
        path: str,
        active: set[int],
        failures: list[ValidationFailure],
    ) -> None:
        if not isinstance(value, dict):
            failures.append(
                ValidationFailure(
                    path, f"expected mapping, got {type(value).__name__}", "type_mismatch"
                )
            )
            return
        self._enter(value, path, active)
        try:
            for key, item in value.items():
                self._check(item, target.inner, f"{path}.{key}", active, 0, failures)
        finally:
            active.discard(id(value))

    def _check_union(
        self,
        value: Any,
        target: Union,
        path: str,
        active: set[int],
        depth: int,
        failures: list[ValidationFailure],
    ) -> None:
        attempts: list[str] = []
        for member in target.members:
            branch: list[ValidationFailure] = []
            self._check(value, member, path, active, depth, branch)
            if not branch:
                return
            attempts.append(f"{member} ({branch[0].path}: {branch[0].reason})")
        failures.append(
            ValidationFailure(
                path,
                f"{value!r} matches no branch: " + "; ".join(attempts),
                "no_matching_branch",
            )
        )

    @staticmethod
    def _enter(value: Any, path: str, active: set[int]) -> None:
        if id(value) in active:
            raise CyclicValueError(path)
        active.add(id(value))


__all__ = [
    "MISSING",
    "is_absent",
    "ValidationFailure",
    "ValidationResult",
    "Validator",
]
