"""Field annotation extraction.

Field strings may carry trailing tags after the type expression:

    'number? @data=both @delay=flush'
    'UI.Event.Click? @event=client @delay=forever'

Tags are parsed once, when a definition is registered, into an immutable
AnnotationSet. Transport code reads the typed accessors and never re-parses
the raw field string.
"""

import re
from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType

from uitypes.config import strict_annotations
from uitypes.core import get_logger
from uitypes.errors import ExpressionSyntaxError

logger = get_logger("annotation")

_KEY_PATTERN = re.compile(r"[A-Za-z_][\w.-]*")


class EventDirection(str, Enum):
    """Which side emits the event carried by a field."""

    CLIENT = "client"  # user interaction reported to the server
    SERVER = "server"  # command pushed to the client


class DelayPolicy(str, Enum):
    """When a queued update is synchronized."""

    FOREVER = "forever"  # held until something else triggers a flush
    FLUSH = "flush"  # sent with the next flush


class DataFlow(str, Enum):
    """Direction in which field data is synchronized."""

    CLIENT = "client"
    SERVER = "server"
    BOTH = "both"


KNOWN_ANNOTATIONS: dict[str, type[Enum]] = {
    "event": EventDirection,
    "delay": DelayPolicy,
    "data": DataFlow,
}


class AnnotationSet(Mapping):
    """Immutable mapping of annotation key to raw value.

    Unknown keys are kept as-is. An empty set means the field is pure data
    with no synchronization semantics.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Mapping[str, str] | None = None):
        self._tags = MappingProxyType(dict(tags or {}))

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AnnotationSet):
            return dict(self._tags) == dict(other._tags)
        if isinstance(other, Mapping):
            return dict(self._tags) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._tags.items()))

    def __repr__(self) -> str:
        return f"AnnotationSet({dict(self._tags)!r})"

    def __str__(self) -> str:
        return " ".join(f"@{k}={v}" for k, v in self._tags.items())

    @property
    def is_synchronized(self) -> bool:
        """Whether the field carries any synchronization semantics."""
        return bool(self._tags)

    @property
    def event(self) -> EventDirection | None:
        """Event direction, or None when absent or unrecognised."""
        return self._typed("event", EventDirection)

    @property
    def delay(self) -> DelayPolicy | None:
        """Delay policy, or None when absent or unrecognised."""
        return self._typed("delay", DelayPolicy)

    @property
    def data(self) -> DataFlow | None:
        """Data-flow direction, or None when absent or unrecognised."""
        return self._typed("data", DataFlow)

    def _typed(self, key: str, enum_type: type[Enum]):
        value = self._tags.get(key)
        if value is None:
            return None
        try:
            return enum_type(value)
        except ValueError:
            return None

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary."""
        return dict(self._tags)


EMPTY_ANNOTATIONS = AnnotationSet()


def _find_tag_start(raw: str) -> int:
    """Index of the first '@' outside quoted literals, or -1."""
    quoted = False
    for index, char in enumerate(raw):
        if char == '"':
            quoted = not quoted
        elif char == "@" and not quoted:
            return index
    return -1


def extract_annotations(
    raw: str, strict: bool | None = None
) -> tuple[str, AnnotationSet]:
    """Split a field type string into its expression and annotation tags.

    Args:
        raw: Field string such as 'boolean @event=client @delay=forever'.
        strict: Reject unrecognised values of known keys. Defaults to the
            UITYPES_STRICT_ANNOTATIONS setting.

    Returns:
        Tuple of (expression text without tags, AnnotationSet).

    Raises:
        ExpressionSyntaxError: On a tag without '=', with an empty key or
            value, or on a repeated key.
    """
    start = _find_tag_start(raw)
    if start < 0:
        return raw.strip(), EMPTY_ANNOTATIONS
    if strict is None:
        strict = strict_annotations()

    tags: dict[str, str] = {}
    for match in re.finditer(r"\S+", raw[start:]):
        text = match.group()
        offset = start + match.start()
        if not text.startswith("@"):
            raise ExpressionSyntaxError(
                f"expected annotation tag, found {text!r}", raw, offset
            )
        key, sep, value = text[1:].partition("=")
        if not sep:
            raise ExpressionSyntaxError(f"annotation {text!r} is missing '='", raw, offset)
        if not key:
            raise ExpressionSyntaxError("annotation key is empty", raw, offset)
        if not _KEY_PATTERN.fullmatch(key):
            raise ExpressionSyntaxError(f"invalid annotation key {key!r}", raw, offset)
        if not value or "@" in value or "=" in value:
            raise ExpressionSyntaxError(
                f"invalid value for annotation '{key}'", raw, offset + len(key) + 2
            )
        if key in tags:
            raise ExpressionSyntaxError(f"duplicate annotation '{key}'", raw, offset)
        _check_known_value(key, value, raw, offset, strict)
        tags[key] = value

    return raw[:start].strip(), AnnotationSet(tags)


def _check_known_value(key: str, value: str, raw: str, offset: int, strict: bool) -> None:
    enum_type = KNOWN_ANNOTATIONS.get(key)
    if enum_type is None:
        return
    allowed = [member.value for member in enum_type]
    if value in allowed:
        return
    if strict:
        raise ExpressionSyntaxError(
            f"annotation '{key}' must be one of {allowed}, got {value!r}", raw, offset
        )
    logger.debug(f"Keeping unrecognised value {value!r} for annotation '{key}'")


__all__ = [
    "EventDirection",
    "DelayPolicy",
    "DataFlow",
    "KNOWN_ANNOTATIONS",
    "AnnotationSet",
    "EMPTY_ANNOTATIONS",
    "extract_annotations",
]
