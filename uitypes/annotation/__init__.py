"""Field annotation tags describing synchronization behavior."""

from .lib import (
    EMPTY_ANNOTATIONS,
    KNOWN_ANNOTATIONS,
    AnnotationSet,
    DataFlow,
    DelayPolicy,
    EventDirection,
    extract_annotations,
)

__all__ = [
    "EventDirection",
    "DelayPolicy",
    "DataFlow",
    "KNOWN_ANNOTATIONS",
    "AnnotationSet",
    "EMPTY_ANNOTATIONS",
    "extract_annotations",
]
