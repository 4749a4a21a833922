"""Public engine for resolving and validating virtual UI datatypes.

Example usage:
    >>> from uitypes.engine import load_engine
    >>> engine = load_engine("pub")
    >>> list(engine.resolve_widget("UI.Frame").fields)
    ['hidden', 'status', 'index', 'subject', 'height', 'width']
"""

from .lib import TypeEngine, load_engine

__all__ = ["TypeEngine", "load_engine"]
