"""Built-in catalogues of virtual UI widget types.

Two catalogues describe the same widget family in different table shapes:

- std: flat dotted names, generic parameters on Layout/Decorator/Frame/Metal
  and a boolean 'focus' command on inputs.
- pub: nested namespaces, Frame and Metal declared as alias compositions and
  'focus' as a payload-free server event.

Both are plain data and are loaded through the same registry.
"""

from dataclasses import dataclass
from typing import Any

# =============================================================================
# std catalogue
# =============================================================================

STD_CATALOGUE: dict[str, Any] = {
    "UI.Pixel": {"height": "number", "width": "number"},
    # effective resolution excludes taskbars
    "UI.Resolution": {"colorDepth": "number", "pixel": "UI.Pixel", "effective": "UI.Pixel"},
    "UI.Length": {"n": "number", "u": '"ch"_"em"_"ex"_"px"_"rem"'},
    # numbers are proportions between 0 and 1
    "UI.Size": "UI.Length|number",
    "UI.Sizeable": {"height": "UI.Size?", "width": "UI.Size?"},
    # === FLOW ===
    "UI.Flow.Direction": '"rowReverse"_"column"_"columnReverse"',
    "UI.Flow.Cut": '"never"_"reverse"',
    "UI.Flow.Justification": '"opposite"_"center"_"between"_"around"',
    "UI.Flow.Alignment": '"stretch"|UI.Flow.ItemAlignment',
    "UI.Flow.ItemAlignment": '"start"_"end"_"center"_"baseline"',
    "UI.Flow.ContentAlignment": '"start"_"end"_"center"_"between"_"around"',
    # === EVENTS ===
    "UI.Event.Click": "{}",
    "UI.Event.Keyboard": "{}",
    "UI.Event.Mouse": "{}",
    "UI.Event.Touch": "{}",
    # === WIDGETS ===
    "UI.Widget": {
        "hidden": "Flag",
        "status": "Text?",
        # position inside a dictionary layout
        "index": "number?",
    },
    "UI.Layout": {
        "$macro": ["W=UI.Widget"],
        "$super": "UI.Widget",
        "widgets": "Maybe([W]|<W>)",
    },
    "UI.Decorator": {
        "$macro": ["W=UI.Widget"],
        "$super": "UI.Widget",
        "subject": "W?",
    },
    "UI.Input": {
        "$super": "UI.Widget",
        "disabled": "Flag",
        # skipped when cycling focus
        "unchained": "Flag",
        "focused": "boolean @event=client @delay=forever",
        "pressed": "UI.Event.Keyboard @event=client @delay=forever",
        "focus": "boolean @event=server",
    },
    "UI.Output": {
        "$super": "UI.Widget",
        "symbol": "string?",
    },
    "UI.Frame": {
        "$macro": ["W=UI.Widget"],
        "$super": "UI.Decorator(W)+UI.Sizeable",
    },
    "UI.Metal": {
        "$macro": ["W=UI.Widget", "M=UI.Magnet"],
        "$super": "UI.Frame(W)+UI.Layout(M)",
    },
    "UI.Magnet": {
        "$macro": ["W=UI.Widget", "M=UI.Magnet"],
        "$super": "UI.Metal(W,M)",
        # relative to the top left corner of the metal surface
        "left": "UI.Size?",
        "top": "UI.Size?",
        # relative to the decorated subject
        "translationX": "UI.Size?",
        "translationY": "UI.Size?",
    },
    "UI.List": {
        "$super": "UI.Layout(UI.Item)+UI.Sizeable",
        "direction": "UI.Flow.Direction?",
        "cut": "UI.Flow.Cut?",
        "justification": "UI.Flow.Justification?",
        "itemAlignment": "UI.Flow.ItemAlignment?",
        "contentAlignment": "UI.Flow.ContentAlignment?",
    },
    "UI.Item": {
        "$super": "UI.Decorator",
        "grows": "number?",
        "shrinks": "number?",
        "basis": "number",
        "alignment": "UI.Flow.Alignment?",
    },
    "UI.Text": {
        "$super": "UI.Output",
        "content": "Text?",
    },
    "UI.Image": {
        "$super": "UI.Output",
        "asset": "string?",
    },
    "UI.Icon": {
        "$super": "UI.Image+UI.Text",
        "direction": "UI.Flow.Direction?",
    },
    "UI.Scroll": {
        "$super": "UI.Input+UI.Frame",
        "scrollX": "number? @data=both @delay=flush",
        "scrollY": "number? @data=both @delay=flush",
    },
    "UI.Button": {
        "$super": "UI.Input+UI.Decorator",
        "click": "UI.Event.Click? @event=client @delay=forever",
    },
    "UI.Selection": "UI.Input+UI.Layout(UI.Choice)",
    "UI.Choice": {
        "$super": "UI.Button",
        "unchained": "none",
        "selected": "Flag",
    },
    "UI.RadioList": {
        "$super": "UI.Selection",
        "direction": "UI.Flow.Direction?",
    },
    "UI.CheckList": {
        "$super": "UI.Selection",
        "direction": "UI.Flow.Direction?",
    },
}

# =============================================================================
# pub catalogue
# =============================================================================

PUB_CATALOGUE: dict[str, Any] = {
    "UI": {
        "Pixel": {"height": "number", "width": "number"},
        "Resolution": {"colorDepth": "number", "pixel": "UI.Pixel", "effective": "UI.Pixel"},
        "Length": {"n": "number", "u": '"ch"_"em"_"ex"_"px"_"rem"'},
        "Size": "UI.Length|number",
        "Sizeable": {"height": "UI.Size?", "width": "UI.Size?"},
        "Flow": {
            "Direction": '"rowReverse"_"column"_"columnReverse"',
            "Cut": '"never"_"reverse"',
            "Justification": '"opposite"_"center"_"between"_"around"',
            "Alignment": '"stretch"|UI.Flow.ItemAlignment',
            "ItemAlignment": '"start"_"end"_"center"_"baseline"',
            "ContentAlignment": '"start"_"end"_"center"_"between"_"around"',
        },
        "Event": {
            "Click": "{}",
            "Keyboard": "{}",
            "Mouse": "{}",
            "Touch": "{}",
        },
        "Widget": {"hidden": "Flag", "status": "Text?", "index": "number?"},
        "Layout": {
            "$macro": ["T=UI.Widget"],
            "$super": "UI.Widget",
            "widgets": "Maybe([T]|<T>)",
        },
        "Decorator": {
            "$macro": ["T=UI.Widget"],
            "$super": "UI.Widget",
            "subject": "T?",
        },
        "Input": {
            "$super": "UI.Widget",
            "disabled": "Flag",
            "unchained": "Flag",
            "focused": "boolean @event=client @delay=forever",
            "pressed": "UI.Event.Keyboard @event=client @delay=forever",
            # request only, carries no payload
            "focus": "none @event=server",
        },
        "Output": {"$super": "UI.Widget", "symbol": "string?"},
        "Frame": "UI.Decorator+UI.Sizeable",
        "Metal": "UI.Frame+UI.Layout(UI.Magnet)",
        "Magnet": {
            "$super": "UI.Metal",
            "left": "UI.Size?",
            "top": "UI.Size?",
            "translationX": "UI.Size?",
            "translationY": "UI.Size?",
        },
        "List": {
            "$super": "UI.Layout(UI.Item)+UI.Sizeable",
            "direction": "UI.Flow.Direction?",
            "cut": "UI.Flow.Cut?",
            "justification": "UI.Flow.Justification?",
            "itemAlignment": "UI.Flow.ItemAlignment?",
            "contentAlignment": "UI.Flow.ContentAlignment?",
        },
        "Item": {
            "$super": "UI.Decorator",
            "grows": "number?",
            "shrinks": "number?",
            "basis": "number",
            "alignment": "UI.Flow.Alignment?",
        },
        "Text": {"$super": "UI.Output", "content": "Text?"},
        "Image": {"$super": "UI.Output", "asset": "string?"},
        "Icon": {"$super": "UI.Image+UI.Text", "direction": "UI.Flow.Direction?"},
        "Scroll": {
            "$super": "UI.Input+UI.Frame",
            "scrollX": "number? @data=both @delay=flush",
            "scrollY": "number? @data=both @delay=flush",
        },
        "Button": {
            "$super": "UI.Input+UI.Decorator",
            "click": "UI.Event.Click? @event=client @delay=forever",
        },
        "Selection": "UI.Input+UI.Layout(UI.Choice)",
        "Choice": {"$super": "UI.Button", "unchained": "none", "selected": "Flag"},
        "RadioList": {"$super": "UI.Selection", "direction": "UI.Flow.Direction?"},
        "CheckList": {"$super": "UI.Selection", "direction": "UI.Flow.Direction?"},
    }
}

# =============================================================================
# Catalogue registry
# =============================================================================


@dataclass(frozen=True)
class CatalogueMeta:
    """Metadata for a built-in catalogue.

    Attributes:
        name: Lookup key.
        description: Human-readable description.
        tables: Raw definition tables, flat or nested.
    """

    name: str
    description: str
    tables: dict[str, Any]


CATALOGUES: dict[str, CatalogueMeta] = {
    "std": CatalogueMeta(
        name="std",
        description="Flat dotted tables with generic widget parameters",
        tables=STD_CATALOGUE,
    ),
    "pub": CatalogueMeta(
        name="pub",
        description="Nested namespace tables with alias-composed frames",
        tables=PUB_CATALOGUE,
    ),
}


def list_catalogues() -> list[str]:
    """Names of the built-in catalogues."""
    return list(CATALOGUES)


def get_catalogue(name: str) -> dict[str, Any]:
    """Get the raw tables of a built-in catalogue.

    Args:
        name: Catalogue name ('std' or 'pub').

    Returns:
        Raw definition tables accepted by Registry.register_all().

    Raises:
        KeyError: If no catalogue has that name.
    """
    try:
        return CATALOGUES[name].tables
    except KeyError:
        raise KeyError(
            f"Unknown catalogue '{name}'. Available: {', '.join(CATALOGUES)}"
        ) from None


__all__ = [
    "STD_CATALOGUE",
    "PUB_CATALOGUE",
    "CatalogueMeta",
    "CATALOGUES",
    "list_catalogues",
    "get_catalogue",
]
