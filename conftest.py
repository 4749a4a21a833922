"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared registry and engine fixtures
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from uitypes.engine import TypeEngine

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def frame_tables() -> list[tuple[str, Any]]:
    """Widget, Sizeable, Decorator and Frame as ordered raw entries.

    Returns:
        (name, entry) pairs in registration order.
    """
    return [
        ("Widget", {"hidden": "Flag", "status": "Text?"}),
        ("Sizeable", {"height": "number?", "width": "number?"}),
        ("Decorator", {"$macro": ["W=Widget"], "$super": "Widget", "subject": "W?"}),
        ("Frame", {"$macro": ["W=Widget"], "$super": "Decorator(W)+Sizeable"}),
        ("Button", {"$super": "Widget", "click": "boolean? @event=client"}),
    ]


@pytest.fixture
def frame_engine(frame_tables: list[tuple[str, Any]]) -> TypeEngine:
    """Engine with the frame tables registered.

    Returns:
        A frozen TypeEngine.
    """
    from uitypes.engine import TypeEngine

    engine = TypeEngine()
    engine.register_all(frame_tables, strict=True)
    return engine
