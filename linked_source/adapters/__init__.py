"""Collaborators injected into the core: visual state and scrolling."""

from .scroller import ScheduledScroller, ScrollHandle, Scroller  # noqa: F401
from .visual_state import BackgroundVisualState, ClassToggleVisualState, VisualState  # noqa: F401

__all__: list[str] = [
    "ScheduledScroller",
    "ScrollHandle",
    "Scroller",
    "BackgroundVisualState",
    "ClassToggleVisualState",
    "VisualState",
]
