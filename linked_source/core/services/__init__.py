from __future__ import annotations

"""Stateful services of one document view: highlight, navigation, export."""

from .highlight_service import HighlightCoordinator  # noqa: F401
from .navigation_service import NavigationController  # noqa: F401
from .export_service import ExportService  # noqa: F401

__all__: list[str] = [
    "HighlightCoordinator",
    "NavigationController",
    "ExportService",
]
