from __future__ import annotations

"""Visual-state collaborators that paint highlight state onto elements.

The highlight coordinator only decides *whether* an element is highlighted;
these adapters decide how that shows up in the markup.
"""

import re
from typing import Protocol

from lxml import etree as ET

__all__ = ["VisualState", "ClassToggleVisualState", "BackgroundVisualState"]


class VisualState(Protocol):
    def set_highlighted(self, element: ET._Element, highlighted: bool) -> None:
        ...


class ClassToggleVisualState:
    """Add or remove a CSS class on the element (``highlighted`` by default)."""

    def __init__(self, class_name: str = "highlighted") -> None:
        self.class_name = class_name

    def set_highlighted(self, element: ET._Element, highlighted: bool) -> None:
        classes = (element.get("class") or "").split()
        if highlighted and self.class_name not in classes:
            classes.append(self.class_name)
        elif not highlighted and self.class_name in classes:
            classes = [c for c in classes if c != self.class_name]
        else:
            return
        if classes:
            element.set("class", " ".join(classes))
        elif "class" in element.attrib:
            del element.attrib["class"]


_BACKGROUND_RE = re.compile(r"\s*background\s*:[^;]*;?", re.IGNORECASE)


class BackgroundVisualState:
    """Set an inline background colour, ``transparent`` when cleared."""

    def __init__(self, color: str = "#FFaaaa", cleared: str = "transparent") -> None:
        self.color = color
        self.cleared = cleared

    def set_highlighted(self, element: ET._Element, highlighted: bool) -> None:
        style = _BACKGROUND_RE.sub("", element.get("style") or "").strip()
        if style and not style.endswith(";"):
            style += ";"
        value = self.color if highlighted else self.cleared
        element.set("style", f"{style} background: {value}".strip())
