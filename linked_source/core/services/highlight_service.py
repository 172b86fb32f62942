from __future__ import annotations

"""Highlight state for definition/reference pairs.

Two independent layers decide whether an element is highlighted:

- the *hover* layer, additive and symmetric: each hovered source element
  contributes its resolved set (definition plus every reference), counted
  per element so overlapping hovers do not clear each other;
- the *exclusive* layer: at most one definition, set by navigation only.

An element is painted highlighted while either layer holds it. The visual
collaborator is only called when that union actually changes.
"""

import logging
from typing import Dict, List, Optional, Tuple

from lxml import etree as ET

from linked_source.adapters.visual_state import VisualState
from linked_source.core.exceptions import UnresolvedIdentifier
from linked_source.core.index import IdentifierIndex

__all__ = ["HighlightCoordinator"]

logger = logging.getLogger(__name__)


class HighlightCoordinator:
    """Apply and remove highlight state for resolved element sets.

    Parameters
    ----------
    index : IdentifierIndex
        Index of the document the coordinator paints.
    visual_state : VisualState
        Collaborator receiving ``set_highlighted(element, bool)`` calls.
    """

    def __init__(self, index: IdentifierIndex, visual_state: VisualState) -> None:
        self._index = index
        self._visual = visual_state
        self._hover_sources: Dict[ET._Element, Tuple[ET._Element, ...]] = {}
        self._hover_counts: Dict[ET._Element, int] = {}
        self._exclusive: Optional[ET._Element] = None

    # -------------------------------------------------------------- Queries

    @property
    def exclusive_definition(self) -> Optional[ET._Element]:
        return self._exclusive

    def is_highlighted(self, element: ET._Element) -> bool:
        return self._hover_counts.get(element, 0) > 0 or element is self._exclusive

    def highlighted_elements(self) -> List[ET._Element]:
        elements = list(self._hover_counts)
        if self._exclusive is not None and self._exclusive not in self._hover_counts:
            elements.append(self._exclusive)
        return elements

    def resolve_pair(self, element: ET._Element) -> List[ET._Element]:
        """Definition and references linked to *element*, without duplicates.

        A definition contributes itself and its references; a reference
        contributes its counterpart definition and that definition's
        references. An element playing both roles contributes both groups.
        Unresolved references contribute nothing.
        """
        annotation = self._index.annotation_of(element)
        identifiers: List[str] = []
        if annotation.is_definition:
            identifiers.append(annotation.identifier)
        if annotation.is_reference:
            try:
                self._index.require_definition(annotation.target)
                identifiers.append(annotation.target)
            except UnresolvedIdentifier as exc:
                logger.debug("Hover ignored: %s", exc)

        resolved: List[ET._Element] = []
        seen = set()
        for identifier in identifiers:
            group = [self._index.definition_of(identifier)] + self._index.references_of(identifier)
            for member in group:
                if member is not None and member not in seen:
                    seen.add(member)
                    resolved.append(member)
        return resolved

    # -------------------------------------------------------------- Hover layer

    def highlight_pair(self, element: ET._Element) -> bool:
        """Highlight everything linked to *element*.

        Returns False when *element* is already hovered or resolves to
        nothing.
        """
        if element in self._hover_sources:
            return False
        members = tuple(self.resolve_pair(element))
        if not members:
            return False
        self._hover_sources[element] = members
        for member in members:
            before = self.is_highlighted(member)
            self._hover_counts[member] = self._hover_counts.get(member, 0) + 1
            if not before:
                self._visual.set_highlighted(member, True)
        return True

    def unhighlight_pair(self, element: ET._Element) -> bool:
        """Remove what :meth:`highlight_pair` added for *element*.

        Idempotent: returns False when *element* is not currently hovered.
        """
        members = self._hover_sources.pop(element, None)
        if members is None:
            return False
        for member in members:
            count = self._hover_counts.get(member, 0) - 1
            if count > 0:
                self._hover_counts[member] = count
                continue
            self._hover_counts.pop(member, None)
            if not self.is_highlighted(member):
                self._visual.set_highlighted(member, False)
        return True

    def clear_hover(self) -> None:
        for source in list(self._hover_sources):
            self.unhighlight_pair(source)

    # -------------------------------------------------------------- Exclusive layer

    def set_exclusive_definition(self, definition: Optional[ET._Element]) -> None:
        """Make *definition* the single navigation-highlighted definition.

        ``None`` clears the exclusive slot.
        """
        previous = self._exclusive
        if previous is definition:
            return
        self._exclusive = definition
        if previous is not None and not self.is_highlighted(previous):
            self._visual.set_highlighted(previous, False)
        if definition is not None and self._hover_counts.get(definition, 0) == 0:
            self._visual.set_highlighted(definition, True)
        logger.debug(
            "Exclusive definition %s -> %s",
            self._index.annotation_of(previous).identifier,
            self._index.annotation_of(definition).identifier,
        )
