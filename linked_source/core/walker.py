from __future__ import annotations

"""Resolve the chain of annotated ancestors under a pointer event."""

from dataclasses import dataclass
from typing import List, Optional

from lxml import etree as ET

from .index import IdentifierIndex
from .models import Annotation

__all__ = ["ChainLevel", "resolve_chain"]


@dataclass(frozen=True)
class ChainLevel:
    """One annotated element of an ancestor chain and its role."""

    element: ET._Element
    annotation: Annotation


def resolve_chain(node: Optional[ET._Element], index: IdentifierIndex) -> List[ChainLevel]:
    """Return the annotated elements enclosing *node*, innermost first.

    The walk starts at *node* itself and climbs parent by parent while each
    element is annotated; it stops at the first plain element or at the
    root. Non-element nodes (comments, processing instructions) start the
    walk at their parent.
    """
    element = node
    while element is not None and not isinstance(element.tag, str):
        element = element.getparent()

    chain: List[ChainLevel] = []
    while element is not None:
        annotation = index.annotation_of(element)
        if annotation.is_plain:
            break
        chain.append(ChainLevel(element, annotation))
        element = element.getparent()
    return chain
