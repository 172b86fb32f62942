from __future__ import annotations

"""Shared data structures used across the Linked Source core.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, embedding views).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

__all__ = ["AnnotationKind", "Annotation", "PLAIN", "ShareState"]


class AnnotationKind(Enum):
    PLAIN = "plain"
    DEFINITION = "definition"
    REFERENCE = "reference"
    BOTH = "both"


@dataclass(frozen=True)
class Annotation:
    """Role of one element, computed once when the index is built.

    Attributes
    ----------
    kind
        Which roles the element plays.
    identifier
        The element's own identifier when it is a definition.
    target
        The identifier its link target points at when it is a reference.
    """

    kind: AnnotationKind
    identifier: Optional[str] = None
    target: Optional[str] = None

    @classmethod
    def of(cls, identifier: Optional[str], target: Optional[str]) -> "Annotation":
        if identifier and target:
            return cls(AnnotationKind.BOTH, identifier, target)
        if identifier:
            return cls(AnnotationKind.DEFINITION, identifier, None)
        if target:
            return cls(AnnotationKind.REFERENCE, None, target)
        return PLAIN

    @property
    def is_definition(self) -> bool:
        return self.kind in (AnnotationKind.DEFINITION, AnnotationKind.BOTH)

    @property
    def is_reference(self) -> bool:
        return self.kind in (AnnotationKind.REFERENCE, AnnotationKind.BOTH)

    @property
    def is_plain(self) -> bool:
        return self.kind is AnnotationKind.PLAIN


PLAIN = Annotation(AnnotationKind.PLAIN)


@dataclass
class ShareState:
    """Parameters of the shareable/export URI.

    ``identifier`` is the currently selected definition (``None`` before any
    navigation); ``width``/``height`` are the embed dimensions.
    """

    identifier: Optional[str] = None
    width: int = 700
    height: int = 500
