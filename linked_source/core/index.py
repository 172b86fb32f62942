from __future__ import annotations

"""Identifier index: definition-by-id and references-by-id tables.

The index is built once per document by a single document-order scan and
is read-only afterwards. Every element's role is captured as an
:class:`~linked_source.core.models.Annotation` during that scan so event
handlers never re-inspect attributes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from lxml import etree as ET

from .exceptions import DuplicateIdentifier, MalformedLinkTarget, UnresolvedIdentifier
from .models import PLAIN, Annotation
from .uri import parse_link_target

__all__ = ["IdentifierIndex", "DuplicateRecord", "DUPLICATE_POLICIES"]

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("last", "first", "error")


@dataclass(frozen=True)
class DuplicateRecord:
    """One identifier claimed by more than one element."""

    identifier: str
    kept: ET._Element
    discarded: ET._Element


class IdentifierIndex:
    """Mapping identifier -> definition and identifier -> references.

    Use :meth:`build` to construct one from a parsed document.

    Notes
    -----
    - Reference lists are in document order.
    - ``duplicates`` records every identifier collision seen during the
      scan, whichever policy was applied.
    """

    def __init__(self, document_path: Optional[str] = None) -> None:
        self.document_path = document_path
        self._definitions: Dict[str, ET._Element] = {}
        self._references: Dict[str, List[ET._Element]] = {}
        self._annotations: Dict[ET._Element, Annotation] = {}
        self.duplicates: List[DuplicateRecord] = []
        self.skipped_targets: List[Tuple[ET._Element, str]] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def build(
        cls,
        document,
        *,
        document_path: Optional[str] = None,
        id_attribute: str = "id",
        href_attribute: str = "href",
        scope: Optional[str] = None,
        duplicates: str = "last",
    ) -> "IdentifierIndex":
        """Scan *document* (an lxml tree or element) and return its index.

        Parameters
        ----------
        document
            ``lxml`` ElementTree or root element.
        document_path
            Canonical path of the document; link targets prefixed with
            another path are not indexed.
        scope
            Optional XPath; only elements inside a match are annotated.
        duplicates
            ``last`` (overwrite, warn), ``first`` (keep, warn) or ``error``.

        Raises
        ------
        DuplicateIdentifier
            Only under the ``error`` policy.
        ValueError
            Unknown duplicate policy.
        """
        if duplicates not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicates!r}")

        index = cls(document_path=document_path)
        for element in _scoped_elements(document, scope):
            identifier = element.get(id_attribute) or None
            target = index._extract_target(element, element.get(href_attribute))
            annotation = Annotation.of(identifier, target)
            if annotation.is_plain:
                continue
            index._annotations[element] = annotation
            if identifier:
                index._register_definition(identifier, element, duplicates)
            if target:
                index._references.setdefault(target, []).append(element)

        logger.info(
            "Index built: %d definitions, %d referenced identifiers, %d duplicates, %d skipped targets",
            len(index._definitions),
            len(index._references),
            len(index.duplicates),
            len(index.skipped_targets),
        )
        return index

    def _extract_target(self, element: ET._Element, href: Optional[str]) -> Optional[str]:
        if href is None:
            return None
        try:
            return parse_link_target(href, self.document_path)
        except MalformedLinkTarget as exc:
            logger.debug("Skipping link target: %s", exc)
            self.skipped_targets.append((element, href))
            return None

    def _register_definition(self, identifier: str, element: ET._Element, policy: str) -> None:
        existing = self._definitions.get(identifier)
        if existing is None:
            self._definitions[identifier] = element
            return
        if policy == "error":
            raise DuplicateIdentifier(identifier, element.sourceline)
        if policy == "first":
            self.duplicates.append(DuplicateRecord(identifier, existing, element))
        else:
            self.duplicates.append(DuplicateRecord(identifier, element, existing))
            self._definitions[identifier] = element
        logger.warning(
            "Duplicate identifier %r (lines %s and %s); keeping the %s definition",
            identifier, existing.sourceline, element.sourceline, policy,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def definition_of(self, identifier: Optional[str]) -> Optional[ET._Element]:
        if not identifier:
            return None
        return self._definitions.get(identifier)

    def require_definition(self, identifier: str) -> ET._Element:
        """Like :meth:`definition_of` but raises :class:`UnresolvedIdentifier`."""
        definition = self.definition_of(identifier)
        if definition is None:
            raise UnresolvedIdentifier(identifier)
        return definition

    def references_of(self, identifier: Optional[str]) -> List[ET._Element]:
        """References pointing at *identifier*; empty list when none."""
        if not identifier:
            return []
        return list(self._references.get(identifier, ()))

    def annotation_of(self, element: Optional[ET._Element]) -> Annotation:
        if element is None:
            return PLAIN
        return self._annotations.get(element, PLAIN)

    def identifiers(self) -> List[str]:
        return list(self._definitions)

    def dangling_references(self) -> Dict[str, List[ET._Element]]:
        """References whose identifier has no definition."""
        return {k: list(v) for k, v in self._references.items() if k not in self._definitions}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)


def _scoped_elements(document, scope: Optional[str]) -> Iterator[ET._Element]:
    root = document.getroot() if hasattr(document, "getroot") else document
    if not scope:
        yield from _elements(root)
        return
    seen = set()
    for container in root.xpath(scope):
        if not isinstance(container, ET._Element):
            continue
        for element in _elements(container):
            if element not in seen:
                seen.add(element)
                yield element


def _elements(root: ET._Element) -> Iterator[ET._Element]:
    # Comments and processing instructions carry no attributes
    for element in root.iter():
        if isinstance(element.tag, str):
            yield element
