from __future__ import annotations

"""Click navigation: scroll to a definition, then settle highlight and URI.

Each call to :meth:`NavigationController.navigate_to` takes a new sequence
number and cancels the previous in-flight scroll. A completion callback
only mutates state when its sequence number is still the latest, so the
exclusive definition always converges to the last requested target
whatever order callbacks arrive in.
"""

import logging
from typing import Callable, Optional, Tuple

from lxml import etree as ET

from linked_source.adapters.scroller import Scroller, ScrollHandle
from linked_source.core.exceptions import UnresolvedIdentifier
from linked_source.core.index import IdentifierIndex
from linked_source.core.models import ShareState
from linked_source.core.services.highlight_service import HighlightCoordinator
from linked_source.core.uri import DocumentLocation, full_uri

__all__ = ["NavigationController"]

logger = logging.getLogger(__name__)


class NavigationController:
    """Own the navigation state of one document view.

    Parameters
    ----------
    index : IdentifierIndex
        Index of the viewed document.
    coordinator : HighlightCoordinator
        Receives the exclusive definition in embedded views.
    scroller : Scroller
        Asynchronous scroll primitive.
    location : DocumentLocation
        Current URI of the view; assigned to in direct views.
    framed : bool
        Whether the view runs inside an embedding frame.
    viewport : Callable[[], Tuple[int, int]], optional
        Returns the current ``(width, height)`` of the view.
    duration_ms, axis : scroll animation settings.
    query_parameter : str
        Name of the navigation query parameter (``id``).
    share_state : ShareState, optional
        Initial shareable-URI parameters.
    on_share_changed : Callable[[ShareState], None], optional
        Notified after every completed navigation or resize.
    """

    def __init__(
        self,
        *,
        index: IdentifierIndex,
        coordinator: HighlightCoordinator,
        scroller: Scroller,
        location: DocumentLocation,
        framed: bool = False,
        viewport: Optional[Callable[[], Tuple[int, int]]] = None,
        duration_ms: int = 300,
        axis: str = "y",
        query_parameter: str = "id",
        share_state: Optional[ShareState] = None,
        on_share_changed: Optional[Callable[[ShareState], None]] = None,
    ) -> None:
        self._index = index
        self._coordinator = coordinator
        self._scroller = scroller
        self.location = location
        self.framed = framed
        self._viewport = viewport
        self.duration_ms = duration_ms
        self.axis = axis
        self.query_parameter = query_parameter
        self.share = share_state or ShareState()
        self._on_share_changed = on_share_changed

        self._seq: int = 0
        self._completed_seq: int = 0
        self._inflight: Optional[ScrollHandle] = None
        self.last_definition: Optional[ET._Element] = None

    # -------------------------------------------------------------- Queries

    @property
    def sequence(self) -> int:
        """Number of the most recently requested navigation."""
        return self._seq

    @property
    def in_flight(self) -> bool:
        return self._completed_seq != self._seq

    @property
    def embedded(self) -> bool:
        """True when the location carries the navigation query parameter."""
        return self.location.has_navigation_parameter(self.query_parameter)

    # -------------------------------------------------------------- Events

    def on_reference_click(self, element: ET._Element) -> bool:
        """Navigate to whatever *element* links to.

        A bare definition anchor (no link target) scrolls to itself. Returns
        False when nothing was navigated to.
        """
        annotation = self._index.annotation_of(element)
        if not annotation.is_reference:
            if annotation.is_definition:
                return self.navigate_to(element)
            return False
        try:
            definition = self._index.require_definition(annotation.target)
        except UnresolvedIdentifier as exc:
            logger.debug("Click ignored: %s", exc)
            return False
        return self.navigate_to(definition)

    def navigate_to(self, definition: Optional[ET._Element]) -> bool:
        """Start scrolling to *definition*; supersedes any in-flight navigation."""
        if definition is None:
            return False
        identifier = self._index.annotation_of(definition).identifier
        if not identifier or self._index.definition_of(identifier) is not definition:
            logger.debug("Navigation ignored: element is not an indexed definition")
            return False

        self._seq += 1
        seq = self._seq
        if self._inflight is not None:
            self._inflight.cancel()
            self._inflight = None

        logger.debug("Navigation #%d to %r", seq, identifier)

        def _on_complete() -> None:
            self._complete(seq, definition, identifier)

        handle = self._scroller.scroll_to(
            definition, duration_ms=self.duration_ms, axis=self.axis, on_complete=_on_complete
        )
        # The scroller may have completed synchronously
        if self._completed_seq != seq and self._seq == seq:
            self._inflight = handle
        return True

    def on_load(self) -> bool:
        """Apply the navigation parameter carried by the location at load time.

        In a frame the view scrolls to the definition; at top level the
        location is redirected to the fragment form. Returns True when a
        navigation or redirect happened.
        """
        identifier = self.location.query_identifier(self.query_parameter)
        if not identifier:
            self.share.identifier = self.location.fragment or None
            if not self.framed:
                self.refresh_viewport()
            return False

        definition = self._index.definition_of(identifier)
        if definition is None:
            logger.debug("Load parameter ignored: %s", UnresolvedIdentifier(identifier))
            return False
        if self.framed:
            return self.navigate_to(definition)
        self.location.assign(full_uri(self.location.base, identifier, parameter=self.query_parameter))
        self.share.identifier = identifier
        self._notify_share()
        return True

    def on_resize(self) -> None:
        """Refresh the export dimensions of a top-level view."""
        if self.framed:
            return
        self.refresh_viewport()
        self._notify_share()

    def refresh_viewport(self) -> None:
        if self._viewport is None:
            return
        width, height = self._viewport()
        self.share.width = int(width)
        self.share.height = int(height)

    # -------------------------------------------------------------- Internals

    def _complete(self, seq: int, definition: ET._Element, identifier: str) -> None:
        if seq != self._seq:
            logger.debug("Navigation #%d superseded by #%d", seq, self._seq)
            return
        self._completed_seq = seq
        self._inflight = None

        if self.embedded:
            self._coordinator.set_exclusive_definition(definition)
        else:
            self.location.assign(f"#{identifier}")

        self.last_definition = definition
        self.share.identifier = identifier
        self.refresh_viewport()
        self._notify_share()

    def _notify_share(self) -> None:
        if self._on_share_changed is not None:
            self._on_share_changed(self.share)
