from __future__ import annotations

"""Scroll-animation collaborators.

A scroller brings an element into view and invokes a completion callback
once the animation is over. The returned handle can cancel that callback.
"""

import logging
from typing import Any, Callable, Optional, Protocol

from lxml import etree as ET

__all__ = ["ScrollHandle", "Scroller", "ScheduledScroller"]

logger = logging.getLogger(__name__)


class ScrollHandle:
    """Cancellable token for one in-flight scroll animation."""

    def __init__(self, cancel_fn: Optional[Callable[[], None]] = None) -> None:
        self._cancel_fn = cancel_fn
        self.cancelled = False
        self.completed = False

    def cancel(self) -> None:
        if self.cancelled or self.completed:
            return
        self.cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()


class Scroller(Protocol):
    def scroll_to(
        self,
        element: ET._Element,
        *,
        duration_ms: int,
        axis: str,
        on_complete: Callable[[], None],
    ) -> Optional[ScrollHandle]:
        ...


class ScheduledScroller:
    """Scroller driven by a Tk-style scheduler.

    Parameters
    ----------
    schedule : Callable[[int, Callable[[], None]], object]
        ``widget.after``-like function; returns a token for *unschedule*.
    unschedule : Callable[[object], None], optional
        ``widget.after_cancel``-like function.
    move : Callable[[ET._Element, str, int], None], optional
        Starts the visual animation (element, axis, duration in ms).
    """

    def __init__(
        self,
        schedule: Callable[[int, Callable[[], None]], Any],
        unschedule: Optional[Callable[[Any], None]] = None,
        move: Optional[Callable[[ET._Element, str, int], None]] = None,
    ) -> None:
        self._schedule = schedule
        self._unschedule = unschedule
        self._move = move

    def scroll_to(
        self,
        element: ET._Element,
        *,
        duration_ms: int,
        axis: str,
        on_complete: Callable[[], None],
    ) -> ScrollHandle:
        if self._move is not None:
            self._move(element, axis, duration_ms)

        token_box: dict[str, Any] = {}

        def _cancel() -> None:
            if self._unschedule is not None and "token" in token_box:
                self._unschedule(token_box["token"])

        handle = ScrollHandle(_cancel)

        def _fire() -> None:
            if handle.cancelled:
                logger.debug("Scroll completion dropped (cancelled)")
                return
            handle.completed = True
            on_complete()

        token_box["token"] = self._schedule(int(duration_ms), _fire)
        return handle
