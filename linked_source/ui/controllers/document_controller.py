from typing import Dict, List, Optional

from lxml import etree as ET

from linked_source.core.context import LinkedDocument
from linked_source.core.walker import ChainLevel, resolve_chain


class DocumentController:
    """Route pointer events of one document view to its services.

    Hosts call the ``on_*`` methods from their own event bindings with the
    element under the pointer. The controller contains no UI toolkit code.

    Parameters
    ----------
    document : LinkedDocument
        The view whose index, coordinator and navigator are used.

    Notes
    -----
    - Resolution failures never raise; methods return booleans.
    - Nested nodes share enclosing levels (entering a reference inside a
      definition that is already hovered). Each level is counted so it stays
      highlighted until the pointer has left every node that entered it.
    """

    def __init__(self, document: LinkedDocument) -> None:
        self.document = document
        self._entered: Dict[ET._Element, List[ChainLevel]] = {}
        self._level_counts: Dict[ET._Element, int] = {}

    # ---------------------------------------------------------------------------------
    # Hover
    # ---------------------------------------------------------------------------------

    def chain_for(self, node: Optional[ET._Element]) -> List[ChainLevel]:
        return resolve_chain(node, self.document.index)

    def on_pointer_enter(self, node: Optional[ET._Element]) -> bool:
        """Highlight every annotated level enclosing *node*."""
        if node is None or node in self._entered:
            return False
        chain = self.chain_for(node)
        if not chain:
            return False
        self._entered[node] = chain
        changed = False
        for level in chain:
            count = self._level_counts.get(level.element, 0) + 1
            self._level_counts[level.element] = count
            if count == 1:
                changed = self.document.coordinator.highlight_pair(level.element) or changed
        return changed

    def on_pointer_leave(self, node: Optional[ET._Element]) -> bool:
        """Undo what entering *node* applied; no-op if it was never entered."""
        chain = self._entered.pop(node, None) if node is not None else None
        if not chain:
            return False
        changed = False
        for level in chain:
            count = self._level_counts.get(level.element, 0) - 1
            if count > 0:
                self._level_counts[level.element] = count
                continue
            self._level_counts.pop(level.element, None)
            changed = self.document.coordinator.unhighlight_pair(level.element) or changed
        return changed

    # ---------------------------------------------------------------------------------
    # Click / lifecycle
    # ---------------------------------------------------------------------------------

    def on_click(self, node: Optional[ET._Element]) -> bool:
        """Navigate from the innermost annotated element under *node*."""
        chain = self.chain_for(node)
        if not chain:
            return False
        return self.document.navigator.on_reference_click(chain[0].element)

    def on_load(self) -> bool:
        return self.document.navigator.on_load()

    def on_resize(self) -> None:
        self.document.navigator.on_resize()
