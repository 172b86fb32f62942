from __future__ import annotations

"""One linked document view and the services bound to it.

Each :class:`LinkedDocument` owns its own index, highlight coordinator and
navigation controller, so several views can coexist without sharing any
navigation state.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import lxml.html
from lxml import etree as ET

from linked_source.adapters.scroller import Scroller
from linked_source.adapters.visual_state import BackgroundVisualState, ClassToggleVisualState, VisualState
from linked_source.config import ConfigManager
from linked_source.core.index import IdentifierIndex
from linked_source.core.models import ShareState
from linked_source.core.services import ExportService, HighlightCoordinator, NavigationController
from linked_source.core.uri import DocumentLocation

__all__ = ["LinkedDocument", "visual_state_from_config", "build_index_for_file"]

logger = logging.getLogger(__name__)


def build_index_for_file(
    path: Union[str, Path],
    document_path: Optional[str] = None,
    scope: Optional[str] = None,
    duplicates: Optional[str] = None,
    config: Optional[ConfigManager] = None,
) -> Tuple[ET._ElementTree, IdentifierIndex]:
    """Parse the HTML file at *path* and index it.

    Unset arguments fall back to the ``index`` configuration section;
    *document_path* defaults to the file's own URI.
    """
    index_cfg = (config or ConfigManager()).get_index_config()
    path = Path(path)
    tree = lxml.html.parse(str(path))
    index = IdentifierIndex.build(
        tree,
        document_path=document_path or path.resolve().as_uri(),
        id_attribute=index_cfg.get("id_attribute", "id"),
        href_attribute=index_cfg.get("href_attribute", "href"),
        scope=scope if scope is not None else (index_cfg.get("scope") or None),
        duplicates=duplicates or index_cfg.get("duplicates", "last"),
    )
    return tree, index


def visual_state_from_config(highlight_cfg: Dict[str, Any]) -> VisualState:
    """Build the visual-state adapter named by the ``highlight`` section."""
    mode = str(highlight_cfg.get("mode", "class")).lower()
    if mode == "background":
        return BackgroundVisualState(color=highlight_cfg.get("background_color", "#FFaaaa"))
    if mode != "class":
        logger.warning("Unknown highlight mode %r, using class toggling", mode)
    return ClassToggleVisualState(class_name=highlight_cfg.get("class_name", "highlighted"))


class LinkedDocument:
    """Parsed document plus its index and interaction services.

    Prefer :meth:`from_html` or :meth:`from_file`, which read settings from
    :class:`ConfigManager`.
    """

    def __init__(
        self,
        tree: ET._ElementTree,
        *,
        index: IdentifierIndex,
        coordinator: HighlightCoordinator,
        navigator: NavigationController,
        exporter: ExportService,
    ) -> None:
        self.tree = tree
        self.index = index
        self.coordinator = coordinator
        self.navigator = navigator
        self.exporter = exporter

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_html(
        cls,
        source: Union[str, bytes],
        *,
        uri: str,
        scroller: Scroller,
        framed: bool = False,
        viewport: Optional[Callable[[], Tuple[int, int]]] = None,
        visual_state: Optional[VisualState] = None,
        on_assign: Optional[Callable[[str], None]] = None,
        on_share_changed: Optional[Callable[[ShareState], None]] = None,
        config: Optional[ConfigManager] = None,
    ) -> "LinkedDocument":
        """Parse *source* and wire up the services for a view located at *uri*."""
        root = lxml.html.document_fromstring(source)
        return cls.from_tree(
            root.getroottree(),
            uri=uri,
            scroller=scroller,
            framed=framed,
            viewport=viewport,
            visual_state=visual_state,
            on_assign=on_assign,
            on_share_changed=on_share_changed,
            config=config,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs: Any) -> "LinkedDocument":
        path = Path(path)
        kwargs.setdefault("uri", path.resolve().as_uri())
        return cls.from_html(path.read_bytes(), **kwargs)

    @classmethod
    def from_tree(
        cls,
        tree: ET._ElementTree,
        *,
        uri: str,
        scroller: Scroller,
        framed: bool = False,
        viewport: Optional[Callable[[], Tuple[int, int]]] = None,
        visual_state: Optional[VisualState] = None,
        on_assign: Optional[Callable[[str], None]] = None,
        on_share_changed: Optional[Callable[[ShareState], None]] = None,
        config: Optional[ConfigManager] = None,
    ) -> "LinkedDocument":
        config = config or ConfigManager()
        index_cfg = config.get_index_config()
        nav_cfg = config.get_navigation_config()
        export_cfg = config.get_export_config()

        location = DocumentLocation(uri, on_assign=on_assign)
        index = IdentifierIndex.build(
            tree,
            document_path=location.base,
            id_attribute=index_cfg.get("id_attribute", "id"),
            href_attribute=index_cfg.get("href_attribute", "href"),
            scope=index_cfg.get("scope") or None,
            duplicates=index_cfg.get("duplicates", "last"),
        )
        coordinator = HighlightCoordinator(
            index, visual_state or visual_state_from_config(config.get_highlight_config())
        )
        parameter = nav_cfg.get("query_parameter", "id")
        navigator = NavigationController(
            index=index,
            coordinator=coordinator,
            scroller=scroller,
            location=location,
            framed=framed,
            viewport=viewport,
            duration_ms=int(nav_cfg.get("scroll_duration_ms", 300)),
            axis=nav_cfg.get("scroll_axis", "y"),
            query_parameter=parameter,
            share_state=ShareState(
                width=int(export_cfg.get("default_width", 700)),
                height=int(export_cfg.get("default_height", 500)),
            ),
            on_share_changed=on_share_changed,
        )
        exporter = ExportService(parameter=parameter)
        if export_cfg.get("iframe_template"):
            exporter.template = export_cfg["iframe_template"]
        logger.info("Linked document ready: %s (%d definitions)", location.base, len(index))
        return cls(tree, index=index, coordinator=coordinator, navigator=navigator, exporter=exporter)

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------
    @property
    def location(self) -> DocumentLocation:
        return self.navigator.location

    def export_uri(self) -> str:
        return self.exporter.export_uri(self.location.base, self.navigator.share)

    def export_snippet(self) -> str:
        return self.exporter.snippet(self.location.base, self.navigator.share)

    def pop_out_uri(self) -> str:
        """URI opened by the pop-out button of an embedded view."""
        last = self.navigator.last_definition
        identifier = self.index.annotation_of(last).identifier if last is not None else None
        return self.exporter.pop_out_uri(self.location.base, identifier)

    def element_by_id(self, identifier: str) -> Optional[ET._Element]:
        return self.index.definition_of(identifier)

    def to_html(self) -> str:
        return lxml.html.tostring(self.tree.getroot(), encoding="unicode", doctype=self.tree.docinfo.doctype or None)
