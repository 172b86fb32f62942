from __future__ import annotations

"""Shareable URIs and the embeddable frame snippet."""

from dataclasses import dataclass
from html import escape
from typing import Optional

from linked_source.core.models import ShareState
from linked_source.core.uri import full_uri

__all__ = ["ExportService", "DEFAULT_IFRAME_TEMPLATE"]

DEFAULT_IFRAME_TEMPLATE = '<iframe src="{src}" width="{width}" height="{height}" frameborder="0"> </iframe>'


@dataclass
class ExportService:
    """Derive export and pop-out URIs from a :class:`ShareState`.

    ``template`` is formatted with ``src``, ``width`` and ``height``; ``src``
    is HTML-escaped for attribute context.
    """

    template: str = DEFAULT_IFRAME_TEMPLATE
    parameter: str = "id"

    def export_uri(self, base: str, share: ShareState) -> str:
        """Embeddable URI: the ``?id=`` form selects embedded navigation."""
        return full_uri(base, share.identifier, query=True, parameter=self.parameter)

    def pop_out_uri(self, base: str, identifier: Optional[str]) -> str:
        """Top-level URI opened from an embedded view."""
        return full_uri(base, identifier, query=False, parameter=self.parameter)

    def snippet(self, base: str, share: ShareState) -> str:
        return self.template.format(
            src=escape(self.export_uri(base, share), quote=True),
            width=share.width,
            height=share.height,
        )
