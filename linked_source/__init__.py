"""Top-level package for Linked Source.

Bidirectional definition/reference linking for rendered source documents:
hover highlighting of both sides of a link and click navigation that keeps
one definition highlighted at a time. Front-ends should only depend on the
public API exposed here rather than importing internal modules directly.
"""

from .core.context import LinkedDocument  # re-export for convenience
from .core.index import IdentifierIndex
from .ui.controllers import DocumentController

__all__: list[str] = [
    "LinkedDocument",
    "IdentifierIndex",
    "DocumentController",
]
