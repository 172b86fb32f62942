from __future__ import annotations

"""Exception classes for link indexing and navigation.

All of these are detected and handled inside the component that raises
them; none of them should reach the reader of the page. The only exception
allowed to escape is :class:`DuplicateIdentifier` when the index is built
with the ``error`` duplicate policy.
"""

from typing import Optional

__all__ = [
    "LinkError",
    "MalformedLinkTarget",
    "ForeignLinkTarget",
    "UnresolvedIdentifier",
    "DuplicateIdentifier",
]


class LinkError(Exception):
    """Base exception for all definition/reference errors."""

    def __init__(self, message: str, identifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.identifier = identifier

    def __str__(self) -> str:
        if self.identifier:
            return f"[{self.identifier}] {super().__str__()}"
        return super().__str__()


class MalformedLinkTarget(LinkError):
    """Raised when no identifier can be extracted from a link target."""

    def __init__(self, target: Optional[str]) -> None:
        super().__init__(f"No identifier in link target {target!r}")
        self.target = target


class ForeignLinkTarget(MalformedLinkTarget):
    """Raised when a link target names a document other than the current one."""

    def __init__(self, target: str, document_path: str) -> None:
        super().__init__(target)
        self.document_path = document_path
        self.args = (f"Link target {target!r} does not point into {document_path!r}",)


class UnresolvedIdentifier(LinkError):
    """Raised when an identifier has no registered definition."""

    def __init__(self, identifier: str) -> None:
        super().__init__("No definition registered", identifier)


class DuplicateIdentifier(LinkError):
    """Raised when two definitions claim the same identifier."""

    def __init__(self, identifier: str, line: Optional[int] = None) -> None:
        where = f" (line {line})" if line else ""
        super().__init__(f"Identifier defined more than once{where}", identifier)
        self.line = line
