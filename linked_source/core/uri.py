from __future__ import annotations

"""Link-target parsing and document-location helpers.

These helpers are side-effect-free apart from :meth:`DocumentLocation.assign`,
which notifies the listener supplied by the hosting view.
"""

import logging
import posixpath
import re
from typing import Callable, Optional
from urllib.parse import urljoin, urlsplit

from .exceptions import ForeignLinkTarget, MalformedLinkTarget

__all__ = [
    "parse_link_target",
    "is_same_document",
    "full_uri",
    "DocumentLocation",
]

logger = logging.getLogger(__name__)

_BASE_RE = re.compile(r"^([^?#]*)")


def _strip_query(uri: str) -> str:
    return uri.split("?", 1)[0]


def is_same_document(prefix: str, document_path: str) -> bool:
    """Return True when *prefix* (the part of a link target before ``#``)
    names the document at *document_path*.

    The prefix is resolved relative to the document, so a bare query string,
    the document's file name, or any relative or absolute spelling of its
    path all count as the same document. A prefix spelled exactly like a
    relative *document_path* matches too.
    """
    d = _strip_query(document_path)
    p = _strip_query(prefix)
    if p and posixpath.normpath(p) == posixpath.normpath(d):
        return True
    resolved = urlsplit(urljoin(d, p))
    current = urlsplit(d)
    if resolved.netloc != current.netloc:
        return False
    return posixpath.normpath(resolved.path or "/") == posixpath.normpath(current.path or "/")


def parse_link_target(target: Optional[str], document_path: Optional[str] = None) -> str:
    """Extract the identifier a link target points at.

    The target is split at its last ``#``. Fragment-only targets (``#foo``)
    are accepted. A non-empty prefix must name the current document when
    *document_path* is known.

    Raises
    ------
    MalformedLinkTarget
        No ``#`` or nothing after it.
    ForeignLinkTarget
        The prefix names another document.
    """
    if not target:
        raise MalformedLinkTarget(target)
    pos = target.rfind("#")
    if pos < 0:
        raise MalformedLinkTarget(target)
    identifier = target[pos + 1:]
    if not identifier:
        raise MalformedLinkTarget(target)
    prefix = target[:pos]
    if prefix and document_path is not None and not is_same_document(prefix, document_path):
        raise ForeignLinkTarget(target, document_path)
    return identifier


def full_uri(base: str, identifier: Optional[str] = None, query: bool = False, parameter: str = "id") -> str:
    """Build the URI of *identifier* inside the document at *base*.

    ``query=True`` yields the embeddable ``?id=`` form, otherwise the plain
    fragment form.
    """
    if not identifier:
        return base
    return f"{base}?{parameter}={identifier}" if query else f"{base}#{identifier}"


class DocumentLocation:
    """The current URI of a document view.

    Parameters
    ----------
    href : str
        Initial URI.
    on_assign : Callable[[str], None], optional
        Listener invoked with the new URI whenever :meth:`assign` runs
        (the host performs the actual jump).
    """

    def __init__(self, href: str, on_assign: Optional[Callable[[str], None]] = None) -> None:
        self._href = href
        self._on_assign = on_assign
        self.previous: Optional[str] = None

    @property
    def href(self) -> str:
        return self._href

    @property
    def base(self) -> str:
        """URI up to the first ``?`` or ``#``."""
        return _BASE_RE.match(self._href).group(1)

    @property
    def query(self) -> str:
        return urlsplit(self._href).query

    @property
    def fragment(self) -> str:
        return urlsplit(self._href).fragment

    def has_navigation_parameter(self, parameter: str = "id") -> bool:
        """True when the query string starts with ``<parameter>=``."""
        return self.query.startswith(f"{parameter}=")

    def query_identifier(self, parameter: str = "id") -> Optional[str]:
        m = re.match(rf"^{re.escape(parameter)}=(.+)$", self.query)
        return m.group(1) if m else None

    def assign(self, uri: str) -> None:
        """Jump to *uri*, resolved relative to the current location."""
        new_href = urljoin(self._href, uri)
        logger.debug("Location assign %s -> %s", self._href, new_href)
        self.previous = self._href
        self._href = new_href
        if self._on_assign is not None:
            self._on_assign(new_href)

    def __repr__(self) -> str:
        return f"DocumentLocation({self._href!r})"
