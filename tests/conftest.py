"""Shared fixtures for Linked Source tests.

Provides sample documents, a manually driven scroller, and a visual-state
recorder so highlight and navigation behaviour can be asserted without any
rendering front-end.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from linked_source.adapters.scroller import ScrollHandle
from linked_source.config import ConfigManager

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


SIMPLE_HTML = """<html><body><pre>
<span id="def1">foo</span> = 1
print(<a href="#def1">foo</a>)
</pre></body></html>"""

NESTED_HTML = """<html><body><pre>
<span id="outer">def outer(): return <a id="inner" href="#other">other</a>()</span>
<span id="other">def other(): pass</span>
<a href="#outer">outer</a> <a href="page.html#outer">outer</a> <a href="#missing">missing</a>
</pre></body></html>"""


class RecordingVisualState:
    """Visual-state collaborator that records calls and current state."""

    def __init__(self) -> None:
        self.calls: List[Tuple[object, bool]] = []
        self.state: dict = {}

    def set_highlighted(self, element, highlighted: bool) -> None:
        self.calls.append((element, highlighted))
        self.state[element] = highlighted

    def on(self) -> set:
        return {e for e, v in self.state.items() if v}


class FakeScroller:
    """Scroller whose completions are fired by the test.

    ``honor_cancel=False`` mimics an animation primitive that cannot be
    cancelled, so stale callbacks still arrive.
    """

    def __init__(self, honor_cancel: bool = True) -> None:
        self.honor_cancel = honor_cancel
        self.requests: List[Tuple[object, int, str, Callable[[], None], ScrollHandle]] = []

    def scroll_to(self, element, *, duration_ms, axis, on_complete):
        handle = ScrollHandle()
        self.requests.append((element, duration_ms, axis, on_complete, handle))
        return handle

    def complete(self, i: int = -1) -> None:
        element, _d, _a, on_complete, handle = self.requests[i]
        if handle.cancelled and self.honor_cancel:
            return
        handle.completed = True
        on_complete()


class ImmediateScroller:
    """Scroller that completes before returning."""

    def __init__(self) -> None:
        self.count = 0

    def scroll_to(self, element, *, duration_ms, axis, on_complete):
        self.count += 1
        on_complete()
        return ScrollHandle()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and reload config per test."""
    user_dir = tmp_path / "user_config"
    user_dir.mkdir()
    monkeypatch.setenv("LINKED_SOURCE_CONFIG_DIR", str(user_dir))
    monkeypatch.setenv("LINKED_SOURCE_LOG_DIR", str(tmp_path / "logs"))
    ConfigManager.reset()
    yield user_dir
    ConfigManager.reset()


@pytest.fixture
def visual():
    return RecordingVisualState()


@pytest.fixture
def scroller():
    return FakeScroller()


@pytest.fixture
def make_document(visual, scroller):
    """Factory building a LinkedDocument from HTML text."""
    from linked_source.core.context import LinkedDocument

    def _make(html: str = SIMPLE_HTML, uri: str = "http://example.org/src/page.html",
              framed: bool = False, viewport: Optional[Callable[[], Tuple[int, int]]] = None,
              scroller_obj=None, assigned: Optional[list] = None, on_share_changed=None):
        return LinkedDocument.from_html(
            html,
            uri=uri,
            scroller=scroller_obj or scroller,
            framed=framed,
            viewport=viewport,
            visual_state=visual,
            on_assign=(assigned.append if assigned is not None else None),
            on_share_changed=on_share_changed,
        )

    return _make


@pytest.fixture
def simple_html():
    return SIMPLE_HTML


@pytest.fixture
def nested_html():
    return NESTED_HTML


@pytest.fixture
def uncancellable_scroller():
    return FakeScroller(honor_cancel=False)


@pytest.fixture
def immediate_scroller():
    return ImmediateScroller()


@pytest.fixture
def restore_root_logging():
    """setup_logging() reconfigures the root logger; put the runner's handlers back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
