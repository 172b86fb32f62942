import lxml.html

from linked_source.adapters.scroller import ScheduledScroller
from linked_source.adapters.visual_state import BackgroundVisualState, ClassToggleVisualState


def _el(html: str):
    return lxml.html.fragment_fromstring(html)


class TestClassToggle:

    def test_adds_and_removes_class(self):
        el = _el('<span class="kw">x</span>')
        state = ClassToggleVisualState()
        state.set_highlighted(el, True)
        assert el.get("class") == "kw highlighted"
        state.set_highlighted(el, True)
        assert el.get("class") == "kw highlighted"
        state.set_highlighted(el, False)
        assert el.get("class") == "kw"

    def test_drops_empty_class_attribute(self):
        el = _el('<span>x</span>')
        state = ClassToggleVisualState("hl")
        state.set_highlighted(el, True)
        assert el.get("class") == "hl"
        state.set_highlighted(el, False)
        assert "class" not in el.attrib


class TestBackground:

    def test_sets_and_clears_background(self):
        el = _el('<span style="color: red">x</span>')
        state = BackgroundVisualState()
        state.set_highlighted(el, True)
        assert el.get("style") == "color: red; background: #FFaaaa"
        state.set_highlighted(el, False)
        assert el.get("style") == "color: red; background: transparent"


class FakeScheduler:
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 0

    def after(self, ms, callback):
        self._next += 1
        self.pending[self._next] = (ms, callback)
        return self._next

    def after_cancel(self, token):
        self.cancelled.append(token)
        self.pending.pop(token, None)

    def run(self, token):
        self.pending.pop(token)[1]()


class TestScheduledScroller:

    def test_completion_after_duration(self):
        scheduler = FakeScheduler()
        moves = []
        done = []
        scroller = ScheduledScroller(scheduler.after, scheduler.after_cancel,
                                     move=lambda el, axis, ms: moves.append((el, axis, ms)))
        el = _el("<span>x</span>")
        handle = scroller.scroll_to(el, duration_ms=300, axis="y", on_complete=lambda: done.append(True))

        assert moves == [(el, "y", 300)]
        assert scheduler.pending[1][0] == 300
        scheduler.run(1)
        assert done == [True]
        assert handle.completed

    def test_cancel_unschedules(self):
        scheduler = FakeScheduler()
        done = []
        scroller = ScheduledScroller(scheduler.after, scheduler.after_cancel)
        handle = scroller.scroll_to(_el("<span>x</span>"), duration_ms=10, axis="y",
                                    on_complete=lambda: done.append(True))
        handle.cancel()
        assert scheduler.cancelled == [1]
        assert handle.cancelled
        assert done == []

    def test_cancelled_callback_is_dropped_without_unschedule(self):
        callbacks = []
        done = []
        scroller = ScheduledScroller(lambda ms, cb: callbacks.append(cb))
        handle = scroller.scroll_to(_el("<span>x</span>"), duration_ms=10, axis="y",
                                    on_complete=lambda: done.append(True))
        handle.cancel()
        callbacks[0]()
        assert done == []
