from linked_source.ui.controllers.document_controller import DocumentController


def _anchor(doc, href):
    return [a for a in doc.tree.getroot().iter("a") if a.get("href") == href][0]


def test_hover_anchor_highlights_both_sides(make_document, visual):
    doc = make_document()
    ctrl = DocumentController(doc)
    span, anchor = doc.element_by_id("def1"), _anchor(doc, "#def1")

    assert ctrl.on_pointer_enter(anchor) is True
    assert visual.on() == {span, anchor}
    assert ctrl.on_pointer_leave(anchor) is True
    assert visual.on() == set()

    ctrl.on_pointer_enter(span)
    assert visual.on() == {span, anchor}
    ctrl.on_pointer_leave(span)
    assert visual.on() == set()


def test_click_without_parameter_sets_hash_and_leaves_no_hover(make_document, scroller, visual):
    doc = make_document()
    ctrl = DocumentController(doc)
    anchor = _anchor(doc, "#def1")

    ctrl.on_pointer_enter(anchor)
    assert ctrl.on_click(anchor) is True
    scroller.complete()
    ctrl.on_pointer_leave(anchor)

    assert doc.location.fragment == "def1"
    assert visual.on() == set()


def test_nested_chain_highlights_every_level(make_document, visual, nested_html):
    doc = make_document(nested_html)
    ctrl = DocumentController(doc)
    inner, outer, other = (doc.element_by_id(k) for k in ("inner", "outer", "other"))
    outer_refs = set(doc.index.references_of("outer"))

    ctrl.on_pointer_enter(inner)
    assert visual.on() == {inner, other, outer} | outer_refs
    ctrl.on_pointer_leave(inner)
    assert visual.on() == set()


def test_entering_child_of_hovered_definition(make_document, visual, nested_html):
    doc = make_document(nested_html)
    ctrl = DocumentController(doc)
    inner, outer, other = (doc.element_by_id(k) for k in ("inner", "outer", "other"))
    outer_refs = set(doc.index.references_of("outer"))

    ctrl.on_pointer_enter(outer)
    ctrl.on_pointer_enter(inner)
    ctrl.on_pointer_leave(inner)
    assert visual.on() == {outer} | outer_refs
    ctrl.on_pointer_leave(outer)
    assert visual.on() == set()


def test_leave_without_enter_is_a_noop(make_document, visual):
    doc = make_document()
    ctrl = DocumentController(doc)
    assert ctrl.on_pointer_leave(_anchor(doc, "#def1")) is False
    assert ctrl.on_pointer_leave(None) is False
    assert visual.calls == []


def test_plain_nodes_do_nothing(make_document, scroller, visual):
    doc = make_document()
    ctrl = DocumentController(doc)
    pre = next(doc.tree.getroot().iter("pre"))
    assert ctrl.on_pointer_enter(pre) is False
    assert ctrl.on_click(pre) is False
    assert scroller.requests == []
    assert visual.calls == []


def test_click_routes_innermost_level(make_document, scroller, nested_html):
    doc = make_document(nested_html)
    ctrl = DocumentController(doc)
    ctrl.on_click(doc.element_by_id("inner"))
    assert scroller.requests[0][0] is doc.element_by_id("other")


def test_load_and_resize_delegate(make_document, scroller, nested_html):
    doc = make_document(nested_html, uri="http://example.org/src/page.html?id=outer", framed=True)
    ctrl = DocumentController(doc)
    assert ctrl.on_load() is True
    assert scroller.requests[0][0] is doc.element_by_id("outer")
    ctrl.on_resize()
