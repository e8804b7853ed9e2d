#!/usr/bin/env python3
"""Tests for freeform image placement."""

import pytest

from core.layout.canvas import (
    CanvasEditor,
    InteractionKind,
    InteractionSession,
    apply_drag,
    apply_resize,
    clamp_placement,
    pointer_delta_percent,
)
from core.layout.models import ImagePlacement, Page, PageRole

CONTAINER = (400.0, 600.0)


def make_editor(pages=2):
    return CanvasEditor([Page(id=f"p{i}", role=PageRole.CHAPTER_BODY) for i in range(pages)])


def contained(placement):
    return (
        0 <= placement.x <= 100 - placement.width
        and 0 <= placement.y <= 100 - placement.height
        and placement.width >= 10
        and placement.height >= 10
    )


def test_drag_clamps_at_right_edge():
    start = ImagePlacement(id="img", url="u", x=80, y=10, width=30, height=20)
    session = InteractionSession(InteractionKind.DRAG, 0, "img", (0.0, 0.0), start)
    # +15% of a 400px container is 60px
    moved = apply_drag(session, (60.0, 0.0), CONTAINER)
    assert moved.x == 70
    assert moved.y == 10


def test_drag_from_anchor_not_cumulative():
    start = ImagePlacement(id="img", url="u", x=10, y=10, width=30, height=20)
    session = InteractionSession(InteractionKind.DRAG, 0, "img", (100.0, 100.0), start)
    first = apply_drag(session, (140.0, 100.0), CONTAINER)
    second = apply_drag(session, (140.0, 100.0), CONTAINER)
    assert first == second
    assert first.x == pytest.approx(20.0)


def test_resize_clamps_size():
    start = ImagePlacement(id="img", url="u", x=70, y=50, width=20, height=20)
    session = InteractionSession(InteractionKind.RESIZE, 0, "img", (0.0, 0.0), start)
    grown = apply_resize(session, (400.0, 600.0), CONTAINER)
    assert grown.width == 30
    assert grown.height == 50
    shrunk = apply_resize(session, (-400.0, -600.0), CONTAINER)
    assert shrunk.width == 10
    assert shrunk.height == 10


def test_zero_container_is_ignored():
    assert pointer_delta_percent((0, 0), (50, 50), (0, 100)) == (0.0, 0.0)


def test_clamp_placement():
    placement = clamp_placement(ImagePlacement(id="img", url="u", x=95, y=-5, width=150, height=5))
    assert placement.width == 100
    assert placement.x == 0
    assert placement.height == 10
    assert placement.y == 0


def test_add_image_defaults_and_unknown_page():
    editor = make_editor()
    placement = editor.add_image(0, "https://example.org/cat.png")
    assert (placement.x, placement.y, placement.width, placement.height) == (25, 25, 50, 40)
    assert placement.id.startswith("img-")
    assert editor.pages[0].images == (placement,)
    assert editor.add_image(5, "x.png") is None


def test_drag_session_keeps_image_inside():
    editor = make_editor()
    placement = editor.add_image(0, "a.png", image_id="a")
    editor.begin_drag(0, "a", (200.0, 300.0))
    for pointer in [(260, 300), (600, 900), (-900, -900), (1000, 50)]:
        moved = editor.move_pointer(pointer, CONTAINER)
        assert contained(moved)
    session = editor.end_session()
    assert session.kind == InteractionKind.DRAG
    assert session.anchor_geometry == placement
    assert editor.session is None
    assert editor.move_pointer((0, 0), CONTAINER) is None


def test_operations_leave_siblings_untouched():
    editor = make_editor()
    editor.add_image(0, "a.png", image_id="a")
    sibling = editor.add_image(0, "b.png", image_id="b", x=0, y=0, width=20, height=20)

    editor.begin_resize(0, "a", (0, 0))
    editor.move_pointer((40, 60), CONTAINER)
    editor.end_session()
    editor.rotate_image(0, "a", 45)

    assert editor.get_image(0, "b") == sibling
    assert editor.get_image(0, "a").rotation == 45


def test_new_session_ends_previous():
    editor = make_editor()
    editor.add_image(0, "a.png", image_id="a")
    editor.add_image(1, "b.png", image_id="b")
    editor.begin_drag(0, "a", (0, 0))
    session = editor.begin_resize(1, "b", (0, 0))
    assert editor.session is session
    assert session.kind == InteractionKind.RESIZE
    assert editor.selected == (1, "b")


def test_delete_clears_selection():
    editor = make_editor()
    editor.add_image(0, "a.png", image_id="a")
    editor.select_image(0, "a")
    assert editor.delete_image(0, "a") is True
    assert editor.selected is None
    assert editor.pages[0].images == ()
    assert editor.delete_image(0, "a") is False


def test_session_changed():
    editor = make_editor()
    editor.add_image(0, "a.png", image_id="a")
    session = editor.begin_drag(0, "a", (0, 0))
    assert editor.session_changed(session) is False
    editor.move_pointer((40, 0), CONTAINER)
    assert editor.session_changed(session) is True


def test_set_pages_drops_stale_selection():
    editor = make_editor()
    editor.add_image(0, "a.png", image_id="a")
    editor.select_image(0, "a")
    editor.set_pages([Page(id="p0", role=PageRole.CHAPTER_BODY)])
    assert editor.selected is None
