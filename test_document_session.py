#!/usr/bin/env python3
"""Tests for the layout editing session."""

import pytest

from core.layout import background as background_ops
from core.layout.design import BookDesign
from core.layout.document import LayoutSession
from core.layout.errors import TemplateError
from core.layout.models import BackgroundKind, Manuscript, PageRole, PaginationFlags, SplitType
from core.layout.pagination import chapter_page_index, role_sequence

CONTAINER = (500.0, 700.0)


def make_session(chapters=3, **kwargs):
    manuscript = Manuscript.from_dict({
        "title": "Harbour Lights",
        "author": {"name": "N. Amir"},
        "synopsis": "Boats come home.",
        "chapters": [{"title": f"Chapter {i + 1}", "content": f"<p>{i}</p>"} for i in range(chapters)],
    })
    return LayoutSession(manuscript, **kwargs)


def test_new_session_is_clean():
    session = make_session()
    assert len(session.pages) == 8
    assert session.spread_count() == 5
    assert session.is_dirty() is False
    assert session.can_undo() is False


def test_configuration_edit_is_undoable():
    session = make_session()
    assert session.set_columns(3) is True
    assert session.configuration.columns == 3
    assert session.is_dirty()

    assert session.undo() is True
    assert session.configuration.columns == 1
    assert session.is_dirty() is False

    assert session.redo() is True
    assert session.configuration.columns == 3


def test_unchanged_edit_adds_no_history():
    session = make_session()
    assert session.set_columns(1) is False
    assert session.set_split_ratio(40) is False  # no split configured
    assert len(session.history) == 1


def test_background_editing():
    session = make_session()
    session.switch_background_kind(BackgroundKind.GRADIENT)
    session.edit_background(background_ops.add_gradient_stop)
    assert len(session.configuration.background.gradient.stops) == 3
    session.undo()
    assert len(session.configuration.background.gradient.stops) == 2


def test_split_and_preset():
    session = make_session()
    session.set_split_type(SplitType.VERTICAL, [70, 30])
    session.set_split_ratio(45)
    assert session.configuration.split_ratio == (45.0, 55.0)
    session.apply_header_footer_preset("none")
    assert session.configuration.header.enabled is False
    assert session.configuration.footer.enabled is False


def test_templates():
    session = make_session()
    assert session.apply_template("academic") is True
    assert session.configuration.columns == 2
    with pytest.raises(TemplateError):
        session.apply_template("missing")
    session.reset_layout()
    assert session.configuration.columns == 1
    assert session.can_undo()


def test_drag_records_single_history_entry():
    session = make_session()
    placement = session.add_image(4, "boat.png")
    entries = len(session.history)

    session.begin_drag(4, placement.id, (100, 100))
    for step in range(1, 6):
        session.move_pointer((100 + step * 10, 100), CONTAINER)
    # Live canvas already shows the move, history does not
    assert session.pages[4].images[0].x == pytest.approx(placement.x + 10)
    assert len(session.history) == entries

    assert session.end_gesture() is True
    assert len(session.history) == entries + 1

    session.undo()
    assert session.pages[4].images[0] == placement


def test_gesture_without_movement_records_nothing():
    session = make_session()
    placement = session.add_image(4, "boat.png")
    entries = len(session.history)
    session.begin_resize(4, placement.id, (0, 0))
    assert session.end_gesture() is False
    assert len(session.history) == entries


def test_image_operations():
    session = make_session()
    placement = session.add_image(4, "boat.png", x=90, width=30)
    assert placement.x == 70

    session.rotate_image(4, placement.id, 15)
    session.update_image(4, placement.id, width=200)
    image = session.pages[4].find_image(placement.id)
    assert image.rotation == 15
    assert image.width == 100 and image.x == 0

    assert session.delete_image(4, placement.id) is True
    assert session.pages[4].images == ()
    assert session.delete_image(4, placement.id) is False
    assert session.add_image(99, "x.png") is None


def test_page_operations():
    session = make_session()
    session.insert_blank_page(4)
    assert len(session.pages) == 9
    assert session.pages[5].role == PageRole.BLANK
    assert session.remove_page(0) is False
    assert session.remove_page(5) is True
    assert len(session.pages) == 8


def test_toggle_toc_keeps_images():
    session = make_session()
    placement = session.add_image(4, "boat.png")
    session.toggle_table_of_contents()

    assert session.flags.include_toc is False
    assert PageRole.TABLE_OF_CONTENTS not in role_sequence(session.pages)
    index = chapter_page_index(session.pages, 0)
    assert session.pages[index].images == (placement,)

    session.undo()
    assert session.flags.include_toc is True
    assert len(session.pages) == 8


def test_toggle_back_cover():
    session = make_session()
    session.toggle_back_cover()
    assert role_sequence(session.pages)[-1] == PageRole.CHAPTER_BODY
    session.toggle_back_cover()
    assert role_sequence(session.pages)[-1] == PageRole.BACK_COVER_SUMMARY


def test_design_and_suggested_image():
    session = make_session()
    design = BookDesign.from_dict({
        "typography": {"bodyFont": {"family": "Alef", "size": 13}},
        "imagePlacements": [{"chapterIndex": 1, "position": "chapter-header", "priority": "high"}],
    })
    result = session.apply_design(design)
    assert session.configuration.typography.body_font == "Alef"

    placement = session.place_suggested_image(result.suggestions[0], "generated.png")
    page = session.pages[chapter_page_index(session.pages, 1)]
    assert page.images == (placement,)
    assert (placement.x, placement.y) == (10, 10)

    missing = BookDesign.from_dict({"imagePlacements": [{"chapterIndex": 7}]}).image_placements[0]
    assert session.place_suggested_image(missing, "x.png") is None


def test_navigation_follows_rtl():
    session = make_session()
    assert session.configuration.is_rtl is True
    session.go_to_spread(2)
    assert session.on_arrow_key("ArrowRight") == 1

    session.set_rtl(False)
    assert session.on_arrow_key("ArrowRight") == 2


def test_render_model():
    session = make_session()
    session.apply_header_footer_preset("classic")
    model = session.render_model(3)

    assert model["label"] == "pages 5-6"
    assert model["isRTL"] is True
    # RTL: first page in reading order is on the right
    assert model["right"]["index"] == 4
    assert model["left"]["index"] == 5
    assert model["right"]["role"] == "chapter"
    assert model["right"]["header"]["right"] == "Chapter 1"
    assert model["left"]["header"]["right"] == "Chapter 2"
    assert model["right"]["footer"]["center"] == "— 5 —"
    assert model["configuration"]["columns"] == 1

    cover = session.render_model(0)
    assert cover["label"] == "cover"
    assert cover["left"] is None and cover["right"] is None


def test_listeners_and_mark_saved():
    session = make_session()
    calls = []
    session.add_listener(lambda: calls.append(1))
    session.set_columns(2)
    session.undo()
    session.redo()
    assert len(calls) == 3

    session.mark_saved()
    assert session.is_dirty() is False
    assert session.render_model()["dirty"] is False


def test_from_state_restores_pages():
    session = make_session()
    session.add_image(4, "boat.png")
    restored = LayoutSession.from_state(session.manuscript, session.state)
    assert restored.state == session.state
    assert restored.is_dirty() is False


def test_history_limit():
    session = make_session(history_limit=3)
    for columns in (2, 3, 4, 1, 2):
        session.set_columns(columns)
    assert len(session.history) == 3


def drag_right(session, page_index, placement, pixels=50):
    session.begin_drag(page_index, placement.id, (100, 100))
    session.move_pointer((100 + pixels, 100), CONTAINER)


def test_undo_during_drag_records_then_reverts_it():
    placed = make_session()
    placement = placed.add_image(4, "boat.png")
    session = LayoutSession.from_state(placed.manuscript, placed.state)
    assert session.can_undo() is False

    drag_right(session, 4, placement)
    assert session.undo() is True
    assert session.pages == session.state.pages
    assert session.pages[4].images[0] == placement
    assert session.is_dirty() is False

    assert session.redo() is True
    assert session.pages[4].images[0].x == pytest.approx(placement.x + 10)
    assert session.pages == session.state.pages
    assert session.is_dirty()


def test_redo_during_drag_keeps_the_drag():
    session = make_session()
    placement = session.add_image(4, "boat.png")
    session.set_columns(2)
    session.undo()

    drag_right(session, 4, placement)
    assert session.redo() is False
    assert session.can_redo() is False
    assert session.configuration.columns == 1
    assert session.state.pages[4].images[0].x == pytest.approx(placement.x + 10)
    assert session.pages == session.state.pages


def test_configuration_edit_during_drag_keeps_the_drag():
    session = make_session()
    placement = session.add_image(4, "boat.png")
    entries = len(session.history)

    drag_right(session, 4, placement)
    assert session.set_columns(2) is True
    assert len(session.history) == entries + 2
    assert session.state.pages[4].images[0].x == pytest.approx(placement.x + 10)
    assert session.pages == session.state.pages

    session.undo()
    assert session.configuration.columns == 1
    assert session.pages[4].images[0].x == pytest.approx(placement.x + 10)
    session.undo()
    assert session.pages[4].images[0] == placement


def test_last_chapter_visible_without_back_cover():
    session = make_session(flags=PaginationFlags(include_back_cover=False))
    assert len(session.pages) == 7
    assert session.spread_count() == 5
    assert session.go_to_spread(99) == 4

    model = session.render_model()
    assert model["label"] == "page 7"
    assert model["right"]["index"] == 6
    assert model["right"]["role"] == "chapter"
    assert model["left"]["index"] is None
    assert model["left"]["role"] == "blank"
