#!/usr/bin/env python3
"""Tests for layout configuration editing and serialization."""

import pytest

from core.layout.configuration import (
    QUADRANT_RATIO,
    normalize_split,
    reset_layout,
    set_column_gap,
    set_columns,
    set_margins,
    set_page_numbers,
    set_rtl,
    set_split_ratio,
    set_split_type,
    update_layout,
)
from core.layout.models import (
    BackgroundKind,
    LayoutConfiguration,
    Margins,
    PageNumberPosition,
    SplitType,
    default_layout,
)


def test_default_profile():
    config = default_layout()
    assert config.split_type == SplitType.NONE
    assert config.split_ratio == ()
    assert config.columns == 1
    assert config.column_gap == 10
    assert config.is_rtl is True
    assert config.show_page_number is True
    assert config.page_number_position == PageNumberPosition.BOTTOM_CENTER
    assert config.background.kind == BackgroundKind.SOLID
    assert config.background.color == "#ffffff"
    assert config.margins == Margins(top=25, bottom=25, left=20, right=20)
    assert config.header.style.show_on_first_page is False
    assert config.header.style.border_bottom is True
    assert config.footer.content.center == "— {pageNumber} —"
    assert config.footer.style.border_top is True


def test_split_ratio_always_sums_to_100():
    config = set_split_type(default_layout(), SplitType.VERTICAL)
    assert config.split_ratio == (50.0, 50.0)

    for first in (0, 20, 33.5, 80, 100):
        updated = set_split_ratio(config, first)
        assert sum(updated.split_ratio) == pytest.approx(100.0)
        assert updated.split_ratio[0] == pytest.approx(first)


def test_split_ratio_is_clamped():
    config = set_split_type(default_layout(), SplitType.HORIZONTAL)
    assert set_split_ratio(config, 150).split_ratio == (100.0, 0.0)
    assert set_split_ratio(config, -20).split_ratio == (0.0, 100.0)


def test_quadrant_ratio_is_fixed():
    config = set_split_type(default_layout(), SplitType.QUADRANT, ratio=[70, 30])
    assert config.split_ratio == QUADRANT_RATIO
    # Moving the divider has no effect on a quadrant split
    assert set_split_ratio(config, 10).split_ratio == QUADRANT_RATIO


def test_split_type_keeps_previous_first_share():
    config = set_split_type(default_layout(), SplitType.VERTICAL, ratio=[60, 40])
    config = set_split_type(config, SplitType.HORIZONTAL)
    assert config.split_ratio == (60.0, 40.0)


def test_no_split_has_empty_ratio():
    config = set_split_type(default_layout(), SplitType.VERTICAL, ratio=[70, 30])
    assert set_split_type(config, SplitType.NONE).split_ratio == ()
    assert normalize_split(SplitType.NONE, [10, 90]) == ()


def test_columns_are_clamped():
    config = default_layout()
    assert set_columns(config, 0).columns == 1
    assert set_columns(config, 3).columns == 3
    assert set_columns(config, 9).columns == 4
    assert set_column_gap(config, -5).column_gap == 0.0


def test_margins_never_negative():
    config = set_margins(default_layout(), Margins(top=-1, bottom=10, left=-30, right=5))
    assert config.margins == Margins(top=0, bottom=10, left=0, right=5)


def test_setters_do_not_mutate_input():
    config = default_layout()
    set_columns(config, 3)
    set_rtl(config, False)
    assert config == default_layout()


def test_update_layout_normalizes_and_rejects_unknown_fields():
    config = update_layout(default_layout(), split_type="vertical", split_ratio=(30, 30), columns=7)
    assert config.split_type == SplitType.VERTICAL
    assert config.split_ratio == (30.0, 70.0)
    assert config.columns == 4

    with pytest.raises(TypeError):
        update_layout(default_layout(), colour="red")


def test_page_numbers():
    config = set_page_numbers(default_layout(), False)
    assert config.show_page_number is False
    assert config.page_number_position == PageNumberPosition.BOTTOM_CENTER

    config = set_page_numbers(config, True, "top-right")
    assert config.show_page_number is True
    assert config.page_number_position == PageNumberPosition.TOP_RIGHT


def test_reset_restores_defaults():
    config = set_columns(set_rtl(default_layout(), False), 2)
    assert reset_layout() == default_layout()
    assert reset_layout() != config


def test_from_dict_merges_partial_sections_over_defaults():
    config = LayoutConfiguration.from_dict({
        "splitType": "horizontal",
        "splitRatio": [70, 10],
        "columns": 2,
        "header": {"content": {"right": "{chapter}"}},
        "margins": {"top": 30},
    })
    assert config.split_ratio == (70.0, 30.0)
    assert config.columns == 2
    assert config.header.content.right == "{chapter}"
    # Style not given, so the default header style survives
    assert config.header.style.show_on_first_page is False
    assert config.margins.top == 30
    assert config.margins.left == 20


def test_to_dict_uses_wire_keys():
    data = set_split_type(default_layout(), SplitType.VERTICAL).to_dict()
    assert data["splitType"] == "vertical"
    assert data["splitRatio"] == [50.0, 50.0]
    assert data["isRTL"] is True
    assert data["pageNumberPosition"] == "bottom-center"
    assert data["background"] == {"type": "solid", "color": "#ffffff"}
    assert LayoutConfiguration.from_dict(data) == set_split_type(default_layout(), SplitType.VERTICAL)
