#!/usr/bin/env python3
"""Tests for spread preview thumbnails."""

from PIL import Image

from core.layout.configuration import set_columns, set_split_type
from core.layout.models import Background, LayoutConfiguration, Page, PageRole, SplitType, default_layout
from core.layout.preview import SpreadPreviewGenerator, column_boxes, split_regions
from core.layout.spreads import SpreadNavigator


def test_split_regions():
    box = (0, 0, 100, 200)
    config = set_split_type(default_layout(), SplitType.HORIZONTAL, [25, 75])
    assert split_regions(config, box) == [(0, 0, 100, 50), (0, 50, 100, 200)]

    config = set_split_type(default_layout(), SplitType.QUADRANT)
    assert len(split_regions(config, box)) == 4
    assert split_regions(default_layout(), box) == [box]


def test_column_boxes_respect_gap():
    config = set_columns(default_layout(), 2)
    boxes = column_boxes(config, (0, 0, 110, 100), mm_to_px=1.0)
    assert boxes == [(0, 0, 50, 100), (60, 0, 110, 100)]


def test_render_spread_size_and_background(tmp_path):
    pages = [Page(id=f"p{i}", role=PageRole.CHAPTER_BODY) for i in range(4)]
    navigator = SpreadNavigator(pages)
    config = LayoutConfiguration(background=Background(color="#ff0000"), is_rtl=False)
    generator = SpreadPreviewGenerator(preview_size=(300, 200))

    image = generator.render_spread(config, navigator.get_spread(1))
    assert image.size == (300, 200)
    # A point inside the left page's top margin shows the background colour
    page_w, page_h, _ = generator._page_pixels()
    offset_x = (300 - page_w * 2) // 2
    offset_y = (200 - page_h) // 2
    assert image.getpixel((offset_x + 3, offset_y + 2)) == (255, 0, 0)

    path = generator.save_spread(config, navigator.get_spread(0), tmp_path / "out" / "cover.png")
    with Image.open(path) as saved:
        assert saved.format == "PNG"
        assert saved.size == (300, 200)
