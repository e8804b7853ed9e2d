#!/usr/bin/env python3
"""Tests for the background sub-editor."""

from core.layout.background import (
    add_gradient_stop,
    is_valid_color,
    preview_color,
    remove_gradient_stop,
    set_solid_color,
    switch_kind,
    update_gradient,
    update_gradient_stop,
    update_image,
    update_pattern,
)
from core.layout.models import (
    Background,
    BackgroundKind,
    GradientKind,
    ImageFit,
    PatternKind,
)


def test_color_validation():
    assert is_valid_color("#fff")
    assert is_valid_color("#1a2b3c")
    assert is_valid_color("red")
    assert not is_valid_color("not-a-colour")
    assert not is_valid_color("")
    assert not is_valid_color(None)


def test_invalid_solid_color_is_ignored():
    background = set_solid_color(Background(), "#123456")
    assert background.color == "#123456"
    assert set_solid_color(background, "bogus").color == "#123456"


def test_switch_kind_seeds_empty_slot_and_keeps_others():
    background = switch_kind(Background(), BackgroundKind.GRADIENT)
    assert background.kind == BackgroundKind.GRADIENT
    assert background.gradient is not None
    assert [stop.color for stop in background.gradient.stops] == ["#ffffff", "#f0f0f0"]

    background = update_gradient(background, angle=90)
    background = switch_kind(background, BackgroundKind.PATTERN)
    assert background.pattern is not None
    # Gradient edits survive switching away and back
    background = switch_kind(background, BackgroundKind.GRADIENT)
    assert background.gradient.angle == 90


def test_gradient_angle_wraps():
    background = update_gradient(Background(), kind=GradientKind.RADIAL, angle=450)
    assert background.gradient.kind == GradientKind.RADIAL
    assert background.gradient.angle == 90


def test_add_gradient_stop_position():
    background = switch_kind(Background(), BackgroundKind.GRADIENT)
    background = add_gradient_stop(background)
    stops = background.gradient.stops
    assert len(stops) == 3
    assert stops[-1].color == "#cccccc"
    # Last stop was at 100: 100 / 2 + 25 = 75
    assert stops[-1].position == 75


def test_gradient_keeps_two_stops():
    background = switch_kind(Background(), BackgroundKind.GRADIENT)
    assert remove_gradient_stop(background, 0) == background

    background = add_gradient_stop(background)
    background = remove_gradient_stop(background, 0)
    assert len(background.gradient.stops) == 2
    assert background.gradient.stops[0].color == "#f0f0f0"


def test_update_gradient_stop_clamps_position():
    background = switch_kind(Background(), BackgroundKind.GRADIENT)
    background = update_gradient_stop(background, 1, color="#000000", position=140)
    stop = background.gradient.stops[1]
    assert stop.color == "#000000"
    assert stop.position == 100
    # Out of range index is a no-op
    assert update_gradient_stop(background, 5, color="#ff0000") == background


def test_pattern_and_image_updates():
    background = update_pattern(Background(), kind=PatternKind.GRID, color="#abcdef", opacity=3)
    assert background.pattern.kind == PatternKind.GRID
    assert background.pattern.color == "#abcdef"
    assert background.pattern.opacity == 1.0

    background = update_image(background, url="https://example.org/paper.png", opacity=-1, fit=ImageFit.TILE)
    assert background.image.url == "https://example.org/paper.png"
    assert background.image.opacity == 0.0
    assert background.image.fit == ImageFit.TILE


def test_preview_color():
    assert preview_color(Background(color="#336699")) == "#336699"
    gradient = update_gradient_stop(switch_kind(Background(), BackgroundKind.GRADIENT), 0, color="#ff0000")
    assert preview_color(gradient) == "#ff0000"
    assert preview_color(Background(color=None)) == "#ffffff"


def test_serialized_image_fit_uses_position_key():
    background = update_image(switch_kind(Background(), BackgroundKind.IMAGE), url="a.png", fit="contain")
    data = background.to_dict()
    assert data["type"] == "image"
    assert data["image"]["position"] == "contain"
    assert Background.from_dict(data) == background
