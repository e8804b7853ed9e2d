"""
Background sub-editor.

Operations on the tagged :class:`Background` value. Switching kind only
changes the discriminant; each kind's slot is seeded with defaults the first
time it is selected and otherwise left alone.
"""

from dataclasses import replace
from typing import Optional

from PIL import ImageColor

from core.logging_config import LogManager

from .models import (
    Background,
    BackgroundKind,
    GradientFill,
    GradientKind,
    GradientStop,
    ImageFill,
    ImageFit,
    PatternFill,
    PatternKind,
    clamp,
)

logger = LogManager().get_logger("layout.background")

DEFAULT_SOLID_COLOR = "#ffffff"
NEW_STOP_COLOR = "#cccccc"
MIN_GRADIENT_STOPS = 2


def is_valid_color(value: Optional[str]) -> bool:
    """True if Pillow can parse ``value`` as a colour."""
    if not value or not isinstance(value, str):
        return False
    try:
        ImageColor.getrgb(value)
    except ValueError:
        return False
    return True


def _checked_color(new: str, previous: str) -> str:
    if is_valid_color(new):
        return new
    logger.warning(f"Ignoring invalid colour {new!r}, keeping {previous!r}")
    return previous


def switch_kind(background: Background, kind: BackgroundKind) -> Background:
    """
    Select a different background kind.

    Args:
        background: Current background
        kind: Kind to activate

    Returns:
        Background with ``kind`` active. Slots for the other kinds are kept
        as they were; the new kind's slot is seeded only if it was empty.
    """
    kind = BackgroundKind(kind)
    if kind == BackgroundKind.SOLID:
        return replace(background, kind=kind, color=background.color or DEFAULT_SOLID_COLOR)
    if kind == BackgroundKind.GRADIENT:
        return replace(background, kind=kind, gradient=background.gradient or GradientFill())
    if kind == BackgroundKind.PATTERN:
        return replace(background, kind=kind, pattern=background.pattern or PatternFill())
    return replace(background, kind=kind, image=background.image or ImageFill())


def set_solid_color(background: Background, color: str) -> Background:
    previous = background.color or DEFAULT_SOLID_COLOR
    return replace(background, color=_checked_color(color, previous))


def _gradient(background: Background) -> GradientFill:
    return background.gradient or GradientFill()


def update_gradient(
    background: Background,
    kind: Optional[GradientKind] = None,
    angle: Optional[float] = None,
) -> Background:
    gradient = _gradient(background)
    if kind is not None:
        gradient = replace(gradient, kind=GradientKind(kind))
    if angle is not None:
        gradient = replace(gradient, angle=float(angle) % 360)
    return replace(background, gradient=gradient)


def add_gradient_stop(background: Background) -> Background:
    """Append a grey stop halfway between the last stop and the end."""
    gradient = _gradient(background)
    last = max((stop.position for stop in gradient.stops), default=0.0)
    position = min(last / 2 + 25, 100.0)
    stops = gradient.stops + (GradientStop(NEW_STOP_COLOR, position),)
    return replace(background, gradient=replace(gradient, stops=stops))


def remove_gradient_stop(background: Background, index: int) -> Background:
    """Remove the stop at ``index``; a gradient keeps at least two stops."""
    gradient = _gradient(background)
    if len(gradient.stops) <= MIN_GRADIENT_STOPS:
        logger.debug("Gradient already has the minimum number of stops")
        return background
    if not 0 <= index < len(gradient.stops):
        logger.warning(f"Gradient stop index {index} out of range")
        return background
    stops = gradient.stops[:index] + gradient.stops[index + 1:]
    return replace(background, gradient=replace(gradient, stops=stops))


def update_gradient_stop(
    background: Background,
    index: int,
    color: Optional[str] = None,
    position: Optional[float] = None,
) -> Background:
    gradient = _gradient(background)
    if not 0 <= index < len(gradient.stops):
        logger.warning(f"Gradient stop index {index} out of range")
        return background

    stop = gradient.stops[index]
    if color is not None:
        stop = replace(stop, color=_checked_color(color, stop.color))
    if position is not None:
        stop = replace(stop, position=clamp(float(position), 0.0, 100.0))

    stops = gradient.stops[:index] + (stop,) + gradient.stops[index + 1:]
    return replace(background, gradient=replace(gradient, stops=stops))


def update_pattern(
    background: Background,
    kind: Optional[PatternKind] = None,
    color: Optional[str] = None,
    opacity: Optional[float] = None,
) -> Background:
    pattern = background.pattern or PatternFill()
    if kind is not None:
        pattern = replace(pattern, kind=PatternKind(kind))
    if color is not None:
        pattern = replace(pattern, color=_checked_color(color, pattern.color))
    if opacity is not None:
        pattern = replace(pattern, opacity=clamp(float(opacity), 0.0, 1.0))
    return replace(background, pattern=pattern)


def update_image(
    background: Background,
    url: Optional[str] = None,
    opacity: Optional[float] = None,
    fit: Optional[ImageFit] = None,
) -> Background:
    image = background.image or ImageFill()
    if url is not None:
        image = replace(image, url=url)
    if opacity is not None:
        image = replace(image, opacity=clamp(float(opacity), 0.0, 1.0))
    if fit is not None:
        image = replace(image, fit=ImageFit(fit))
    return replace(background, image=image)


def preview_color(background: Background) -> str:
    """Flat colour that best represents the active background.

    Used where only a single fill can be drawn, such as thumbnails.
    """
    if background.kind == BackgroundKind.GRADIENT and background.gradient and background.gradient.stops:
        first = min(background.gradient.stops, key=lambda stop: stop.position)
        return first.color if is_valid_color(first.color) else DEFAULT_SOLID_COLOR
    if background.color and is_valid_color(background.color):
        return background.color
    return DEFAULT_SOLID_COLOR
