"""
Layout configuration editing.

Each setter takes the current :class:`LayoutConfiguration` and returns a new
one; the input is never modified. Out-of-range values are clamped into the
valid range instead of being rejected, so every value a setter returns
satisfies the configuration invariants:

* a two-way split ratio always sums to 100
* a quadrant split is always ``(50, 50, 50, 50)``
* columns stay within 1-4, gaps, margins and band heights stay >= 0
"""

from dataclasses import replace
from typing import Any, Optional, Sequence, Tuple

from core.constants import MAX_COLUMNS, MIN_COLUMNS
from core.logging_config import LogManager

from .models import (
    Background,
    HeaderFooterConfig,
    LayoutConfiguration,
    Margins,
    PageNumberPosition,
    SplitType,
    Typography,
    clamp,
    default_layout,
)

logger = LogManager().get_logger("layout.configuration")

QUADRANT_RATIO: Tuple[float, ...] = (50.0, 50.0, 50.0, 50.0)
DEFAULT_SPLIT_FIRST = 50.0


def normalize_split(split_type: SplitType, ratio: Optional[Sequence[float]] = None) -> Tuple[float, ...]:
    """
    Return the split ratio that ``split_type`` allows.

    Args:
        split_type: Page split being configured
        ratio: Requested ratio; only its first value is honoured for
               two-way splits

    Returns:
        ``()`` for no split, ``(r, 100 - r)`` for horizontal/vertical splits,
        and the fixed quarter ratio for quadrant splits
    """
    if split_type == SplitType.NONE:
        return ()
    if split_type == SplitType.QUADRANT:
        return QUADRANT_RATIO

    first = DEFAULT_SPLIT_FIRST
    if ratio:
        first = clamp(float(ratio[0]), 0.0, 100.0)
    return (first, 100.0 - first)


def normalize(config: LayoutConfiguration) -> LayoutConfiguration:
    """Clamp every numeric field of ``config`` back into range."""
    return replace(
        config,
        split_ratio=normalize_split(config.split_type, config.split_ratio),
        columns=int(clamp(int(config.columns), MIN_COLUMNS, MAX_COLUMNS)),
        column_gap=max(0.0, float(config.column_gap)),
        margins=_clamp_margins(config.margins),
        header=_clamp_band(config.header),
        footer=_clamp_band(config.footer),
    )


def _clamp_margins(margins: Margins) -> Margins:
    return Margins(
        top=max(0.0, float(margins.top)),
        bottom=max(0.0, float(margins.bottom)),
        left=max(0.0, float(margins.left)),
        right=max(0.0, float(margins.right)),
    )


def _clamp_band(band: HeaderFooterConfig) -> HeaderFooterConfig:
    if band.height >= 0:
        return band
    return replace(band, height=0.0)


def update_layout(config: LayoutConfiguration, **changes: Any) -> LayoutConfiguration:
    """Shallow-merge ``changes`` into ``config`` and re-apply the invariants."""
    unknown = set(changes) - set(LayoutConfiguration.__dataclass_fields__)
    if unknown:
        raise TypeError(f"Unknown layout fields: {', '.join(sorted(unknown))}")

    split_type = changes.get("split_type")
    if split_type is not None and not isinstance(split_type, SplitType):
        changes["split_type"] = SplitType(split_type)
    position = changes.get("page_number_position")
    if position is not None and not isinstance(position, PageNumberPosition):
        changes["page_number_position"] = PageNumberPosition(position)

    return normalize(replace(config, **changes))


def set_columns(config: LayoutConfiguration, columns: int) -> LayoutConfiguration:
    value = int(clamp(int(columns), MIN_COLUMNS, MAX_COLUMNS))
    if value != columns:
        logger.debug(f"Column count {columns} clamped to {value}")
    return replace(config, columns=value)


def set_column_gap(config: LayoutConfiguration, gap: float) -> LayoutConfiguration:
    return replace(config, column_gap=max(0.0, float(gap)))


def set_split_type(
    config: LayoutConfiguration,
    split_type: SplitType,
    ratio: Optional[Sequence[float]] = None,
) -> LayoutConfiguration:
    """
    Change the page split.

    Args:
        config: Current configuration
        split_type: New split type
        ratio: Optional ratio; when omitted the previous first value is kept

    Returns:
        New configuration. Quadrant always gets equal quarters.
    """
    split_type = SplitType(split_type)
    if ratio is None:
        ratio = config.split_ratio
    return replace(config, split_type=split_type, split_ratio=normalize_split(split_type, ratio))


def set_split_ratio(config: LayoutConfiguration, first: float) -> LayoutConfiguration:
    """Move the split divider; the second share is always ``100 - first``."""
    if config.split_type in (SplitType.NONE, SplitType.QUADRANT):
        logger.debug(f"Split ratio ignored for split type {config.split_type.value}")
        return config
    return replace(config, split_ratio=normalize_split(config.split_type, [first]))


def set_header(config: LayoutConfiguration, header: HeaderFooterConfig) -> LayoutConfiguration:
    return replace(config, header=_clamp_band(header))


def set_footer(config: LayoutConfiguration, footer: HeaderFooterConfig) -> LayoutConfiguration:
    return replace(config, footer=_clamp_band(footer))


def set_background(config: LayoutConfiguration, background: Background) -> LayoutConfiguration:
    return replace(config, background=background)


def set_margins(config: LayoutConfiguration, margins: Margins) -> LayoutConfiguration:
    return replace(config, margins=_clamp_margins(margins))


def set_typography(config: LayoutConfiguration, typography: Typography) -> LayoutConfiguration:
    return replace(config, typography=typography)


def set_rtl(config: LayoutConfiguration, is_rtl: bool) -> LayoutConfiguration:
    return replace(config, is_rtl=bool(is_rtl))


def set_page_numbers(
    config: LayoutConfiguration,
    show: bool,
    position: Optional[PageNumberPosition] = None,
) -> LayoutConfiguration:
    position = config.page_number_position if position is None else PageNumberPosition(position)
    return replace(config, show_page_number=bool(show), page_number_position=position)


def reset_layout() -> LayoutConfiguration:
    """Configuration that ``reset`` restores."""
    return default_layout()
