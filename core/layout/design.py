"""
AI book design merge.

The design service returns a (possibly partial) design object with
``typography``, ``layout``, ``cover`` and ``imagePlacements`` sections. The
user opts into sections individually; only opted-in sections that are
present are merged, anything missing is skipped without error.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.logging_config import LogManager

from .canvas import clamp_placement, new_image_id
from .models import ImagePlacement, LayoutConfiguration, Margins, PageNumberPosition

logger = LogManager().get_logger("layout.design")


class SuggestionPosition(str, Enum):
    AFTER_PARAGRAPH = "after-paragraph"
    FULL_PAGE = "full-page"
    HALF_PAGE = "half-page"
    CHAPTER_HEADER = "chapter-header"


class SuggestionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {SuggestionPriority.HIGH: 0, SuggestionPriority.MEDIUM: 1, SuggestionPriority.LOW: 2}


def _float(value: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class FontSpec:
    family: str = ""
    size: Optional[float] = None
    weight: str = ""
    color: str = ""
    line_height: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["FontSpec"]:
        if not isinstance(data, dict):
            return None
        return cls(
            family=str(data.get("family") or ""),
            size=_float(data.get("size")),
            weight=str(data.get("weight") or ""),
            color=str(data.get("color") or ""),
            line_height=_float(data.get("lineHeight")),
        )


@dataclass(frozen=True)
class TypographyDesign:
    body_font: Optional[FontSpec] = None
    title_font: Optional[FontSpec] = None
    chapter_title_font: Optional[FontSpec] = None
    header_font: Optional[FontSpec] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypographyDesign":
        return cls(
            body_font=FontSpec.from_dict(data.get("bodyFont")),
            title_font=FontSpec.from_dict(data.get("titleFont")),
            chapter_title_font=FontSpec.from_dict(data.get("chapterTitleFont")),
            header_font=FontSpec.from_dict(data.get("headerFont")),
        )


@dataclass(frozen=True)
class LayoutDesign:
    margins: Optional[Dict[str, float]] = None  # top/bottom/inner/outer
    page_number_position: Optional[str] = None  # bottom-center/bottom-outside/top-outside/none
    page_number_start: Optional[int] = None
    chapter_start: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutDesign":
        margins = data.get("margins")
        numbers = data.get("pageNumbers") or {}
        start = _float(numbers.get("startFrom"))
        return cls(
            margins=dict(margins) if isinstance(margins, dict) else None,
            page_number_position=numbers.get("position"),
            page_number_start=None if start is None else int(start),
            chapter_start=str(data.get("chapterStart") or ""),
        )


@dataclass(frozen=True)
class CoverDesign:
    front_background: str = ""
    back_background: str = ""
    spine_background: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverDesign":
        front = (data.get("frontCover") or {}).get("background") or {}
        back = (data.get("backCover") or {}).get("background") or {}
        spine = data.get("spine") or {}
        return cls(
            front_background=str(front.get("value") or ""),
            back_background=str(back.get("value") or ""),
            spine_background=str(spine.get("background") or ""),
        )


@dataclass(frozen=True)
class ImageSuggestion:
    chapter_index: int
    position: SuggestionPosition = SuggestionPosition.AFTER_PARAGRAPH
    suggested_prompt: str = ""
    rationale: str = ""
    priority: SuggestionPriority = SuggestionPriority.MEDIUM
    paragraph_index: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["ImageSuggestion"]:
        chapter_index = _float(data.get("chapterIndex"))
        if chapter_index is None:
            logger.debug(f"Skipping image suggestion without chapterIndex: {data}")
            return None
        try:
            position = SuggestionPosition(data.get("position", SuggestionPosition.AFTER_PARAGRAPH.value))
        except ValueError:
            position = SuggestionPosition.AFTER_PARAGRAPH
        try:
            priority = SuggestionPriority(data.get("priority", SuggestionPriority.MEDIUM.value))
        except ValueError:
            priority = SuggestionPriority.MEDIUM
        paragraph = _float(data.get("paragraphIndex"))
        return cls(
            chapter_index=int(chapter_index),
            position=position,
            suggested_prompt=str(data.get("suggestedPrompt") or ""),
            rationale=str(data.get("rationale") or ""),
            priority=priority,
            paragraph_index=None if paragraph is None else int(paragraph),
        )


@dataclass(frozen=True)
class BookDesign:
    """Parsed design object. Every section is optional."""

    typography: Optional[TypographyDesign] = None
    layout: Optional[LayoutDesign] = None
    cover: Optional[CoverDesign] = None
    image_placements: Tuple[ImageSuggestion, ...] = ()
    overall_style: str = ""
    mood_description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookDesign":
        typography = data.get("typography")
        layout = data.get("layout")
        cover = data.get("cover")
        suggestions = [
            ImageSuggestion.from_dict(item)
            for item in data.get("imagePlacements") or []
            if isinstance(item, dict)
        ]
        return cls(
            typography=TypographyDesign.from_dict(typography) if isinstance(typography, dict) else None,
            layout=LayoutDesign.from_dict(layout) if isinstance(layout, dict) else None,
            cover=CoverDesign.from_dict(cover) if isinstance(cover, dict) else None,
            image_placements=tuple(s for s in suggestions if s is not None),
            overall_style=str(data.get("overallStyle") or ""),
            mood_description=str(data.get("moodDescription") or ""),
        )


@dataclass(frozen=True)
class DesignSelection:
    """Which design sections the user chose to apply."""

    typography: bool = True
    layout: bool = True
    cover: bool = True
    images: bool = True


@dataclass(frozen=True)
class CoverSettings:
    cover_color: str = ""
    text_color: str = ""
    font_family: str = ""
    image_url: Optional[str] = None
    back_color: str = ""
    spine_color: str = ""


@dataclass
class DesignMergeResult:
    configuration: LayoutConfiguration
    cover: Optional[CoverSettings] = None
    page_number_start: Optional[int] = None
    suggestions: List[ImageSuggestion] = field(default_factory=list)
    applied: List[str] = field(default_factory=list)


def _merge_typography(config: LayoutConfiguration, design: TypographyDesign) -> LayoutConfiguration:
    typography = config.typography
    body = design.body_font
    if body:
        typography = replace(
            typography,
            body_font=body.family or typography.body_font,
            body_font_size=body.size if body.size is not None else typography.body_font_size,
            line_height=body.line_height if body.line_height is not None else typography.line_height,
        )
    heading = design.chapter_title_font
    if heading:
        typography = replace(
            typography,
            heading_font=heading.family or typography.heading_font,
            heading_font_size=heading.size if heading.size is not None else typography.heading_font_size,
            heading_color=heading.color or typography.heading_color,
        )
    config = replace(config, typography=typography)

    header_font = design.header_font
    if header_font and header_font.family:
        config = replace(
            config,
            header=replace(config.header, style=replace(config.header.style, font_family=header_font.family)),
            footer=replace(config.footer, style=replace(config.footer.style, font_family=header_font.family)),
        )
    return config


def _page_number_position(position: str, is_rtl: bool) -> Optional[PageNumberPosition]:
    """Map the design's outside/center vocabulary onto a fixed position."""
    outside_bottom = PageNumberPosition.BOTTOM_LEFT if is_rtl else PageNumberPosition.BOTTOM_RIGHT
    outside_top = PageNumberPosition.TOP_LEFT if is_rtl else PageNumberPosition.TOP_RIGHT
    return {
        "bottom-center": PageNumberPosition.BOTTOM_CENTER,
        "bottom-outside": outside_bottom,
        "top-outside": outside_top,
    }.get(position)


def _merge_layout(config: LayoutConfiguration, design: LayoutDesign) -> LayoutConfiguration:
    if design.margins:
        current = config.margins
        config = replace(config, margins=Margins(
            top=max(0.0, _float(design.margins.get("top"), current.top)),
            bottom=max(0.0, _float(design.margins.get("bottom"), current.bottom)),
            left=max(0.0, _float(design.margins.get("inner"), current.left)),
            right=max(0.0, _float(design.margins.get("outer"), current.right)),
        ))

    if design.page_number_position == "none":
        config = replace(config, show_page_number=False)
    elif design.page_number_position:
        position = _page_number_position(design.page_number_position, config.is_rtl)
        if position is None:
            logger.warning(f"Unknown page number position '{design.page_number_position}'")
        else:
            config = replace(config, show_page_number=True, page_number_position=position)
    return config


def rank_suggestions(suggestions) -> List[ImageSuggestion]:
    """High priority first; original order within a priority."""
    return sorted(suggestions, key=lambda s: PRIORITY_ORDER[s.priority])


def merge_design(
    config: LayoutConfiguration,
    design: BookDesign,
    selection: DesignSelection = DesignSelection(),
    cover_image_url: Optional[str] = None,
) -> DesignMergeResult:
    """
    Merge the selected sections of ``design`` into ``config``.

    Args:
        config: Current layout configuration
        design: Parsed design object
        selection: Sections the user opted into
        cover_image_url: Generated cover image, if any

    Returns:
        DesignMergeResult with the new configuration and side outputs
    """
    result = DesignMergeResult(configuration=config)

    if selection.typography:
        if design.typography is None:
            logger.debug("Design has no typography section, skipping")
        else:
            result.configuration = _merge_typography(result.configuration, design.typography)
            result.applied.append("typography")

    if selection.layout:
        if design.layout is None:
            logger.debug("Design has no layout section, skipping")
        else:
            result.configuration = _merge_layout(result.configuration, design.layout)
            result.page_number_start = design.layout.page_number_start
            result.applied.append("layout")

    if selection.cover:
        if design.cover is None:
            logger.debug("Design has no cover section, skipping")
        else:
            title_font = design.typography.title_font if design.typography else None
            result.cover = CoverSettings(
                cover_color=design.cover.front_background,
                text_color=title_font.color if title_font else "",
                font_family=title_font.family if title_font else "",
                image_url=cover_image_url,
                back_color=design.cover.back_background,
                spine_color=design.cover.spine_background,
            )
            result.applied.append("cover")

    if selection.images and design.image_placements:
        result.suggestions = rank_suggestions(design.image_placements)
        result.applied.append("images")

    logger.info(f"Merged design sections: {', '.join(result.applied) or 'none'}")
    return result


def placement_for_suggestion(suggestion: ImageSuggestion, url: str) -> ImagePlacement:
    """Initial geometry for an image generated from a suggestion."""
    full_page = suggestion.position == SuggestionPosition.FULL_PAGE
    return clamp_placement(ImagePlacement(
        id=new_image_id(),
        url=url,
        x=10.0,
        y=10.0 if full_page or suggestion.position == SuggestionPosition.CHAPTER_HEADER else 50.0,
        width=80.0 if full_page else 40.0,
        height=60.0 if full_page else 30.0,
    ))
