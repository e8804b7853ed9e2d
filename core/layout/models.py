"""
Data models for the book layout module.

Defines the value types shared by the configuration editors, pagination,
the freeform image canvas and the spread navigator. Every type is a frozen
dataclass so a snapshot pushed into the undo history can never be changed
behind its back; edits produce new values with ``dataclasses.replace``.

Serialized form uses the camelCase keys of the book JSON exchanged with the
web editor (``splitType``, ``columnGap``, ``isRTL`` ...).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.constants import (
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_IMAGE_X,
    DEFAULT_IMAGE_Y,
    MAX_COLUMNS,
    MIN_COLUMNS,
    MIN_IMAGE_SIZE,
)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


def _number(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


class SplitType(str, Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    QUADRANT = "quadrant"


class BackgroundKind(str, Enum):
    SOLID = "solid"
    GRADIENT = "gradient"
    PATTERN = "pattern"
    IMAGE = "image"


class GradientKind(str, Enum):
    LINEAR = "linear"
    RADIAL = "radial"


class PatternKind(str, Enum):
    DOTS = "dots"
    LINES = "lines"
    GRID = "grid"
    CUSTOM = "custom"


class ImageFit(str, Enum):
    COVER = "cover"
    CONTAIN = "contain"
    TILE = "tile"


class PageNumberPosition(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class PageRole(str, Enum):
    """Role of a generated page within the book sequence."""

    TITLE = "title"
    BLANK = "blank"
    TABLE_OF_CONTENTS = "toc"
    CHAPTER_BODY = "chapter"
    BACK_COVER_SUMMARY = "summary"


# Background


@dataclass(frozen=True)
class GradientStop:
    color: str
    position: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {"color": self.color, "position": self.position}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradientStop":
        return cls(
            color=str(data.get("color", "#ffffff")),
            position=clamp(_number(data.get("position"), 0.0), 0.0, 100.0),
        )


def _default_stops() -> Tuple[GradientStop, ...]:
    return (GradientStop("#ffffff", 0.0), GradientStop("#f0f0f0", 100.0))


@dataclass(frozen=True)
class GradientFill:
    kind: GradientKind = GradientKind.LINEAR
    angle: Optional[float] = 180.0
    stops: Tuple[GradientStop, ...] = field(default_factory=_default_stops)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.kind.value,
            "colors": [stop.to_dict() for stop in self.stops],
        }
        if self.angle is not None:
            data["angle"] = self.angle
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradientFill":
        stops = tuple(GradientStop.from_dict(s) for s in data.get("colors", []) if isinstance(s, dict))
        angle = data.get("angle")
        return cls(
            kind=_enum(GradientKind, data.get("type"), GradientKind.LINEAR),
            angle=None if angle is None else _number(angle, 180.0),
            stops=stops or _default_stops(),
        )


@dataclass(frozen=True)
class PatternFill:
    kind: PatternKind = PatternKind.DOTS
    color: str = "#e0e0e0"
    opacity: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "color": self.color, "opacity": self.opacity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternFill":
        return cls(
            kind=_enum(PatternKind, data.get("type"), PatternKind.DOTS),
            color=str(data.get("color", "#e0e0e0")),
            opacity=clamp(_number(data.get("opacity"), 0.5), 0.0, 1.0),
        )


@dataclass(frozen=True)
class ImageFill:
    url: str = ""
    opacity: float = 0.3
    fit: ImageFit = ImageFit.COVER

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "opacity": self.opacity, "position": self.fit.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageFill":
        return cls(
            url=str(data.get("url", "")),
            opacity=clamp(_number(data.get("opacity"), 0.3), 0.0, 1.0),
            fit=_enum(ImageFit, data.get("position"), ImageFit.COVER),
        )


@dataclass(frozen=True)
class Background:
    """Tagged background: ``kind`` selects which slot is active.

    Slots for inactive kinds are retained so switching back and forth in
    the editor does not lose what the user entered.
    """

    kind: BackgroundKind = BackgroundKind.SOLID
    color: Optional[str] = "#ffffff"
    gradient: Optional[GradientFill] = None
    pattern: Optional[PatternFill] = None
    image: Optional[ImageFill] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind.value}
        if self.color is not None:
            data["color"] = self.color
        if self.gradient is not None:
            data["gradient"] = self.gradient.to_dict()
        if self.pattern is not None:
            data["pattern"] = self.pattern.to_dict()
        if self.image is not None:
            data["image"] = self.image.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Background":
        gradient = data.get("gradient")
        pattern = data.get("pattern")
        image = data.get("image")
        return cls(
            kind=_enum(BackgroundKind, data.get("type"), BackgroundKind.SOLID),
            color=data.get("color"),
            gradient=GradientFill.from_dict(gradient) if isinstance(gradient, dict) else None,
            pattern=PatternFill.from_dict(pattern) if isinstance(pattern, dict) else None,
            image=ImageFill.from_dict(image) if isinstance(image, dict) else None,
        )


# Page furniture


@dataclass(frozen=True)
class Margins:
    top: float = 25.0
    bottom: float = 25.0
    left: float = 20.0
    right: float = 20.0

    def to_dict(self) -> Dict[str, Any]:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Margins":
        base = cls()
        return cls(
            top=max(0.0, _number(data.get("top"), base.top)),
            bottom=max(0.0, _number(data.get("bottom"), base.bottom)),
            left=max(0.0, _number(data.get("left"), base.left)),
            right=max(0.0, _number(data.get("right"), base.right)),
        )


@dataclass(frozen=True)
class Typography:
    body_font: str = "David Libre"
    body_font_size: float = 12.0
    line_height: float = 1.6
    text_color: str = "#1a1a1a"
    heading_font: str = "David Libre"
    heading_font_size: float = 24.0
    heading_color: str = "#000000"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bodyFont": self.body_font,
            "bodyFontSize": self.body_font_size,
            "lineHeight": self.line_height,
            "textColor": self.text_color,
            "headingFont": self.heading_font,
            "headingFontSize": self.heading_font_size,
            "headingColor": self.heading_color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Typography":
        base = cls()
        return cls(
            body_font=str(data.get("bodyFont", base.body_font)),
            body_font_size=_number(data.get("bodyFontSize"), base.body_font_size),
            line_height=_number(data.get("lineHeight"), base.line_height),
            text_color=str(data.get("textColor", base.text_color)),
            heading_font=str(data.get("headingFont", base.heading_font)),
            heading_font_size=_number(data.get("headingFontSize"), base.heading_font_size),
            heading_color=str(data.get("headingColor", base.heading_color)),
        )


@dataclass(frozen=True)
class HeaderFooterContent:
    left: str = ""
    center: str = ""
    right: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"left": self.left, "center": self.center, "right": self.right}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeaderFooterContent":
        return cls(
            left=str(data.get("left") or ""),
            center=str(data.get("center") or ""),
            right=str(data.get("right") or ""),
        )


@dataclass(frozen=True)
class HeaderFooterStyle:
    font_family: str = "David Libre"
    font_size: float = 10.0
    text_color: str = "#666666"
    background_color: Optional[str] = None
    border_top: bool = False
    border_bottom: bool = False
    show_on_first_page: bool = True
    show_on_odd_pages: bool = True
    show_on_even_pages: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "fontFamily": self.font_family,
            "fontSize": self.font_size,
            "textColor": self.text_color,
            "borderTop": self.border_top,
            "borderBottom": self.border_bottom,
            "showOnFirstPage": self.show_on_first_page,
            "showOnOddPages": self.show_on_odd_pages,
            "showOnEvenPages": self.show_on_even_pages,
        }
        if self.background_color is not None:
            data["backgroundColor"] = self.background_color
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeaderFooterStyle":
        base = cls()
        return cls(
            font_family=str(data.get("fontFamily", base.font_family)),
            font_size=_number(data.get("fontSize"), base.font_size),
            text_color=str(data.get("textColor", base.text_color)),
            background_color=data.get("backgroundColor") or None,
            border_top=bool(data.get("borderTop", False)),
            border_bottom=bool(data.get("borderBottom", False)),
            show_on_first_page=bool(data.get("showOnFirstPage", True)),
            show_on_odd_pages=bool(data.get("showOnOddPages", True)),
            show_on_even_pages=bool(data.get("showOnEvenPages", True)),
        )


@dataclass(frozen=True)
class HeaderFooterConfig:
    enabled: bool = True
    height: float = 15.0  # mm
    content: HeaderFooterContent = field(default_factory=HeaderFooterContent)
    style: HeaderFooterStyle = field(default_factory=HeaderFooterStyle)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "height": self.height,
            "content": self.content.to_dict(),
            "style": self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["HeaderFooterConfig"] = None) -> "HeaderFooterConfig":
        base = base or cls()
        content = data.get("content")
        style = data.get("style")
        return cls(
            enabled=bool(data.get("enabled", base.enabled)),
            height=max(0.0, _number(data.get("height"), base.height)),
            content=HeaderFooterContent.from_dict(content) if isinstance(content, dict) else base.content,
            style=HeaderFooterStyle.from_dict(style) if isinstance(style, dict) else base.style,
        )


def default_header() -> HeaderFooterConfig:
    """Running head: hidden on the opening page, rule underneath."""
    return HeaderFooterConfig(
        enabled=True,
        height=15.0,
        content=HeaderFooterContent(),
        style=HeaderFooterStyle(border_bottom=True, show_on_first_page=False),
    )


def default_footer() -> HeaderFooterConfig:
    """Folio line: centred page number between dashes, rule above."""
    return HeaderFooterConfig(
        enabled=True,
        height=15.0,
        content=HeaderFooterContent(center="— {pageNumber} —"),
        style=HeaderFooterStyle(border_top=True, show_on_first_page=True),
    )


@dataclass(frozen=True)
class LayoutConfiguration:
    """How a single page looks. Defaults form the standard book profile."""

    name: str = "Default Layout"
    description: str = "Standard page layout"
    split_type: SplitType = SplitType.NONE
    split_ratio: Tuple[float, ...] = ()
    columns: int = 1
    column_gap: float = 10.0  # mm
    header: HeaderFooterConfig = field(default_factory=default_header)
    footer: HeaderFooterConfig = field(default_factory=default_footer)
    background: Background = field(default_factory=Background)
    margins: Margins = field(default_factory=Margins)
    typography: Typography = field(default_factory=Typography)
    is_rtl: bool = True
    show_page_number: bool = True
    page_number_position: PageNumberPosition = PageNumberPosition.BOTTOM_CENTER

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "splitType": self.split_type.value,
            "columns": self.columns,
            "columnGap": self.column_gap,
            "header": self.header.to_dict(),
            "footer": self.footer.to_dict(),
            "background": self.background.to_dict(),
            "margins": self.margins.to_dict(),
            "typography": self.typography.to_dict(),
            "isRTL": self.is_rtl,
            "showPageNumber": self.show_page_number,
            "pageNumberPosition": self.page_number_position.value,
        }
        if self.split_ratio:
            data["splitRatio"] = list(self.split_ratio)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutConfiguration":
        """Build a configuration, filling anything missing from the defaults.

        Nested sections merge over their defaults the same way the editor
        merges a partial initial layout. Split ratio and column values are
        normalized through :mod:`core.layout.configuration`.
        """
        from .configuration import normalize_split

        base = cls()
        header = data.get("header")
        footer = data.get("footer")
        background = data.get("background")
        margins = data.get("margins")
        typography = data.get("typography")

        split_type = _enum(SplitType, data.get("splitType"), SplitType.NONE)
        ratio = data.get("splitRatio") or ()
        columns = int(clamp(_number(data.get("columns"), base.columns), MIN_COLUMNS, MAX_COLUMNS))

        return cls(
            name=str(data.get("name", base.name)),
            description=str(data.get("description", base.description) or ""),
            split_type=split_type,
            split_ratio=normalize_split(split_type, [_number(r, 50.0) for r in ratio]),
            columns=columns,
            column_gap=max(0.0, _number(data.get("columnGap"), base.column_gap)),
            header=HeaderFooterConfig.from_dict(header, base.header) if isinstance(header, dict) else base.header,
            footer=HeaderFooterConfig.from_dict(footer, base.footer) if isinstance(footer, dict) else base.footer,
            background=Background.from_dict(background) if isinstance(background, dict) else base.background,
            margins=Margins.from_dict(margins) if isinstance(margins, dict) else base.margins,
            typography=Typography.from_dict(typography) if isinstance(typography, dict) else base.typography,
            is_rtl=bool(data.get("isRTL", base.is_rtl)),
            show_page_number=bool(data.get("showPageNumber", base.show_page_number)),
            page_number_position=_enum(
                PageNumberPosition, data.get("pageNumberPosition"), base.page_number_position
            ),
        )


def default_layout() -> LayoutConfiguration:
    """The configuration a new book starts with."""
    return LayoutConfiguration()


# Pages and images


@dataclass(frozen=True)
class ImagePlacement:
    """An image on a page, in percent of the page box.

    Invariants: ``x + width <= 100`` and ``y + height <= 100``.
    """

    id: str
    url: str
    x: float = DEFAULT_IMAGE_X
    y: float = DEFAULT_IMAGE_Y
    width: float = DEFAULT_IMAGE_WIDTH
    height: float = DEFAULT_IMAGE_HEIGHT
    rotation: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImagePlacement":
        width = clamp(_number(data.get("width"), DEFAULT_IMAGE_WIDTH), MIN_IMAGE_SIZE, 100.0)
        height = clamp(_number(data.get("height"), DEFAULT_IMAGE_HEIGHT), MIN_IMAGE_SIZE, 100.0)
        return cls(
            id=str(data.get("id", "")),
            url=str(data.get("url", "")),
            x=clamp(_number(data.get("x"), DEFAULT_IMAGE_X), 0.0, 100.0 - width),
            y=clamp(_number(data.get("y"), DEFAULT_IMAGE_Y), 0.0, 100.0 - height),
            width=width,
            height=height,
            rotation=_number(data.get("rotation"), 0.0),
        )


@dataclass(frozen=True)
class Page:
    id: str
    role: PageRole
    content: str = ""
    images: Tuple[ImagePlacement, ...] = ()
    chapter_index: Optional[int] = None

    @property
    def is_blank(self) -> bool:
        return self.role == PageRole.BLANK

    def find_image(self, image_id: str) -> Optional[ImagePlacement]:
        for image in self.images:
            if image.id == image_id:
                return image
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.role.value,
            "content": self.content,
            "images": [image.to_dict() for image in self.images],
        }
        if self.chapter_index is not None:
            data["chapterIndex"] = self.chapter_index
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        chapter_index = data.get("chapterIndex")
        return cls(
            id=str(data.get("id", "")),
            role=_enum(PageRole, data.get("type"), PageRole.BLANK),
            content=str(data.get("content") or ""),
            images=tuple(ImagePlacement.from_dict(i) for i in data.get("images", []) if isinstance(i, dict)),
            chapter_index=None if chapter_index is None else int(chapter_index),
        )


EMPTY_PAGE = Page(id="", role=PageRole.BLANK)


# Manuscript input


@dataclass(frozen=True)
class Chapter:
    title: str = ""
    content: str = ""
    word_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chapter":
        return cls(
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            word_count=int(_number(data.get("wordCount"), 0)),
        )


@dataclass(frozen=True)
class Manuscript:
    """Read-only book content handed to pagination."""

    title: str
    author: str = ""
    language: str = ""
    chapters: Tuple[Chapter, ...] = ()
    synopsis: Optional[str] = None
    description: Optional[str] = None
    genre: str = ""

    @property
    def summary_text(self) -> str:
        """Back-cover text: synopsis, else description, else empty."""
        return self.synopsis or self.description or ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "author": {"name": self.author},
            "language": self.language,
            "genre": self.genre,
            "synopsis": self.synopsis,
            "description": self.description,
            "chapters": [
                {"title": c.title, "content": c.content, "wordCount": c.word_count}
                for c in self.chapters
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manuscript":
        author = data.get("author") or ""
        if isinstance(author, dict):
            author = author.get("name") or ""
        return cls(
            title=str(data.get("title") or ""),
            author=str(author),
            language=str(data.get("language") or ""),
            chapters=tuple(Chapter.from_dict(c) for c in data.get("chapters", []) if isinstance(c, dict)),
            synopsis=data.get("synopsis") or None,
            description=data.get("description") or None,
            genre=str(data.get("genre") or ""),
        )


@dataclass(frozen=True)
class PaginationFlags:
    include_toc: bool = True
    include_back_cover: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"includeToc": self.include_toc, "includeBackCover": self.include_back_cover}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaginationFlags":
        return cls(
            include_toc=bool(data.get("includeToc", True)),
            include_back_cover=bool(data.get("includeBackCover", True)),
        )


@dataclass(frozen=True)
class DocumentState:
    """One history snapshot: the configuration plus the page list."""

    configuration: LayoutConfiguration = field(default_factory=LayoutConfiguration)
    pages: Tuple[Page, ...] = ()
    flags: PaginationFlags = field(default_factory=PaginationFlags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configuration": self.configuration.to_dict(),
            "pages": [page.to_dict() for page in self.pages],
            "settings": self.flags.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentState":
        return cls(
            configuration=LayoutConfiguration.from_dict(data.get("configuration") or {}),
            pages=tuple(Page.from_dict(p) for p in data.get("pages", []) if isinstance(p, dict)),
            flags=PaginationFlags.from_dict(data.get("settings") or {}),
        )
