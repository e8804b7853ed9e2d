"""
Header and footer bands.

Covers the quick presets offered by the editor, dynamic field substitution
(``{pageNumber}``, ``{title}`` ...) and per-page visibility rules.
"""

import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Dict, Optional, Tuple

from core.logging_config import LogManager

from .models import HeaderFooterConfig, HeaderFooterContent, LayoutConfiguration

logger = LogManager().get_logger("layout.header_footer")

DYNAMIC_FIELDS = ("pageNumber", "totalPages", "title", "chapter", "author", "date")


@dataclass(frozen=True)
class BandPreset:
    """Quick preset for the header/footer pair.

    ``None`` content leaves the band's current slots untouched.
    """

    name: str
    header_enabled: bool
    footer_enabled: bool
    header_content: Optional[HeaderFooterContent] = None
    footer_content: Optional[HeaderFooterContent] = None


PRESETS: Dict[str, BandPreset] = {
    "classic": BandPreset(
        name="classic",
        header_enabled=True,
        footer_enabled=True,
        header_content=HeaderFooterContent(right="{chapter}"),
        footer_content=HeaderFooterContent(center="— {pageNumber} —"),
    ),
    "academic": BandPreset(
        name="academic",
        header_enabled=True,
        footer_enabled=True,
        header_content=HeaderFooterContent(left="{chapter}", right="{title}"),
        footer_content=HeaderFooterContent(left="{pageNumber}", right="{author}"),
    ),
    "minimal": BandPreset(
        name="minimal",
        header_enabled=False,
        footer_enabled=True,
        footer_content=HeaderFooterContent(center="{pageNumber}"),
    ),
    "none": BandPreset(
        name="none",
        header_enabled=False,
        footer_enabled=False,
    ),
}


def apply_preset(
    header: HeaderFooterConfig,
    footer: HeaderFooterConfig,
    preset_name: str,
) -> Tuple[HeaderFooterConfig, HeaderFooterConfig]:
    """
    Apply a named quick preset to a header/footer pair.

    Args:
        header: Current header band
        footer: Current footer band
        preset_name: One of ``PRESETS``

    Returns:
        Tuple of (header, footer). Styles and heights are preserved.
    """
    try:
        preset = PRESETS[preset_name]
    except KeyError:
        raise ValueError(f"Unknown header/footer preset: {preset_name}") from None

    header = replace(header, enabled=preset.header_enabled)
    if preset.header_content is not None:
        header = replace(header, content=preset.header_content)

    footer = replace(footer, enabled=preset.footer_enabled)
    if preset.footer_content is not None:
        footer = replace(footer, content=preset.footer_content)

    return header, footer


def apply_preset_to_layout(config: LayoutConfiguration, preset_name: str) -> LayoutConfiguration:
    header, footer = apply_preset(config.header, config.footer, preset_name)
    return replace(config, header=header, footer=footer)


@dataclass(frozen=True)
class PageContext:
    """Values available to dynamic fields on one page."""

    page_number: int
    total_pages: int = 0
    title: str = ""
    chapter: str = ""
    author: str = ""
    date: str = ""

    def variables(self) -> Dict[str, str]:
        return {
            "pageNumber": str(self.page_number),
            "totalPages": str(self.total_pages),
            "title": self.title,
            "chapter": self.chapter,
            "author": self.author,
            "date": self.date or date.today().strftime("%d/%m/%Y"),
        }


class BandRenderer:
    """
    Resolves dynamic fields in header/footer slots.

    Supports ``{pageNumber}``, ``{totalPages}``, ``{title}``, ``{chapter}``,
    ``{author}`` and ``{date}``. Unknown fields are left as typed.
    """

    FIELD_PATTERN = re.compile(r'\{(\w+)\}')

    def render_text(self, text: str, context: PageContext) -> str:
        if not text:
            return text

        variables = context.variables()

        def replace_field(match):
            name = match.group(1)
            if name in variables:
                return variables[name]
            logger.debug(f"Unknown header/footer field '{name}' left as-is")
            return match.group(0)

        return self.FIELD_PATTERN.sub(replace_field, text)

    def render(self, band: HeaderFooterConfig, context: PageContext) -> HeaderFooterContent:
        """Resolve all three slots of ``band`` for the page in ``context``."""
        return HeaderFooterContent(
            left=self.render_text(band.content.left, context),
            center=self.render_text(band.content.center, context),
            right=self.render_text(band.content.right, context),
        )

    def render_if_visible(self, band: HeaderFooterConfig, context: PageContext) -> Optional[HeaderFooterContent]:
        if not is_visible_on(band, context.page_number):
            return None
        return self.render(band, context)


def is_visible_on(band: HeaderFooterConfig, page_number: int) -> bool:
    """
    Whether ``band`` is printed on a 1-based page number.

    The first page follows ``show_on_first_page`` alone; later pages follow
    the odd/even switches.
    """
    if not band.enabled:
        return False
    if page_number == 1:
        return band.style.show_on_first_page
    if page_number % 2:
        return band.style.show_on_odd_pages
    return band.style.show_on_even_pages
