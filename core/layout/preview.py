"""
Spread preview thumbnails.

Draws a wireframe of one spread with Pillow: page background, margin box,
text columns, split regions and image placement boxes. Not a typesetter;
it exists so a layout can be checked at a glance.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from core.constants import PREVIEW_MAX_HEIGHT, PREVIEW_MAX_WIDTH, PREVIEW_PAGE_SIZE
from core.logging_config import LogManager
from core.utils import ensure_dir

from .background import is_valid_color, preview_color
from .models import LayoutConfiguration, Page, SplitType
from .spreads import Spread

logger = LogManager().get_logger("layout.preview")

Box = Tuple[int, int, int, int]


def split_regions(config: LayoutConfiguration, box: Box) -> List[Box]:
    """Sub-rectangles of ``box`` for the configured split."""
    x0, y0, x1, y1 = box
    width, height = x1 - x0, y1 - y0
    ratio = config.split_ratio

    if config.split_type == SplitType.HORIZONTAL and ratio:
        cut = y0 + int(height * ratio[0] / 100.0)
        return [(x0, y0, x1, cut), (x0, cut, x1, y1)]
    if config.split_type == SplitType.VERTICAL and ratio:
        cut = x0 + int(width * ratio[0] / 100.0)
        return [(x0, y0, cut, y1), (cut, y0, x1, y1)]
    if config.split_type == SplitType.QUADRANT:
        mid_x = x0 + width // 2
        mid_y = y0 + height // 2
        return [(x0, y0, mid_x, mid_y), (mid_x, y0, x1, mid_y), (x0, mid_y, mid_x, y1), (mid_x, mid_y, x1, y1)]
    return [box]


def column_boxes(config: LayoutConfiguration, box: Box, mm_to_px: float) -> List[Box]:
    """Text columns inside ``box`` separated by the column gap."""
    x0, y0, x1, y1 = box
    columns = max(1, config.columns)
    gap = int(config.column_gap * mm_to_px)
    column_width = (x1 - x0 - gap * (columns - 1)) / columns
    if column_width <= 0:
        return [box]
    boxes = []
    for i in range(columns):
        left = int(x0 + i * (column_width + gap))
        boxes.append((left, y0, int(left + column_width), y1))
    return boxes


class SpreadPreviewGenerator:
    """Generates wireframe thumbnails for spreads"""

    def __init__(self, preview_size: Tuple[int, int] = (PREVIEW_MAX_WIDTH, PREVIEW_MAX_HEIGHT),
                 page_size_mm: Tuple[float, float] = PREVIEW_PAGE_SIZE):
        self.preview_size = preview_size
        self.page_size_mm = page_size_mm

    def _page_pixels(self) -> Tuple[int, int, float]:
        page_w, page_h = self.page_size_mm
        # Two pages side by side must fit
        scale = min(self.preview_size[0] / (page_w * 2), self.preview_size[1] / page_h)
        return int(page_w * scale), int(page_h * scale), scale

    def render_spread(self, config: LayoutConfiguration, spread: Spread) -> Image.Image:
        """
        Draw both physical pages of a spread.

        Args:
            config: Active layout configuration
            spread: Spread from the navigator

        Returns:
            RGB image of ``preview_size``
        """
        page_w, page_h, mm_to_px = self._page_pixels()
        canvas = Image.new("RGB", self.preview_size, "#F8F9FA")

        offset_x = (self.preview_size[0] - page_w * 2) // 2
        offset_y = (self.preview_size[1] - page_h) // 2

        if spread.is_cover:
            # Cover sits alone on the recto side
            cover_x = offset_x if spread.is_rtl else offset_x + page_w
            page = self.render_page(config, None, (page_w, page_h), mm_to_px, cover=True)
            canvas.paste(page, (cover_x, offset_y))
        else:
            for slot, page in enumerate((spread.left, spread.right)):
                if page is None:
                    continue
                image = self.render_page(config, page, (page_w, page_h), mm_to_px)
                canvas.paste(image, (offset_x + slot * page_w, offset_y))

        draw = ImageDraw.Draw(canvas)
        draw.line([offset_x + page_w, offset_y, offset_x + page_w, offset_y + page_h], fill="#94A3B8", width=1)
        return canvas

    def render_page(self, config: LayoutConfiguration, page: Optional[Page], size: Tuple[int, int],
                    mm_to_px: float, cover: bool = False) -> Image.Image:
        width, height = size
        fill = preview_color(config.background)
        if not is_valid_color(fill):
            fill = "#FFFFFF"
        image = Image.new("RGB", (width, height), fill)
        draw = ImageDraw.Draw(image)
        draw.rectangle([0, 0, width - 1, height - 1], outline="#CBD5E1", width=1)

        if cover:
            draw.rectangle([width // 6, height // 3, width * 5 // 6, height // 3 + 12], fill="#64748B")
            return image

        margins = config.margins
        content: Box = (
            int(margins.left * mm_to_px),
            int(margins.top * mm_to_px),
            width - int(margins.right * mm_to_px),
            height - int(margins.bottom * mm_to_px),
        )
        if content[2] <= content[0] or content[3] <= content[1]:
            logger.warning("Margins leave no content area, drawing page outline only")
            return image

        draw.rectangle(list(content), outline="#E2E8F0", width=1)

        if page is not None and not page.is_blank:
            for region in split_regions(config, content):
                draw.rectangle(list(region), outline="#F59E0B", width=1)
                for column in column_boxes(config, region, mm_to_px):
                    self._draw_text_lines(draw, column)

            if page.images:
                self._draw_images(draw, page, width, height)

        return image

    def _draw_text_lines(self, draw: ImageDraw.ImageDraw, box: Box) -> None:
        x0, y0, x1, y1 = box
        if x1 - x0 < 8:
            return
        for y in range(y0 + 4, y1 - 2, 6):
            draw.rectangle([x0 + 2, y, x1 - 2, y + 1], fill="#FDE68A")

    def _draw_images(self, draw: ImageDraw.ImageDraw, page: Page, width: int, height: int) -> None:
        for placement in page.images:
            x = int(placement.x / 100.0 * width)
            y = int(placement.y / 100.0 * height)
            w = int(placement.width / 100.0 * width)
            h = int(placement.height / 100.0 * height)
            draw.rectangle([x, y, x + w, y + h], fill="#E2E8F0", outline="#94A3B8", width=1)
            # Draw X to indicate image
            draw.line([x, y, x + w, y + h], fill="#94A3B8", width=1)
            draw.line([x + w, y, x, y + h], fill="#94A3B8", width=1)

    def save_spread(self, config: LayoutConfiguration, spread: Spread, output_path: Path) -> Path:
        """Render a spread and write it as PNG."""
        output_path = Path(output_path)
        ensure_dir(output_path.parent)
        self.render_spread(config, spread).save(output_path, "PNG")
        logger.info(f"Wrote spread {spread.cursor} preview to {output_path}")
        return output_path
