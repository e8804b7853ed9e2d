"""
Two-page spread navigation.

Spread 0 is the cover. Spread ``k > 0`` shows pages ``2(k-1)`` and
``2(k-1) + 1`` in reading order; a missing partner page is reported as
``EMPTY_PAGE`` so the viewer always has two slots to fill. For
right-to-left books the first page in reading order sits on the right.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from core.logging_config import LogManager

from .models import EMPTY_PAGE, Page

logger = LogManager().get_logger("layout.spreads")


def spread_count(page_count: int) -> int:
    """Number of spreads including the cover: ``ceil(n / 2) + 1``.

    An odd page count still gets its own final spread, with an empty partner.
    """
    return math.ceil(max(0, page_count) / 2) + 1


@dataclass(frozen=True)
class Spread:
    """Pages visible at one cursor position.

    ``first``/``second`` are in reading order; ``left``/``right`` are the
    physical positions after applying the reading direction.
    """

    cursor: int
    is_cover: bool
    first: Optional[Page] = None
    second: Optional[Page] = None
    first_index: Optional[int] = None
    second_index: Optional[int] = None
    is_rtl: bool = False

    @property
    def left(self) -> Optional[Page]:
        return self.second if self.is_rtl else self.first

    @property
    def right(self) -> Optional[Page]:
        return self.first if self.is_rtl else self.second

    @property
    def left_index(self) -> Optional[int]:
        return self.second_index if self.is_rtl else self.first_index

    @property
    def right_index(self) -> Optional[int]:
        return self.first_index if self.is_rtl else self.second_index


class SpreadNavigator:
    """Cursor over the spreads of a page list."""

    def __init__(self, pages: Sequence[Page] = (), is_rtl: bool = False, cursor: int = 0):
        self.pages = list(pages)
        self.is_rtl = is_rtl
        self.cursor = 0
        self.go_to(cursor)

    @property
    def count(self) -> int:
        return spread_count(len(self.pages))

    def set_pages(self, pages: Sequence[Page]) -> None:
        """Replace the page list, keeping the cursor in range."""
        self.pages = list(pages)
        self.go_to(self.cursor)

    def go_to(self, cursor: int) -> int:
        clamped = max(0, min(int(cursor), self.count - 1))
        if clamped != cursor:
            logger.debug(f"Spread cursor {cursor} clamped to {clamped}")
        self.cursor = clamped
        return self.cursor

    def next(self) -> int:
        """Advance one spread in reading order; stays put on the last."""
        return self.go_to(self.cursor + 1)

    def previous(self) -> int:
        """Go back one spread in reading order; stays put on the cover."""
        return self.go_to(self.cursor - 1)

    def on_arrow_key(self, key: str) -> int:
        """
        Handle a physical arrow key.

        Args:
            key: ``"left"`` or ``"right"`` (``"ArrowLeft"``/``"ArrowRight"``
                 are accepted too)

        Returns:
            The new cursor. In RTL books the right arrow goes back.
        """
        key = key.lower().replace("arrow", "")
        if key == "right":
            return self.previous() if self.is_rtl else self.next()
        if key == "left":
            return self.next() if self.is_rtl else self.previous()
        return self.cursor

    def get_spread(self, cursor: Optional[int] = None) -> Spread:
        cursor = self.cursor if cursor is None else max(0, min(int(cursor), self.count - 1))
        if cursor == 0:
            return Spread(cursor=0, is_cover=True, is_rtl=self.is_rtl)

        start = (cursor - 1) * 2
        first_index = start if start < len(self.pages) else None
        second_index = start + 1 if start + 1 < len(self.pages) else None
        return Spread(
            cursor=cursor,
            is_cover=False,
            first=self.pages[start] if first_index is not None else EMPTY_PAGE,
            second=self.pages[start + 1] if second_index is not None else EMPTY_PAGE,
            first_index=first_index,
            second_index=second_index,
            is_rtl=self.is_rtl,
        )

    def current(self) -> Spread:
        return self.get_spread(self.cursor)

    def spread_of_page(self, page_index: int) -> int:
        """Cursor of the spread that shows ``page_index``."""
        if not 0 <= page_index < len(self.pages):
            raise IndexError(f"Page index {page_index} out of range")
        return page_index // 2 + 1

    def label(self, cursor: Optional[int] = None) -> str:
        spread = self.get_spread(cursor)
        if spread.is_cover:
            return "cover"
        if spread.second_index is None:
            return f"page {spread.first_index + 1}"
        return f"pages {spread.first_index + 1}-{spread.second_index + 1}"
