"""
Page sequence generation.

Turns a manuscript into the ordered list of typed pages the editor works on:

    title, blank, [toc, blank], chapter x N, [back-cover summary]

The table of contents only appears when enabled and the book has more than
one chapter. Generation is deterministic: the same manuscript and flags
always produce the same ids, roles and content.
"""

import html
import re
import uuid
from dataclasses import replace
from typing import List, Sequence

from core.constants import TOC_PAGE_OFFSET, TOC_PAGE_STRIDE
from core.logging_config import LogManager

from .models import Manuscript, Page, PageRole, PaginationFlags

logger = LogManager().get_logger("layout.pagination")

RTL_PATTERN = re.compile(r'[\u0590-\u05FF\u0600-\u06FF\u0750-\u077F]')
RTL_LANGUAGES = ("he", "ar")

TOC_HEADINGS = {
    True: "תוכן העניינים",
    False: "Table of Contents",
}


def is_rtl_text(text: str) -> bool:
    """True if ``text`` contains Hebrew or Arabic script."""
    return bool(text) and RTL_PATTERN.search(text) is not None


def manuscript_is_rtl(manuscript: Manuscript) -> bool:
    language = (manuscript.language or "").lower().split("-")[0]
    return is_rtl_text(manuscript.title) or language in RTL_LANGUAGES


def estimated_chapter_page(index: int) -> int:
    """Rough printed page number for chapter ``index`` in the contents.

    This is an estimate (two pages per chapter after the front matter),
    not the actual position of the chapter in the generated sequence.
    """
    return index * TOC_PAGE_STRIDE + TOC_PAGE_OFFSET


def _title_content(manuscript: Manuscript) -> str:
    return (
        f'<h1 class="book-title">{html.escape(manuscript.title)}</h1>'
        f'<p class="book-author">{html.escape(manuscript.author)}</p>'
    )


def _toc_content(manuscript: Manuscript) -> str:
    heading = TOC_HEADINGS[manuscript_is_rtl(manuscript)]
    items = "".join(
        f'<div class="toc-item"><span class="toc-title">{html.escape(chapter.title)}</span>'
        f'<span class="toc-page">{estimated_chapter_page(i)}</span></div>'
        for i, chapter in enumerate(manuscript.chapters)
    )
    return f'<h2 class="toc-header">{heading}</h2>{items}'


def _chapter_content(manuscript: Manuscript, index: int) -> str:
    chapter = manuscript.chapters[index]
    return f'<h2 class="chapter-title">{html.escape(chapter.title)}</h2>{chapter.content}'


def generate_pages(manuscript: Manuscript, flags: PaginationFlags = PaginationFlags()) -> List[Page]:
    """
    Build the page sequence for a manuscript.

    Args:
        manuscript: Book content (title, author, chapters, synopsis)
        flags: Table of contents / back cover switches

    Returns:
        Ordered list of pages
    """
    pages: List[Page] = [
        Page(id="page-title", role=PageRole.TITLE, content=_title_content(manuscript)),
        # Spacer so the first chapter opens on a recto
        Page(id="page-blank-1", role=PageRole.BLANK),
    ]

    if flags.include_toc and len(manuscript.chapters) > 1:
        pages.append(Page(id="page-toc", role=PageRole.TABLE_OF_CONTENTS, content=_toc_content(manuscript)))
        pages.append(Page(id="page-blank-2", role=PageRole.BLANK))

    for index in range(len(manuscript.chapters)):
        pages.append(Page(
            id=f"page-chapter-{index}",
            role=PageRole.CHAPTER_BODY,
            content=_chapter_content(manuscript, index),
            chapter_index=index,
        ))

    if flags.include_back_cover:
        pages.append(Page(
            id="page-summary",
            role=PageRole.BACK_COVER_SUMMARY,
            content=manuscript.summary_text,
        ))

    logger.debug(
        f"Generated {len(pages)} pages for '{manuscript.title}' "
        f"({len(manuscript.chapters)} chapters, toc={flags.include_toc}, back_cover={flags.include_back_cover})"
    )
    return pages


def role_sequence(pages: Sequence[Page]) -> List[PageRole]:
    return [page.role for page in pages]


def insert_blank_page(pages: Sequence[Page], after_index: int) -> List[Page]:
    """
    Insert a blank page after ``after_index``.

    An index below zero inserts at the front; past the end appends.
    """
    position = max(0, min(after_index + 1, len(pages)))
    blank = Page(id=f"page-blank-{uuid.uuid4().hex[:12]}", role=PageRole.BLANK)
    result = list(pages)
    result.insert(position, blank)
    return result


def remove_page(pages: Sequence[Page], index: int) -> List[Page]:
    """Remove the page at ``index`` if it is blank; other pages stay."""
    if not 0 <= index < len(pages):
        logger.warning(f"Cannot remove page {index}: out of range")
        return list(pages)
    if not pages[index].is_blank:
        logger.warning(f"Only blank pages can be removed (page {index} is {pages[index].role.value})")
        return list(pages)
    return [page for i, page in enumerate(pages) if i != index]


def toggle_table_of_contents(manuscript: Manuscript, flags: PaginationFlags):
    """Flip the contents switch and regenerate. Returns (flags, pages)."""
    flags = replace(flags, include_toc=not flags.include_toc)
    return flags, generate_pages(manuscript, flags)


def toggle_back_cover(manuscript: Manuscript, flags: PaginationFlags):
    """Flip the back-cover switch and regenerate. Returns (flags, pages)."""
    flags = replace(flags, include_back_cover=not flags.include_back_cover)
    return flags, generate_pages(manuscript, flags)


def chapter_page_index(pages: Sequence[Page], chapter_index: int) -> int:
    """Index of the body page for ``chapter_index``, or -1."""
    for i, page in enumerate(pages):
        if page.role == PageRole.CHAPTER_BODY and page.chapter_index == chapter_index:
            return i
    return -1
