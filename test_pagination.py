#!/usr/bin/env python3
"""Tests for page sequence generation."""

from core.layout.models import Manuscript, PageRole, PaginationFlags
from core.layout.pagination import (
    chapter_page_index,
    estimated_chapter_page,
    generate_pages,
    insert_blank_page,
    is_rtl_text,
    manuscript_is_rtl,
    remove_page,
    role_sequence,
    toggle_back_cover,
    toggle_table_of_contents,
)
from core.layout.spreads import spread_count


def make_manuscript(chapters=3, **kwargs):
    data = {
        "title": "The Lighthouse",
        "author": {"name": "R. Levi"},
        "synopsis": "A keeper and a storm.",
        "chapters": [
            {"title": f"Chapter {i + 1}", "content": f"<p>Body {i + 1}</p>", "wordCount": 100}
            for i in range(chapters)
        ],
    }
    data.update(kwargs)
    return Manuscript.from_dict(data)


def test_three_chapter_sequence():
    pages = generate_pages(make_manuscript(3))
    assert role_sequence(pages) == [
        PageRole.TITLE,
        PageRole.BLANK,
        PageRole.TABLE_OF_CONTENTS,
        PageRole.BLANK,
        PageRole.CHAPTER_BODY,
        PageRole.CHAPTER_BODY,
        PageRole.CHAPTER_BODY,
        PageRole.BACK_COVER_SUMMARY,
    ]
    assert spread_count(len(pages)) == 5
    assert [p.id for p in pages[:4]] == ["page-title", "page-blank-1", "page-toc", "page-blank-2"]
    assert pages[-1].content == "A keeper and a storm."


def test_single_chapter_has_no_toc():
    pages = generate_pages(make_manuscript(1))
    assert PageRole.TABLE_OF_CONTENTS not in role_sequence(pages)
    assert len(pages) == 4


def test_flags_disable_toc_and_back_cover():
    flags = PaginationFlags(include_toc=False, include_back_cover=False)
    pages = generate_pages(make_manuscript(3), flags)
    assert role_sequence(pages) == [PageRole.TITLE, PageRole.BLANK] + [PageRole.CHAPTER_BODY] * 3


def test_generation_is_deterministic():
    manuscript = make_manuscript(4)
    assert generate_pages(manuscript) == generate_pages(manuscript)


def test_summary_falls_back_to_description():
    manuscript = make_manuscript(2, synopsis=None, description="Fallback text")
    assert generate_pages(manuscript)[-1].content == "Fallback text"
    manuscript = make_manuscript(2, synopsis=None)
    assert generate_pages(manuscript)[-1].content == ""


def test_chapter_pages_carry_title_and_index():
    pages = generate_pages(make_manuscript(2))
    chapter = pages[chapter_page_index(pages, 1)]
    assert chapter.chapter_index == 1
    assert '<h2 class="chapter-title">Chapter 2</h2>' in chapter.content
    assert chapter_page_index(pages, 9) == -1


def test_title_is_escaped():
    pages = generate_pages(make_manuscript(1, title="Cats & <Dogs>"))
    assert "Cats &amp; &lt;Dogs&gt;" in pages[0].content
    assert "R. Levi" in pages[0].content


def test_toc_uses_estimated_page_numbers():
    pages = generate_pages(make_manuscript(3))
    toc = pages[2].content
    assert "Table of Contents" in toc
    for index in range(3):
        assert f'<span class="toc-page">{estimated_chapter_page(index)}</span>' in toc
    assert estimated_chapter_page(0) == 5
    assert estimated_chapter_page(2) == 9


def test_rtl_detection():
    assert is_rtl_text("שלום")
    assert is_rtl_text("مرحبا")
    assert not is_rtl_text("Hello")
    assert manuscript_is_rtl(make_manuscript(2, language="he"))
    assert not manuscript_is_rtl(make_manuscript(2, language="en"))

    pages = generate_pages(make_manuscript(2, title="המגדלור"))
    assert "תוכן העניינים" in pages[2].content


def test_insert_and_remove_blank_page():
    pages = generate_pages(make_manuscript(2))
    longer = insert_blank_page(pages, 3)
    assert len(longer) == len(pages) + 1
    assert longer[4].role == PageRole.BLANK
    assert longer[4].id not in {p.id for p in pages}

    assert remove_page(longer, 4) == list(pages)


def test_remove_non_blank_page_is_refused():
    pages = generate_pages(make_manuscript(2))
    assert remove_page(pages, 0) == list(pages)
    assert remove_page(pages, 99) == list(pages)


def test_toggles_regenerate():
    manuscript = make_manuscript(3)
    flags, pages = toggle_table_of_contents(manuscript, PaginationFlags())
    assert flags.include_toc is False
    assert PageRole.TABLE_OF_CONTENTS not in role_sequence(pages)

    flags, pages = toggle_back_cover(manuscript, flags)
    assert flags.include_back_cover is False
    assert role_sequence(pages)[-1] == PageRole.CHAPTER_BODY
