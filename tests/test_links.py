#!/usr/bin/env python3
"""
Link tests: pair detection, URL normalization and hit-rectangle geometry.

Run: pytest tests/test_links.py -v
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from resume_layout.services.drawing import LINK_COLOR
from resume_layout.services.layout_engine import layout_resume
from resume_layout.services.links import (
    LinkPair,
    LinkRegistry,
    normalize_url,
    parse_link_pair,
    place_link_label,
    profile_url,
)
from resume_layout.services.measure import FontSpec, fitz_measure
from resume_layout.services.paginator import PageGeometry, Paginator


# ═══════════════════════════════════════════════════════════════════════════════
# Pair detection
# ═══════════════════════════════════════════════════════════════════════════════


class TestLinkPairs:

    def test_https_pair(self):
        assert parse_link_pair("Led migration to AWS | https://example.com/case-study") == LinkPair(
            "Led migration to AWS", "https://example.com/case-study"
        )

    def test_www_is_normalized(self):
        assert parse_link_pair("Portfolio | www.site.io").url == "https://www.site.io"

    @pytest.mark.parametrize("line", [
        "Email me | mailto:jane@example.com",
        "Label | not a url",
        "a | b | https://example.com",
        "no pipe at all https://example.com",
    ])
    def test_not_pairs(self, line):
        assert parse_link_pair(line) is None

    def test_normalize_keeps_scheme(self):
        assert normalize_url(" http://example.com ") == "http://example.com"

    def test_profile_url_adds_scheme(self):
        assert profile_url("linkedin.com/in/jane") == "https://linkedin.com/in/jane"
        assert profile_url("https://github.com/jane") == "https://github.com/jane"


# ═══════════════════════════════════════════════════════════════════════════════
# Rectangles
# ═══════════════════════════════════════════════════════════════════════════════


class TestLinkRects:

    def test_bullet_link_rect_matches_label_width(self):
        geometry = PageGeometry.for_format("a4")
        document = layout_resume(
            "ACHIEVEMENTS\n• Led migration to AWS | https://example.com/case-study",
            geometry=geometry,
            measure=fitz_measure,
        )
        rects = document.pages[0].links()
        assert len(rects) == 1
        rect = rects[0]
        assert rect.url == "https://example.com/case-study"
        assert rect.w == pytest.approx(fitz_measure("Led migration to AWS", geometry.font, False))
        assert rect.h == pytest.approx(geometry.font.size)
        assert rect.x == pytest.approx(geometry.content_left + 15)

        label = [r for r in document.pages[0].text_runs() if r.text == "Led migration to AWS"][0]
        assert label.color == LINK_COLOR
        assert rect.y < label.y < rect.y + rect.h
        assert [(e.page_index, e.rect) for e in document.links] == [(0, rect)]

    def test_wrapped_label_links_first_line_only(self, geometry, measure):
        p = Paginator(geometry)
        registry = LinkRegistry(measure)
        font = FontSpec()
        pair = LinkPair("a fairly long certification title", "https://example.com")
        place_link_label(p, registry, font, pair, x=50.0, width=60.0, lead=())

        runs = p.current_page.text_runs()
        assert len(runs) > 1
        assert all(r.color == LINK_COLOR for r in runs)
        assert len(registry.entries) == 1
        rect = registry.entries[0].rect
        assert rect.w == pytest.approx(measure(runs[0].text, font, False))
        assert rect.y < runs[0].y < rect.y + rect.h

    def test_link_on_later_page_records_page_index(self, geometry, measure):
        p = Paginator(geometry)
        registry = LinkRegistry(measure)
        p.move_to(geometry.bottom - 1)
        place_link_label(p, registry, FontSpec(), LinkPair("label", "https://example.com"), 50.0, 300.0)
        assert len(p.pages) == 2
        assert registry.entries[0].page_index == 1
        assert p.pages[1].links() == [registry.entries[0].rect]
        assert p.pages[0].links() == []
