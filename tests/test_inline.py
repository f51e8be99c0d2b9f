#!/usr/bin/env python3
"""
Inline formatter tests: bold runs and greedy wrapping.

Run: pytest tests/test_inline.py -v
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from resume_layout.services.inline import split_bold_runs, wrap, wrap_plain
from resume_layout.services.measure import FontSpec, fitz_measure


LONG_TEXT = (
    "Designed and shipped a **streaming ingestion layer** that replaced nightly "
    "batch jobs, reducing time-to-insight from **24 hours to 5 minutes** for "
    "analysts across three business units and **four** regions"
)


def _bold_chars(runs):
    return "".join(text for text, bold in runs if bold)


# ═══════════════════════════════════════════════════════════════════════════════
# Bold runs
# ═══════════════════════════════════════════════════════════════════════════════


class TestBoldRuns:

    def test_alternating_runs(self):
        assert split_bold_runs("a **b** c") == [("a ", False), ("b", True), (" c", False)]

    def test_leading_bold(self):
        assert split_bold_runs("**Languages:** Python") == [("Languages:", True), (" Python", False)]

    def test_unpaired_delimiter_stays_literal(self):
        assert split_bold_runs("a **b") == [("a **b", False)]

    def test_unpaired_after_pair(self):
        assert split_bold_runs("**a** b **c") == [("a", True), (" b **c", False)]

    def test_no_markup(self):
        assert split_bold_runs("plain") == [("plain", False)]


# ═══════════════════════════════════════════════════════════════════════════════
# Wrapping
# ═══════════════════════════════════════════════════════════════════════════════


class TestWrap:

    @pytest.mark.parametrize("width", [80.0, 150.0, 300.0, 1000.0])
    def test_text_is_preserved(self, font, measure, width):
        lines = wrap(LONG_TEXT, font, width, measure)
        assert "".join(line.text for line in lines) == LONG_TEXT.replace("**", "")

    @pytest.mark.parametrize("width", [80.0, 150.0, 300.0])
    def test_bold_parity_is_preserved(self, font, measure, width):
        lines = wrap(LONG_TEXT, font, width, measure)
        wrapped_bold = "".join(run.text for line in lines for run in line.runs if run.bold)
        assert wrapped_bold == _bold_chars(split_bold_runs(LONG_TEXT))

    @pytest.mark.parametrize("width", [100.0, 150.0, 300.0])
    def test_lines_fit_the_column(self, font, measure, width):
        for line in wrap(LONG_TEXT, font, width, measure):
            assert measure(line.text.rstrip(), font, False) <= width

    def test_run_offsets_are_contiguous(self, font, measure):
        for line in wrap(LONG_TEXT, font, 200.0, measure):
            x = 0.0
            for run in line.runs:
                assert run.x == pytest.approx(x)
                x += run.width

    def test_fits_on_one_line(self, font, measure):
        lines = wrap("short line", font, 500.0, measure)
        assert len(lines) == 1
        assert lines[0].text == "short line"

    def test_forced_overflow_is_one_line(self, font, measure):
        lines = wrap("Supercalifragilisticexpialidocious", font, 60.0, measure)
        assert len(lines) == 1
        assert lines[0].text == "Supercalifragilisticexpialidocious"

    def test_word_after_forced_overflow_moves_down(self, font, measure):
        lines = wrap("Supercalifragilisticexpialidocious word", font, 60.0, measure)
        assert [line.text.strip() for line in lines] == ["Supercalifragilisticexpialidocious", "word"]

    def test_first_indent_only_applies_to_first_line(self, font, measure):
        # 6pt per char: "abc" ends at 58, "def" would end at 82
        lines = wrap("abc def", font, 60.0, measure, first_indent=40.0)
        assert [line.text for line in lines] == ["abc ", "def"]
        assert lines[0].runs[0].x == pytest.approx(40.0)
        assert lines[1].runs[0].x == pytest.approx(0.0)

    def test_bold_and_plain_runs_on_one_line(self, font, measure):
        lines = wrap("**Led** the team", font, 500.0, measure)
        assert [(r.text, r.bold) for r in lines[0].runs] == [("Led", True), (" the team", False)]
        assert lines[0].runs[1].x == pytest.approx(measure("Led", font, True))

    def test_real_font_metrics(self):
        font = FontSpec(family="times", size=12)
        lines = wrap(LONG_TEXT, font, 250.0, fitz_measure)
        assert len(lines) > 1
        for line in lines:
            last = line.runs[-1]
            assert last.x + fitz_measure(last.text.rstrip(), font, last.bold) <= 250.0 + 1e-6


class TestWrapPlain:

    def test_returns_trimmed_strings(self, font, measure):
        assert wrap_plain("alpha beta gamma", font, 66.0, measure) == ["alpha beta", "gamma"]

    def test_strips_markup(self, font, measure):
        assert wrap_plain("**bold** text", font, 500.0, measure) == ["bold text"]

    def test_empty(self, font, measure):
        assert wrap_plain("", font, 100.0, measure) == [""]
