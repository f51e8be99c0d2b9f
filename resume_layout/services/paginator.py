"""
Paginator: owns page list, cursor and page geometry.

Two lookahead tiers:
- per line: ``place_runs`` / ``place_line`` break the page when one more line
  would cross the bottom boundary, so flowing text may break between any two
  wrapped lines but never inside one.
- per block: ``reserve`` is called with the full height of an atomic group
  (job header rows, education rows, label + text blocks, link labels) before
  any of it is drawn, so the group starts on a fresh page instead of
  straddling a break.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import fitz  # PyMuPDF

from resume_layout.core.config import settings
from resume_layout.services.drawing import BLACK, Color, FontStyle, Page, Rule, TextRun
from resume_layout.services.inline import StyledLine
from resume_layout.services.measure import FontSpec, resolve_family

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72.0
# Tolerance for accumulated float drift when a reserved block is drawn line by line
EPSILON = 1e-6


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page rectangle, border and content bounds, all in points."""
    width: float
    height: float
    border_margin: float = 0.3 * POINTS_PER_INCH
    padding: float = 8.0
    top_offset: float = 15.0
    font: FontSpec = field(default_factory=FontSpec)
    line_height_factor: float = 1.15 * 0.95

    @property
    def content_left(self) -> float:
        return self.border_margin + self.padding

    @property
    def content_right(self) -> float:
        return self.width - self.content_left

    @property
    def text_width(self) -> float:
        return self.content_right - self.content_left

    @property
    def top(self) -> float:
        """Baseline of the first line on every page."""
        return self.content_left + self.top_offset

    @property
    def bottom(self) -> float:
        return self.height - self.border_margin

    @property
    def line_height(self) -> float:
        return self.font.size * self.line_height_factor

    @property
    def border(self):
        m = self.border_margin
        return (m, m, self.width - m, self.height - m)

    @classmethod
    def for_format(cls, page_format: str = "a4", font: Optional[FontSpec] = None, **kwargs) -> "PageGeometry":
        width, height = fitz.paper_size(page_format)
        if width <= 0 or height <= 0:
            logger.warning(f"[GEOMETRY] Unknown page format '{page_format}', using A4")
            width, height = fitz.paper_size("a4")
        return cls(width=float(width), height=float(height), font=font or FontSpec(), **kwargs)

    @classmethod
    def from_settings(cls, page_format: Optional[str] = None) -> "PageGeometry":
        font = FontSpec(family=resolve_family(settings.FONT_FAMILY), size=settings.BODY_FONT_SIZE)
        return cls.for_format(
            page_format or settings.PAGE_FORMAT,
            font=font,
            border_margin=settings.BORDER_MARGIN_IN * POINTS_PER_INCH,
            padding=settings.CONTENT_PADDING,
            line_height_factor=settings.LINE_HEIGHT_FACTOR,
        )


@dataclass(frozen=True)
class Cell:
    """One text placement on a shared baseline."""
    text: str
    x: float
    style: FontStyle = FontStyle.NORMAL
    color: Optional[Color] = None   # overrides the line color (black bullets on link lines)


class Paginator:
    """Cursor + pages for one layout pass. Never shared between passes."""

    def __init__(self, geometry: PageGeometry):
        self.geometry = geometry
        self.pages: List[Page] = []
        self.y = geometry.top
        self.break_page()

    # ── state ──

    @property
    def page_index(self) -> int:
        return len(self.pages) - 1

    @property
    def current_page(self) -> Page:
        return self.pages[-1]

    @property
    def line_height(self) -> float:
        return self.geometry.line_height

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.geometry.top + EPSILON

    # ── page breaks ──

    def break_page(self) -> None:
        g = self.geometry
        page = Page(width=g.width, height=g.height, margin=g.border_margin, border=g.border)
        x0, y0, x1, y1 = g.border
        page.ops.extend([
            Rule(x0, y0, x1, y0),
            Rule(x1, y0, x1, y1),
            Rule(x1, y1, x0, y1),
            Rule(x0, y1, x0, y0),
        ])
        self.pages.append(page)
        self.y = g.top
        if len(self.pages) > 1:
            logger.debug(f"[PAGINATE] Started page {len(self.pages)}")

    def fits(self, height: float) -> bool:
        return self.y + height <= self.geometry.bottom + EPSILON

    def reserve(self, height: float) -> bool:
        """Make room for an atomic block of ``height``.

        Returns True when the block fits where the cursor is. Otherwise breaks
        the page (unless already at the top, where nothing more can be gained)
        and returns False.
        """
        if self.fits(height):
            return True
        if not self.at_page_top:
            self.break_page()
        else:
            logger.warning(
                f"[PAGINATE] Block of {height:.1f}pt is taller than a page, drawing with overflow"
            )
        return False

    # ── placement ──

    def place_runs(
        self,
        cells: Sequence[Cell],
        color: Color = BLACK,
        size: Optional[float] = None,
        height: Optional[float] = None,
    ) -> float:
        """Emit ``cells`` on one baseline, then advance. Returns the new cursor y."""
        step = self.line_height if height is None else height
        if self.y + step > self.geometry.bottom + EPSILON and not self.at_page_top:
            self.break_page()
        font_size = size or self.geometry.font.size
        for cell in cells:
            if cell.text:
                self.current_page.ops.append(
                    TextRun(cell.text, cell.style, cell.x, self.y, font_size, cell.color or color)
                )
        self.y += step
        return self.y

    def place_line(self, text: str, x: float, style: FontStyle = FontStyle.NORMAL, color: Color = BLACK) -> float:
        return self.place_runs([Cell(text, x, style)], color=color)

    def place_styled_line(
        self,
        line: StyledLine,
        x: float,
        lead: Sequence[Cell] = (),
        color: Color = BLACK,
    ) -> float:
        """Place a wrapped line whose run offsets are relative to ``x``; ``lead`` cells
        (bullet glyphs, numbers, inline labels) share its baseline."""
        cells = list(lead) + [Cell(run.text, x + run.x, FontStyle.of(run.bold)) for run in line.runs]
        return self.place_runs(cells, color=color)

    def place_at(
        self,
        text: str,
        x: float,
        y: float,
        style: FontStyle = FontStyle.NORMAL,
        size: Optional[float] = None,
        color: Color = BLACK,
    ) -> None:
        """Absolute placement that leaves the cursor alone (header block, table cells)."""
        if text:
            self.current_page.ops.append(
                TextRun(text, style, x, y, size or self.geometry.font.size, color)
            )

    def skip(self, dy: float) -> float:
        """Vertical spacing; never moves the cursor past the bottom boundary."""
        self.y = min(self.y + dy, self.geometry.bottom)
        return self.y

    def move_to(self, y: float) -> float:
        self.y = min(max(y, self.geometry.top), self.geometry.bottom)
        return self.y

    def rule(self, x1: float, x2: float, gray: float = 0.0) -> None:
        self.current_page.ops.append(Rule(x1, self.y, x2, self.y, gray))
