"""
Section renderers: one layout policy per section kind.

Every renderer takes the shared ``LayoutContext`` (paginator, measurement,
link registry) explicitly; nothing here keeps module-level state.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from resume_layout.services.drawing import BLACK, LINK_COLOR, FontStyle
from resume_layout.services.grammar import ResumeHeader, strip_bold, strip_bullet
from resume_layout.services.inline import wrap, wrap_plain
from resume_layout.services.links import (
    LinkPair,
    LinkRegistry,
    parse_link_pair,
    place_link_label,
    profile_url,
)
from resume_layout.services.measure import FontSpec, MeasureFn
from resume_layout.services.paginator import Cell, PageGeometry, Paginator
from resume_layout.services.records import (
    PROBLEM_PREFIX,
    TECH_STACK_PREFIX,
    EntryRecord,
    SectionKind,
    SectionRecord,
    build_certification_items,
    build_education_rows,
    build_entries,
    build_project_items,
)

logger = logging.getLogger(__name__)


BULLET = "•"
BULLET_INDENT = 15.0
BULLET_OFFSET = 2.0
NUMBER_INDENT = 20.0

HEADING_SCALE = 1.2
ENTRY_GAP = 0.2
BLOCK_GAP = 0.5

# Applicant header block
NAME_SIZE = 16.0
NAME_ADVANCE = 18.0
CONTACT_SIZE = 11.0
CONTACT_SPACING = 14.0
DIVIDER_GRAY = 150 / 255


@dataclass
class LayoutContext:
    paginator: Paginator
    measure: MeasureFn
    links: LinkRegistry

    @property
    def geometry(self) -> PageGeometry:
        return self.paginator.geometry

    @property
    def font(self) -> FontSpec:
        return self.geometry.font

    @property
    def lh(self) -> float:
        return self.paginator.line_height

    @property
    def left(self) -> float:
        return self.geometry.content_left

    @property
    def right(self) -> float:
        return self.geometry.content_right

    @property
    def width(self) -> float:
        return self.geometry.text_width


# ─── Building blocks ───────────────────────────────────────────────────────

def render_heading(ctx: LayoutContext, title: str) -> None:
    p = ctx.paginator
    if not p.at_page_top:
        p.skip(ctx.lh * 0.5)
    p.reserve(ctx.lh * HEADING_SCALE)
    p.place_runs([Cell(title, ctx.left, FontStyle.BOLD)], height=ctx.lh * HEADING_SCALE)


def render_paragraph(ctx: LayoutContext, text: str) -> None:
    """Full-width flowing text with inline bold; breaks only between wrapped lines."""
    for line in wrap(text, ctx.font, ctx.width, ctx.measure):
        ctx.paginator.place_styled_line(line, ctx.left)


def render_bullet(ctx: LayoutContext, line: str) -> None:
    clean = strip_bullet(line)
    if not clean:
        return
    text_x = ctx.left + BULLET_INDENT
    text_width = ctx.width - BULLET_INDENT
    lead = [Cell(BULLET, ctx.left + BULLET_OFFSET, FontStyle.NORMAL, BLACK)]

    pair = parse_link_pair(clean)
    if pair is not None:
        place_link_label(ctx.paginator, ctx.links, ctx.font, pair, text_x, text_width, lead)
        return

    for j, wrapped in enumerate(wrap(clean, ctx.font, text_width, ctx.measure)):
        ctx.paginator.place_styled_line(wrapped, text_x, lead if j == 0 else ())


def render_labeled_block(ctx: LayoutContext, label: str, text: str) -> None:
    """Bold label with its text continuing on the same line, kept together as one block."""
    indent = ctx.measure(label, ctx.font, True) + ctx.measure(" ", ctx.font, False)
    lines = wrap(text, ctx.font, ctx.width, ctx.measure, first_indent=indent)
    ctx.paginator.reserve(len(lines) * ctx.lh)
    for j, wrapped in enumerate(lines):
        lead = [Cell(label, ctx.left, FontStyle.BOLD)] if j == 0 else ()
        ctx.paginator.place_styled_line(wrapped, ctx.left, lead)


def _right_aligned_x(ctx: LayoutContext, text: str, font: FontSpec, bold: bool = False) -> float:
    return ctx.right - ctx.measure(text, font, bold)


# ─── Section policies ──────────────────────────────────────────────────────

def render_paragraph_section(ctx: LayoutContext, lines: List[str]) -> None:
    for line in lines:
        render_paragraph(ctx, line)


def render_entry(ctx: LayoutContext, entry: EntryRecord) -> None:
    p = ctx.paginator
    header = entry.header
    company = f"{header.company}, {header.location}" if header.location else header.company

    company_lines = wrap_plain(company, ctx.font, ctx.width * 0.7 - 5, ctx.measure, bold=True)
    date_lines = wrap_plain(header.dates, ctx.font, ctx.width * 0.3 - 5, ctx.measure, bold=True) if header.dates else []
    role_lines = wrap_plain(entry.role_line, ctx.font, ctx.width, ctx.measure, bold=True) if entry.role_line else []

    row_count = max(len(company_lines), len(date_lines))
    p.reserve((row_count + len(role_lines)) * ctx.lh)

    for j in range(row_count):
        cells = []
        if j < len(company_lines):
            cells.append(Cell(company_lines[j], ctx.left, FontStyle.BOLD))
        if j < len(date_lines):
            cells.append(Cell(date_lines[j], _right_aligned_x(ctx, date_lines[j], ctx.font, True), FontStyle.BOLD))
        p.place_runs(cells)
    for role in role_lines:
        p.place_line(role, ctx.left, FontStyle.BOLD)
    p.skip(ctx.lh * ENTRY_GAP)

    if entry.problem_fallback:
        render_paragraph(ctx, entry.problem_fallback)
        p.skip(ctx.lh * ENTRY_GAP)
    if entry.business_problem:
        render_labeled_block(ctx, PROBLEM_PREFIX, entry.business_problem)
        p.skip(ctx.lh * ENTRY_GAP)

    for accomplishment in entry.accomplishments:
        render_bullet(ctx, accomplishment)

    if entry.tech_stack_line:
        render_labeled_block(ctx, TECH_STACK_PREFIX, entry.tech_stack_line)
    p.skip(ctx.lh * BLOCK_GAP)

    if entry.trailing_unparsed:
        for line in entry.trailing_unparsed:
            render_paragraph(ctx, line)
        p.skip(ctx.lh * BLOCK_GAP)


def render_experience_section(ctx: LayoutContext, lines: List[str]) -> None:
    entries = build_entries(lines)
    logger.info(f"[EXPERIENCE] {len(entries)} entries")
    for entry in entries:
        render_entry(ctx, entry)


def render_projects_section(ctx: LayoutContext, lines: List[str]) -> None:
    p = ctx.paginator
    for item in build_project_items(lines):
        if item.title:
            title_lines = wrap_plain(item.title, ctx.font, ctx.width, ctx.measure, bold=True)
            p.reserve(len(title_lines) * ctx.lh)
            for title in title_lines:
                p.place_line(title, ctx.left, FontStyle.BOLD)
            p.skip(ctx.lh * ENTRY_GAP)
        for accomplishment in item.accomplishments:
            render_bullet(ctx, accomplishment)


def render_education_section(ctx: LayoutContext, lines: List[str]) -> None:
    p = ctx.paginator
    column = ctx.width / 3
    center = ctx.geometry.width / 2

    for row in build_education_rows(lines):
        if not row.is_tabular:
            for text in wrap_plain(row.fields[0], ctx.font, ctx.width, ctx.measure):
                p.place_line(text, ctx.left)
            continue

        institution, degree, years = row.fields
        inst_lines = wrap_plain(institution, ctx.font, column, ctx.measure)
        degree_lines = wrap_plain(degree, ctx.font, column, ctx.measure)
        year_lines = wrap_plain(years, ctx.font, column, ctx.measure)
        row_lines = max(len(inst_lines), len(degree_lines), len(year_lines))
        p.reserve(row_lines * ctx.lh)

        for j in range(row_lines):
            cells = []
            if j < len(inst_lines):
                cells.append(Cell(inst_lines[j], ctx.left))
            if j < len(degree_lines):
                half = ctx.measure(degree_lines[j], ctx.font, False) / 2
                cells.append(Cell(degree_lines[j], center - half))
            if j < len(year_lines):
                cells.append(Cell(year_lines[j], _right_aligned_x(ctx, year_lines[j], ctx.font)))
            p.place_runs(cells)
        p.skip(ctx.lh * ENTRY_GAP)


def render_certifications_section(ctx: LayoutContext, lines: List[str]) -> None:
    p = ctx.paginator
    text_x = ctx.left + NUMBER_INDENT
    text_width = ctx.width - NUMBER_INDENT

    for number, item in enumerate(build_certification_items(lines), start=1):
        lead = [Cell(f"{number}.", ctx.left, FontStyle.NORMAL, BLACK)]
        if item.is_link:
            label, url = item.fields
            place_link_label(p, ctx.links, ctx.font, LinkPair(label, url), text_x, text_width, lead)
            continue
        for j, text in enumerate(wrap_plain(item.fields[0], ctx.font, text_width, ctx.measure)):
            cells = list(lead) if j == 0 else []
            cells.append(Cell(text, text_x))
            p.place_runs(cells)


def render_generic_list(ctx: LayoutContext, lines: List[str]) -> None:
    for line in lines:
        render_bullet(ctx, line)


SECTION_RENDERERS: Dict[SectionKind, Callable[[LayoutContext, List[str]], None]] = {
    SectionKind.SUMMARY: render_paragraph_section,
    SectionKind.SKILLS: render_paragraph_section,
    SectionKind.EXPERIENCE: render_experience_section,
    SectionKind.PROJECTS_OR_VOLUNTEERING: render_projects_section,
    SectionKind.EDUCATION: render_education_section,
    SectionKind.CERTIFICATIONS: render_certifications_section,
    SectionKind.OTHER: render_generic_list,
}


def render_section(ctx: LayoutContext, section: SectionRecord) -> None:
    start_page = ctx.paginator.page_index
    render_heading(ctx, section.title)
    renderer = SECTION_RENDERERS.get(section.kind, render_generic_list)
    renderer(ctx, section.lines)
    logger.info(
        f"[RENDER] {section.title} ({section.kind.value}): {len(section.lines)} lines, "
        f"pages {start_page + 1}-{ctx.paginator.page_index + 1}"
    )


# ─── Applicant header block ────────────────────────────────────────────────

def _contact_links(header: ResumeHeader) -> List[tuple]:
    """(display text, url or None) for the right-hand column, top to bottom."""
    items = []
    if header.phone:
        items.append((header.phone, None))
    if header.email:
        items.append((header.email, f"mailto:{header.email}"))
    if header.linkedin:
        items.append(("LinkedIn Profile", profile_url(header.linkedin)))
    if header.github:
        items.append(("GitHub Profile", profile_url(header.github)))
    if header.portfolio:
        items.append(("Portfolio Link", profile_url(header.portfolio)))
    return items


def render_applicant_header(ctx: LayoutContext, header: ResumeHeader) -> Optional[float]:
    """Two-column contact block with a divider rule. Skipped when there is no name."""
    if not header.name:
        return None

    p = ctx.paginator
    contact_font = ctx.font.with_size(CONTACT_SIZE)
    left_y = right_y = p.y

    p.place_at(header.name, ctx.left, left_y, FontStyle.BOLD, size=NAME_SIZE)
    left_y += NAME_ADVANCE
    for value in (header.role, header.location):
        if value:
            p.place_at(strip_bold(value), ctx.left, left_y, size=CONTACT_SIZE)
            left_y += CONTACT_SPACING

    for text, url in _contact_links(header):
        x = _right_aligned_x(ctx, text, contact_font)
        if url is None:
            p.place_at(text, x, right_y, size=CONTACT_SIZE)
        else:
            p.place_at(text, x, right_y, size=CONTACT_SIZE, color=LINK_COLOR)
            ctx.links.register(p, x, right_y, text, contact_font, FontStyle.NORMAL, url)
        right_y += CONTACT_SPACING

    p.move_to(max(left_y, right_y) - 4)
    p.rule(ctx.left, ctx.right, gray=DIVIDER_GRAY)
    return p.skip(15)
