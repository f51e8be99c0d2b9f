"""
Resume layout engine: generated resume text in, paginated Drawing Program out.

Pipeline:
1. Split the optional applicant header from the body at the sentinel
2. Classify every body line (heading, bold title, pipe row, key/value, bullet, plain)
3. Group lines into section records in source order
4. Render the applicant header block, then each section with its own policy
5. Return the pages, their draw operations and the registered link rectangles

Each call builds its own Paginator / LinkRegistry, so concurrent calls never
share state. Malformed input degrades visually; nothing here raises for it.
"""

import logging
from typing import Optional

from resume_layout.services.drawing import Document
from resume_layout.services.grammar import classify_lines, split_header
from resume_layout.services.links import LinkRegistry
from resume_layout.services.measure import MeasureFn, fitz_measure
from resume_layout.services.paginator import PageGeometry, Paginator
from resume_layout.services.records import build_sections
from resume_layout.services.renderers import (
    LayoutContext,
    render_applicant_header,
    render_paragraph_section,
    render_section,
)

logger = logging.getLogger(__name__)


def layout_resume(
    text: str,
    geometry: Optional[PageGeometry] = None,
    measure: Optional[MeasureFn] = None,
) -> Document:
    """Lay out generator output into a multi-page Drawing Program.

    Args:
        text: full generator output, optionally starting with the
            ``KEY: value`` header block and ``---RESUME_START---``.
        geometry: page geometry; defaults to the configured page format/font.
        measure: width function ``(text, font, bold) -> points``; defaults to
            PyMuPDF base-14 metrics, matching what ``write_pdf`` draws with.
    """
    geometry = geometry or PageGeometry.from_settings()
    measure = measure or fitz_measure

    header, body_text = split_header(text)
    body = build_sections(classify_lines(body_text))

    paginator = Paginator(geometry)
    ctx = LayoutContext(paginator=paginator, measure=measure, links=LinkRegistry(measure))

    render_applicant_header(ctx, header)
    if body.preamble:
        logger.info(f"[LAYOUT] {len(body.preamble)} lines before the first heading, rendering as paragraphs")
        render_paragraph_section(ctx, body.preamble)
    for section in body.sections:
        render_section(ctx, section)

    document = Document(
        pages=paginator.pages,
        header=header,
        links=list(ctx.links.entries),
        font_family=geometry.font.family,
    )
    logger.info(
        f"[LAYOUT] Done: {document.page_count} page(s), "
        f"{sum(len(p.ops) for p in document.pages)} draw ops, {len(document.links)} links"
    )
    return document
