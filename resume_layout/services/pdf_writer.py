"""
PDF writer: serializes a Drawing Program with PyMuPDF.

Text is drawn with the same base-14 font names ``fitz_measure`` measures with,
so link rectangles line up with the rendered labels.
"""

import logging
import os
import re
from typing import Optional

import fitz  # PyMuPDF

from resume_layout.core.config import settings
from resume_layout.services.drawing import Document, LinkRect, Rule, TextRun
from resume_layout.services.grammar import ResumeHeader
from resume_layout.services.measure import FontSpec

logger = logging.getLogger(__name__)

RULE_WIDTH = 0.5
_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def write_pdf(document: Document, output_path: Optional[str] = None) -> bytes:
    """Render every page of ``document``; optionally also save to ``output_path``."""
    pdf = fitz.open()
    try:
        for page_model in document.pages:
            page = pdf.new_page(width=page_model.width, height=page_model.height)
            for op in page_model.ops:
                if isinstance(op, TextRun):
                    font = FontSpec(family=document.font_family, size=op.size)
                    page.insert_text(
                        fitz.Point(op.x, op.y),
                        op.text,
                        fontname=font.fontname(op.style.is_bold),
                        fontsize=op.size,
                        color=op.color,
                    )
                elif isinstance(op, Rule):
                    page.draw_line(
                        fitz.Point(op.x1, op.y1),
                        fitz.Point(op.x2, op.y2),
                        color=(op.gray, op.gray, op.gray),
                        width=RULE_WIDTH,
                    )
                elif isinstance(op, LinkRect):
                    page.insert_link({
                        "kind": fitz.LINK_URI,
                        "from": fitz.Rect(op.x, op.y, op.x + op.w, op.y + op.h),
                        "uri": op.url,
                    })
        data = pdf.tobytes(garbage=4, deflate=True)
    finally:
        pdf.close()

    if output_path:
        os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(data)
        logger.info(f"[WRITER] Saved {document.page_count} page(s) to {output_path}")

    return data


def _sanitize(part: Optional[str]) -> str:
    if not part:
        return ""
    return re.sub(r"\s+", "_", _UNSAFE_FILENAME_CHARS.sub("", part).strip())


def export_filename(header: ResumeHeader, default: Optional[str] = None) -> str:
    """``Name_Role_Company.pdf`` from the header, or the configured default."""
    company = header.company
    if company and company.strip().lower() == "target company":
        company = None

    parts = [p for p in (_sanitize(header.name), _sanitize(header.role), _sanitize(company)) if p]
    if not parts:
        return default or settings.DEFAULT_EXPORT_FILENAME
    return f"{'_'.join(parts)}.pdf"
