# File: resume_layout/api/endpoints/export.py
"""
Export API: generated resume text → paginated PDF (or its layout summary).
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
import logging

from resume_layout.schemas.export import (
    LinkInfo,
    ResumeExportRequest,
    ResumeLayoutResponse,
)
from resume_layout.services.drawing import Document
from resume_layout.services.layout_engine import layout_resume
from resume_layout.services.paginator import PageGeometry
from resume_layout.services.pdf_writer import export_filename, write_pdf

logger = logging.getLogger(__name__)

router = APIRouter()


def _layout(request: ResumeExportRequest) -> Document:
    if not request.text or not request.text.strip():
        raise HTTPException(status_code=400, detail="Resume text is empty.")
    page_format = request.page_format.value if request.page_format else None
    try:
        return layout_resume(request.text, geometry=PageGeometry.from_settings(page_format))
    except Exception as e:
        logger.error(f"[EXPORT] Layout failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Layout failed: {e}")


@router.post("/pdf")
def export_pdf(request: ResumeExportRequest):
    """Lay out the resume text and return the PDF as an attachment."""
    document = _layout(request)
    try:
        data = write_pdf(document)
    except Exception as e:
        logger.error(f"[EXPORT] PDF generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"PDF generation failed: {e}")

    filename = export_filename(document.header)
    logger.info(f"[EXPORT] {filename}: {document.page_count} page(s), {len(data)} bytes")
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/layout", response_model=ResumeLayoutResponse)
def export_layout(request: ResumeExportRequest):
    """Same layout pass as /pdf, returned as a summary instead of a file."""
    document = _layout(request)
    return ResumeLayoutResponse(
        filename=export_filename(document.header),
        page_count=document.page_count,
        page_op_counts=[len(page.ops) for page in document.pages],
        links=[
            LinkInfo(
                page=entry.page_index + 1,
                url=entry.rect.url,
                x=entry.rect.x,
                y=entry.rect.y,
                width=entry.rect.w,
                height=entry.rect.h,
            )
            for entry in document.links
        ],
    )
