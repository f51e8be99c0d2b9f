# File: resume_layout/schemas/export.py
from enum import Enum
from pydantic import BaseModel
from typing import List, Optional


class PageFormat(str, Enum):
    A4 = "a4"
    LETTER = "letter"


class ResumeExportRequest(BaseModel):
    text: str
    page_format: Optional[PageFormat] = None  # If not provided, use PAGE_FORMAT setting


class LinkInfo(BaseModel):
    page: int  # 1-based
    url: str
    x: float
    y: float
    width: float
    height: float


class ResumeLayoutResponse(BaseModel):
    filename: str
    page_count: int
    page_op_counts: List[int]
    links: List[LinkInfo]
