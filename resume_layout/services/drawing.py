"""
Drawing program produced by the layout engine.

A ``Document`` is an ordered list of ``Page``s, each holding draw operations in
emission order. Coordinates are PDF points with the origin at the top-left and
``y`` growing downward (the PyMuPDF convention); a ``TextRun``'s ``y`` is its
baseline and its ``x`` is the left edge after alignment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

from resume_layout.services.grammar import ResumeHeader

Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
LINK_COLOR: Color = (25 / 255, 118 / 255, 210 / 255)


class FontStyle(Enum):
    NORMAL = "normal"
    BOLD = "bold"

    @property
    def is_bold(self) -> bool:
        return self is FontStyle.BOLD

    @classmethod
    def of(cls, bold: bool) -> "FontStyle":
        return cls.BOLD if bold else cls.NORMAL


@dataclass(frozen=True)
class TextRun:
    text: str
    style: FontStyle
    x: float
    y: float
    size: float
    color: Color = BLACK


@dataclass(frozen=True)
class Rule:
    x1: float
    y1: float
    x2: float
    y2: float
    gray: float = 0.0   # 0 = black, 1 = white


@dataclass(frozen=True)
class LinkRect:
    x: float
    y: float
    w: float
    h: float
    url: str


DrawOp = Union[TextRun, Rule, LinkRect]


@dataclass
class Page:
    width: float
    height: float
    margin: float
    border: Tuple[float, float, float, float]
    ops: List[DrawOp] = field(default_factory=list)

    def text_runs(self) -> List[TextRun]:
        return [op for op in self.ops if isinstance(op, TextRun)]

    def links(self) -> List[LinkRect]:
        return [op for op in self.ops if isinstance(op, LinkRect)]

    def rules(self) -> List[Rule]:
        return [op for op in self.ops if isinstance(op, Rule)]


@dataclass(frozen=True)
class LinkEntry:
    page_index: int
    rect: LinkRect


@dataclass
class Document:
    pages: List[Page]
    header: ResumeHeader = field(default_factory=ResumeHeader)
    links: List[LinkEntry] = field(default_factory=list)
    font_family: str = "times"

    @property
    def page_count(self) -> int:
        return len(self.pages)
