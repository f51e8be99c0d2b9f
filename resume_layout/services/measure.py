"""
Text width measurement against PyMuPDF's base-14 fonts.

The layout engine never talks to a rendering backend directly; it receives a
``measure(text, font, bold) -> width`` callable. ``fitz_measure`` is the
production implementation and uses the same font names the PDF writer draws
with, so measured widths and drawn widths always agree.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


# family -> (regular, bold) base-14 font names understood by PyMuPDF
BASE14_FONTS: Dict[str, Tuple[str, str]] = {
    "times": ("tiro", "tibo"),
    "helvetica": ("helv", "hebo"),
    "courier": ("cour", "cobo"),
}


@dataclass(frozen=True)
class FontSpec:
    """Font family + point size. Bold/normal is chosen per run."""
    family: str = "times"
    size: float = 12.0

    def fontname(self, bold: bool) -> str:
        regular, heavy = BASE14_FONTS.get(self.family, BASE14_FONTS["times"])
        return heavy if bold else regular

    def with_size(self, size: float) -> "FontSpec":
        return FontSpec(family=self.family, size=size)


MeasureFn = Callable[[str, FontSpec, bool], float]


def fitz_measure(text: str, font: FontSpec, bold: bool) -> float:
    """Measure the rendered width of ``text`` in points."""
    if not text:
        return 0.0
    return fitz.get_text_length(text, fontname=font.fontname(bold), fontsize=font.size)


def resolve_family(family: str) -> str:
    """Map a configured family onto a supported base-14 family."""
    key = (family or "").strip().lower()
    if key not in BASE14_FONTS:
        logger.warning(f"[FONT] Unknown font family '{family}', falling back to times")
        return "times"
    return key
