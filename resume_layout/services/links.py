"""
Link registry: "label | URL" pairs and their clickable rectangles.

A line is a link pair only when it splits on "|" into exactly two trimmed parts
and the second starts with http(s):// or www. (normalized to https://).
mailto: addresses never pair.

Wrapped labels are kept on one page and are clickable on their first
rendered line only.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from resume_layout.services.drawing import LINK_COLOR, FontStyle, LinkEntry, LinkRect
from resume_layout.services.inline import wrap_plain
from resume_layout.services.measure import FontSpec, MeasureFn
from resume_layout.services.paginator import Cell, Paginator

logger = logging.getLogger(__name__)

_LINK_TARGET_RE = re.compile(r"^(https?://|www\.)", re.IGNORECASE)

# Hit-region relative to the baseline, as a fraction of the font size
LINK_ASCENT_RATIO = 10.0 / 12.0


@dataclass(frozen=True)
class LinkPair:
    label: str
    url: str


def normalize_url(url: str) -> str:
    url = url.strip()
    if url.lower().startswith("www."):
        return f"https://{url}"
    return url


def parse_link_pair(line: str) -> Optional[LinkPair]:
    parts = [p.strip() for p in line.split("|")]
    if len(parts) != 2 or not _LINK_TARGET_RE.match(parts[1]):
        return None
    return LinkPair(label=parts[0], url=normalize_url(parts[1]))


def profile_url(value: str) -> str:
    """Header profile fields may omit the scheme entirely ("linkedin.com/in/x")."""
    value = value.strip()
    return value if value.lower().startswith("http") else f"https://{value}"


@dataclass
class LinkRegistry:
    measure: MeasureFn
    entries: List[LinkEntry] = field(default_factory=list)

    def register(
        self,
        paginator: Paginator,
        x: float,
        baseline: float,
        text: str,
        font: FontSpec,
        style: FontStyle,
        url: str,
    ) -> LinkRect:
        """Record a hit-region exactly as wide as ``text`` drawn in ``font``/``style``."""
        width = self.measure(text, font, style.is_bold)
        rect = LinkRect(
            x=x,
            y=baseline - font.size * LINK_ASCENT_RATIO,
            w=width,
            h=font.size,
            url=url,
        )
        paginator.current_page.ops.append(rect)
        self.entries.append(LinkEntry(page_index=paginator.page_index, rect=rect))
        logger.debug(f"[LINKS] page {paginator.page_index + 1}: '{text[:40]}' -> {url}")
        return rect


def place_link_label(
    paginator: Paginator,
    registry: LinkRegistry,
    font: FontSpec,
    pair: LinkPair,
    x: float,
    width: float,
    lead: Sequence[Cell] = (),
) -> None:
    """Draw a link label wrapped to ``width``; only the first sub-line is clickable."""
    lines = wrap_plain(pair.label, font, width, registry.measure)
    paginator.reserve(len(lines) * paginator.line_height)
    for j, text in enumerate(lines):
        cells = list(lead) if j == 0 else []
        cells.append(Cell(text, x, FontStyle.NORMAL))
        # place first so a page break lands the rect on the page the text is on
        baseline = paginator.place_runs(cells, color=LINK_COLOR) - paginator.line_height
        if j == 0:
            registry.register(paginator, x, baseline, text, font, FontStyle.NORMAL, pair.url)
