"""
Inline formatter: bold-run splitting + greedy word wrap.

Widths come from a host-supplied ``measure(text, font, bold)`` so this module
has no rendering-backend dependency. Whitespace is kept as its own token, so
joining every run of every wrapped line gives back the input text (minus the
``**`` delimiters) with bold parity intact.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from resume_layout.services.grammar import BOLD_DELIMITER, strip_bold
from resume_layout.services.measure import FontSpec, MeasureFn

_TOKEN_RE = re.compile(r"(\s+)")


@dataclass
class StyledRun:
    """A same-style stretch of text on one wrapped line. ``x`` is relative to the column start."""
    text: str
    bold: bool
    x: float = 0.0
    width: float = 0.0


@dataclass
class StyledLine:
    runs: List[StyledRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)

    @property
    def width(self) -> float:
        if not self.runs:
            return 0.0
        last = self.runs[-1]
        return last.x + last.width

    @property
    def is_empty(self) -> bool:
        return not self.runs

    def append(self, token: str, bold: bool, x: float, width: float) -> None:
        if self.runs and self.runs[-1].bold == bold:
            self.runs[-1].text += token
            self.runs[-1].width += width
        else:
            self.runs.append(StyledRun(text=token, bold=bold, x=x, width=width))


def split_bold_runs(text: str) -> List[Tuple[str, bool]]:
    """Split on ``**`` into alternating (plain, bold, plain, ...) runs.

    An unpaired trailing delimiter stays literal in the preceding plain run,
    so bold never stays open past the end of a line.
    """
    parts = text.split(BOLD_DELIMITER)
    if len(parts) % 2 == 0:
        parts = parts[:-2] + [parts[-2] + BOLD_DELIMITER + parts[-1]]
    return [(part, idx % 2 == 1) for idx, part in enumerate(parts) if part]


def _wrap_runs(
    runs: List[Tuple[str, bool]],
    font: FontSpec,
    column_width: float,
    measure: MeasureFn,
    first_indent: float = 0.0,
) -> List[StyledLine]:
    lines: List[StyledLine] = [StyledLine()]
    x = first_indent

    for run_text, bold in runs:
        for token in _TOKEN_RE.split(run_text):
            if not token:
                continue
            width = measure(token, font, bold)
            current = lines[-1]
            overflows = x + width > column_width
            # an over-wide token on an empty line is placed anyway (forced overflow)
            if overflows and not token.isspace() and (not current.is_empty or x > 0):
                current = StyledLine()
                lines.append(current)
                x = 0.0
            current.append(token, bold, x, width)
            x += width

    return lines


def wrap(
    line: str,
    font: FontSpec,
    column_width: float,
    measure: MeasureFn,
    first_indent: float = 0.0,
) -> List[StyledLine]:
    """Wrap ``line`` (with ``**bold**`` markup) into styled sub-lines.

    Args:
        first_indent: horizontal offset of the first sub-line only, used when
            an inline label occupies the start of the first line.
    """
    return _wrap_runs(split_bold_runs(line), font, column_width, measure, first_indent)


def wrap_plain(
    text: str,
    font: FontSpec,
    column_width: float,
    measure: MeasureFn,
    bold: bool = False,
) -> List[str]:
    """Wrap text in a single style (markup removed) and return the line strings."""
    lines = _wrap_runs([(strip_bold(text), bold)], font, column_width, measure)
    return [ln.text.strip() for ln in lines if ln.text.strip()] or [""]
