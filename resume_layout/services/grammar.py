"""
Grammar classifier for generated resume text.

Every non-blank, trimmed line gets exactly one ``LineKind``. Rules are tried in
a fixed priority order (``CLASSIFICATION_RULES``); the first predicate that
matches wins. Classification never raises.

Also owns the header/body split: the upstream generator emits an optional
``KEY: value`` header block terminated by ``---RESUME_START---``.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


BOLD_DELIMITER = "**"
HEADER_SENTINEL = "---RESUME_START---"

KNOWN_HEADINGS = {
    "PROFESSIONAL SUMMARY", "TOOLS & TECHNOLOGIES", "PROFESSIONAL EXPERIENCE",
    "PROJECTS", "VOLUNTEER EXPERIENCE", "VOLUNTEERING", "EDUCATION", "CERTIFICATIONS",
}

_HEADING_RE = re.compile(r"^[A-Z\s&]+$")
_URL_SCHEME_RE = re.compile(r"https?://|www\.", re.IGNORECASE)
# "**" opens bold text, so a lone "*" only counts as a bullet glyph
_BULLET_RE = re.compile(r"^(?:•|-|\*(?!\*))\s*")
_LEADING_BULLETS_RE = re.compile(r"^(?:\s*(?:•|-|\*(?!\*)))+\s*")


class LineKind(Enum):
    HEADING = "heading"
    BOLD_TITLE = "bold_title"
    PIPE_ROW = "pipe_row"
    KEY_VALUE = "key_value"
    BULLETED = "bulleted"
    PLAIN = "plain"


@dataclass
class ClassifiedLine:
    """One source line with its kind and any sub-fields extracted for that kind."""
    text: str
    kind: LineKind
    content: str = ""                      # text with bullet glyph / bold wrapper removed
    fields: Tuple[str, ...] = ()           # PIPE_ROW parts, trimmed

    @property
    def is_bullet_prefixed(self) -> bool:
        return is_bulleted(self.text)


# ─── Rule predicates ───────────────────────────────────────────────────────

def is_heading(line: str) -> bool:
    if line in KNOWN_HEADINGS:
        return True
    return (
        bool(_HEADING_RE.match(line))
        and 2 < len(line) < 50
        and ":" not in line
        and "," not in line
    )


def is_bold_title(line: str) -> bool:
    return (
        len(line) > 2 * len(BOLD_DELIMITER)
        and line.startswith(BOLD_DELIMITER)
        and line.endswith(BOLD_DELIMITER)
    )


def is_pipe_row(line: str) -> bool:
    return "|" in line and not _URL_SCHEME_RE.search(line)


def is_key_value(line: str) -> bool:
    return ":" in line


def is_bulleted(line: str) -> bool:
    return bool(_BULLET_RE.match(line))


CLASSIFICATION_RULES: List[Tuple[LineKind, Callable[[str], bool]]] = [
    (LineKind.HEADING, is_heading),
    (LineKind.BOLD_TITLE, is_bold_title),
    (LineKind.PIPE_ROW, is_pipe_row),
    (LineKind.KEY_VALUE, is_key_value),
    (LineKind.BULLETED, is_bulleted),
]


# ─── Helpers shared with the record builder / renderers ────────────────────

def strip_bullet(line: str) -> str:
    """Remove leading bullet glyphs ("• ", "- ", "* ") and surrounding whitespace."""
    return _LEADING_BULLETS_RE.sub("", line.strip(), count=1).strip()


def strip_bold(text: str) -> str:
    return text.replace(BOLD_DELIMITER, "")


def split_pipe_fields(line: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in line.split("|"))


# ─── Classification ────────────────────────────────────────────────────────

def classify_line(line: str) -> ClassifiedLine:
    """Classify one trimmed, non-blank line. Total: always returns a kind."""
    for kind, predicate in CLASSIFICATION_RULES:
        if not predicate(line):
            continue
        if kind == LineKind.BOLD_TITLE:
            return ClassifiedLine(line, kind, content=line[len(BOLD_DELIMITER):-len(BOLD_DELIMITER)].strip())
        if kind == LineKind.PIPE_ROW:
            return ClassifiedLine(line, kind, content=strip_bullet(line), fields=split_pipe_fields(strip_bullet(line)))
        if kind in (LineKind.KEY_VALUE, LineKind.BULLETED):
            return ClassifiedLine(line, kind, content=strip_bullet(line))
        return ClassifiedLine(line, kind, content=line)
    return ClassifiedLine(line, LineKind.PLAIN, content=line)


def classify_lines(text: str) -> List[ClassifiedLine]:
    """Trim every line, drop blanks, classify the rest in source order."""
    classified = []
    for raw in (text or "").split("\n"):
        trimmed = raw.strip()
        if not trimmed:
            continue
        classified.append(classify_line(trimmed))
    return classified


# ─── Applicant header ──────────────────────────────────────────────────────

# Values the generator writes when it could not find a field
_MISSING_VALUES = {"", "not found", "empty string"}

HEADER_KEYS = {
    "name": "APPLICANT_NAME",
    "phone": "APPLICANT_PHONE",
    "email": "APPLICANT_EMAIL",
    "location": "APPLICANT_LOCATION",
    "linkedin": "APPLICANT_LINKEDIN",
    "github": "APPLICANT_GITHUB",
    "portfolio": "APPLICANT_PORTFOLIO",
    "role": "APPLICANT_ROLE",
    "company": "TARGET_COMPANY",
}


@dataclass
class ResumeHeader:
    """Applicant contact block. ``None`` means the field was not provided."""
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, attr) is None for attr in HEADER_KEYS)


def _header_value(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    value = raw.strip()
    if value.lower() in _MISSING_VALUES:
        return None
    return value


def split_header(text: str) -> Tuple[ResumeHeader, str]:
    """Split generator output into (header, body).

    Without the sentinel there is no structured header and the whole input is
    the body.
    """
    text = text or ""
    index = text.find(HEADER_SENTINEL)
    if index == -1:
        return ResumeHeader(), text

    header_part = text[:index]
    body = text[index + len(HEADER_SENTINEL):].lstrip()

    values = {}
    for attr, key in HEADER_KEYS.items():
        match = re.search(rf"^{key}:[ \t]*(.*)$", header_part, re.MULTILINE)
        values[attr] = _header_value(match.group(1)) if match else None

    header = ResumeHeader(**values)
    logger.info(
        f"[HEADER] Parsed header: "
        f"{sum(1 for v in values.values() if v is not None)}/{len(values)} fields present"
    )
    return header, body
