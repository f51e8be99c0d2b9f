"""
Record builder: classified lines -> section records -> per-section structures.

Sections follow heading order exactly. The experience section runs a small
state machine per job (HEADER -> PROBLEM -> ACCOMPLISHMENTS) that degrades
line-by-line instead of failing: a missing "Business Problem:" line still
advances the state, a missing "Technology Stack:" line closes the entry at the
next job header or at section end, and stray lines after a closed entry are
kept in ``trailing_unparsed``.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from resume_layout.services.grammar import (
    ClassifiedLine,
    LineKind,
    classify_line,
    split_pipe_fields,
    strip_bold,
    strip_bullet,
)
from resume_layout.services.links import parse_link_pair

logger = logging.getLogger(__name__)


PROBLEM_PREFIX = "Business Problem:"
TECH_STACK_PREFIX = "Technology Stack:"


class SectionKind(Enum):
    SUMMARY = "summary"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    PROJECTS_OR_VOLUNTEERING = "projects_or_volunteering"
    EDUCATION = "education"
    CERTIFICATIONS = "certifications"
    OTHER = "other"


SECTION_ALIASES = {
    "PROFESSIONAL SUMMARY": SectionKind.SUMMARY,
    "SUMMARY": SectionKind.SUMMARY,
    "OBJECTIVE": SectionKind.SUMMARY,
    "TOOLS & TECHNOLOGIES": SectionKind.SKILLS,
    "SKILLS": SectionKind.SKILLS,
    "TECHNICAL SKILLS": SectionKind.SKILLS,
    "CORE COMPETENCIES": SectionKind.SKILLS,
    "PROFESSIONAL EXPERIENCE": SectionKind.EXPERIENCE,
    "EXPERIENCE": SectionKind.EXPERIENCE,
    "WORK EXPERIENCE": SectionKind.EXPERIENCE,
    "PROJECTS": SectionKind.PROJECTS_OR_VOLUNTEERING,
    "PROJECT EXPERIENCE": SectionKind.PROJECTS_OR_VOLUNTEERING,
    "VOLUNTEER EXPERIENCE": SectionKind.PROJECTS_OR_VOLUNTEERING,
    "VOLUNTEERING": SectionKind.PROJECTS_OR_VOLUNTEERING,
    "EDUCATION": SectionKind.EDUCATION,
    "CERTIFICATIONS": SectionKind.CERTIFICATIONS,
    "CERTIFICATES": SectionKind.CERTIFICATIONS,
}


# ─── Data classes ───────────────────────────────────────────────────────────

@dataclass
class SectionRecord:
    kind: SectionKind
    title: str
    lines: List[str] = field(default_factory=list)


@dataclass
class ResumeBody:
    """Sections in source order, plus any body lines that precede the first heading."""
    preamble: List[str] = field(default_factory=list)
    sections: List[SectionRecord] = field(default_factory=list)


@dataclass
class JobHeader:
    company: str
    dates: str = ""
    location: Optional[str] = None


@dataclass
class EntryRecord:
    """One job inside the experience section."""
    company_line: str
    role_line: str = ""
    header: Optional[JobHeader] = None
    business_problem: Optional[str] = None
    problem_fallback: Optional[str] = None   # line consumed in the problem slot without the label
    accomplishments: List[str] = field(default_factory=list)
    tech_stack_line: Optional[str] = None
    trailing_unparsed: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.header is None:
            self.header = split_company_line(self.company_line)

    @property
    def is_closed(self) -> bool:
        return self.tech_stack_line is not None


@dataclass
class ProjectItem:
    title: Optional[str]
    accomplishments: List[str] = field(default_factory=list)


@dataclass
class EducationRow:
    fields: Tuple[str, ...]

    @property
    def is_tabular(self) -> bool:
        return len(self.fields) == 3


@dataclass
class CertificationItem:
    fields: Tuple[str, ...]

    @property
    def is_link(self) -> bool:
        return len(self.fields) == 2


# ─── Sections ──────────────────────────────────────────────────────────────

def section_kind_for(title: str) -> SectionKind:
    return SECTION_ALIASES.get(title.strip(), SectionKind.OTHER)


def build_sections(classified: List[ClassifiedLine]) -> ResumeBody:
    """Group lines under the heading that precedes them."""
    body = ResumeBody()
    current: Optional[SectionRecord] = None

    for cl in classified:
        if cl.kind == LineKind.HEADING:
            current = SectionRecord(kind=section_kind_for(cl.text), title=cl.text)
            body.sections.append(current)
            continue
        if current is None:
            body.preamble.append(cl.text)
        else:
            current.lines.append(cl.text)

    logger.info(
        f"[RECORDS] {len(body.sections)} sections "
        f"({', '.join(s.title for s in body.sections)}), {len(body.preamble)} preamble lines"
    )
    return body


# ─── Experience ────────────────────────────────────────────────────────────

_MONTHS = (
    "january", "february", "march", "april", "may", "june", "july", "august",
    "september", "october", "november", "december",
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec",
)
DATE_VOCABULARY = frozenset(("to", "-", "present", "current") + _MONTHS)
_YEAR_RE = re.compile(r"^\d{4}$")
_DATE_ANCHOR_RE = re.compile(r"\d{4}|present|current", re.IGNORECASE)


def _is_date_token(token: str) -> bool:
    word = token.lower().replace(".", "").replace(",", "")
    if not word:
        return False
    return word in DATE_VOCABULARY or bool(_YEAR_RE.match(word))


def find_trailing_dates(line: str) -> Optional[Tuple[str, str]]:
    """Scan right-to-left for a trailing date phrase.

    Returns (company, dates) or None when the recovered window has no year /
    present / current anchor, or when nothing is left for the company name.
    """
    words = line.split()
    start = len(words)
    for j in range(len(words) - 1, -1, -1):
        if not _is_date_token(words[j]):
            break
        start = j

    if start >= len(words) or start == 0:
        return None

    dates = " ".join(words[start:]).strip()
    if not _DATE_ANCHOR_RE.search(dates):
        return None

    company = " ".join(words[:start]).strip()
    if company.endswith(","):
        company = company[:-1].strip()
    return company, dates


def _clean_pipe_fields(line: str) -> Optional[Tuple[str, ...]]:
    cl = classify_line(strip_bold(line).strip())
    if cl.kind != LineKind.PIPE_ROW or cl.is_bullet_prefixed:
        return None
    fields = cl.fields
    if len(fields) not in (2, 3) or not all(fields):
        return None
    return fields


def is_clean_pipe_header(line: str) -> bool:
    return _clean_pipe_fields(line) is not None


def split_company_line(line: str) -> JobHeader:
    """Company / location / dates from a job header line, never failing."""
    fields = _clean_pipe_fields(line)
    if fields is not None:
        if len(fields) == 3:
            return JobHeader(company=fields[0], location=fields[1], dates=fields[2])
        return JobHeader(company=fields[0], dates=fields[1])

    cleaned = strip_bold(line).strip()
    recovered = find_trailing_dates(cleaned)
    if recovered is None:
        logger.info(f"[EXPERIENCE] No date window in header, using whole line: '{cleaned[:60]}'")
        return JobHeader(company=cleaned, dates="")
    company, dates = recovered
    return JobHeader(company=company, dates=dates)


def _is_labeled(line: str) -> bool:
    return line.startswith(PROBLEM_PREFIX) or line.startswith(TECH_STACK_PREFIX)


def _looks_like_job_header(line: str) -> bool:
    if is_clean_pipe_header(line):
        return True
    if _is_labeled(line) or classify_line(line).is_bullet_prefixed:
        return False
    return find_trailing_dates(strip_bold(line).strip()) is not None


def _takes_role(lines: List[str], i: int) -> bool:
    """Whether ``lines[i]`` is the role line of the header just read.

    A pipe-row there is still the role when "Business Problem:" follows it;
    otherwise it is the next job's header.
    """
    following = lines[i].strip()
    if not following or _is_labeled(following):
        return False
    if not is_clean_pipe_header(following):
        return True
    return i + 1 < len(lines) and lines[i + 1].strip().startswith(PROBLEM_PREFIX)


def build_entries(lines: List[str]) -> List[EntryRecord]:
    """Run the HEADER / PROBLEM / ACCOMPLISHMENTS machine over an experience section."""
    entries: List[EntryRecord] = []
    current: Optional[EntryRecord] = None
    state = "HEADER"
    i = 0

    while i < len(lines):
        line = lines[i].strip()
        i += 1
        if not line:
            continue

        if line.startswith(TECH_STACK_PREFIX) and current is not None and not current.is_closed:
            current.tech_stack_line = line[len(TECH_STACK_PREFIX):].strip()
            state = "HEADER"
            continue

        if state == "HEADER":
            if current is not None and not _looks_like_job_header(line):
                logger.warning(f"[EXPERIENCE] Unparsed line after entry '{current.header.company}': '{line[:60]}'")
                current.trailing_unparsed.append(line)
                continue

            role = ""
            if i < len(lines) and _takes_role(lines, i):
                role = strip_bold(lines[i].strip())
                i += 1
            current = EntryRecord(company_line=line, role_line=role)
            entries.append(current)
            state = "PROBLEM"
            continue

        if state == "PROBLEM":
            if line.startswith(PROBLEM_PREFIX):
                current.business_problem = line[len(PROBLEM_PREFIX):].strip()
            else:
                logger.info(f"[EXPERIENCE] Missing '{PROBLEM_PREFIX}' for '{current.header.company}', keeping line as text")
                current.problem_fallback = line
            state = "ACCOMPLISHMENTS"
            continue

        # ACCOMPLISHMENTS
        if is_clean_pipe_header(line):
            logger.warning(f"[EXPERIENCE] Entry '{current.header.company}' closed without '{TECH_STACK_PREFIX}'")
            # reprocess this line as the next header
            i -= 1
            current = None
            state = "HEADER"
            continue
        if line.startswith(PROBLEM_PREFIX) and current.business_problem is None and not current.accomplishments:
            # problem slot was taken by an unlabeled line
            current.business_problem = line[len(PROBLEM_PREFIX):].strip()
            continue
        current.accomplishments.append(line)

    if current is not None and state != "HEADER" and not current.is_closed:
        logger.warning(f"[EXPERIENCE] Entry '{current.header.company}' reached section end without '{TECH_STACK_PREFIX}'")

    return entries


# ─── Projects / education / certifications ─────────────────────────────────

def build_project_items(lines: List[str]) -> List[ProjectItem]:
    items: List[ProjectItem] = []
    current: Optional[ProjectItem] = None
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        cl = classify_line(line)
        if cl.kind == LineKind.BOLD_TITLE:
            current = ProjectItem(title=strip_bold(cl.content))
            items.append(current)
            continue
        if current is None:
            current = ProjectItem(title=None)
            items.append(current)
        current.accomplishments.append(cl.text)
    return items


def build_education_rows(lines: List[str]) -> List[EducationRow]:
    rows = []
    for raw in lines:
        cleaned = strip_bold(raw).strip()
        if not cleaned:
            continue
        fields = split_pipe_fields(cleaned)
        if len(fields) == 3:
            rows.append(EducationRow(fields=fields))
        else:
            rows.append(EducationRow(fields=(cleaned,)))
    return rows


def build_certification_items(lines: List[str]) -> List[CertificationItem]:
    items = []
    for raw in lines:
        cleaned = strip_bold(strip_bullet(raw))
        if not cleaned:
            continue
        pair = parse_link_pair(cleaned)
        if pair is not None:
            items.append(CertificationItem(fields=(pair.label, pair.url)))
        else:
            items.append(CertificationItem(fields=(cleaned,)))
    return items
