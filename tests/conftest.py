import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from resume_layout.services.measure import FontSpec
from resume_layout.services.paginator import PageGeometry


def fake_measure(text, font, bold):
    """Half an em per character, regardless of style. Keeps expected x positions exact."""
    return len(text) * font.size / 2


SAMPLE_RESUME = """APPLICANT_NAME: Jane Doe
APPLICANT_PHONE: +1 555 0100
APPLICANT_EMAIL: jane@example.com
APPLICANT_LOCATION: Austin, TX
APPLICANT_LINKEDIN: linkedin.com/in/janedoe
APPLICANT_GITHUB: Not Found
APPLICANT_PORTFOLIO: Empty string
APPLICANT_ROLE: Senior Backend Engineer
TARGET_COMPANY: Target Company
---RESUME_START---
PROFESSIONAL SUMMARY
Backend engineer with **8 years** of experience building data platforms.

TOOLS & TECHNOLOGIES
**Languages:** Python, Go, SQL
**Cloud:** AWS, GCP

PROFESSIONAL EXPERIENCE
Acme Corp | Austin, TX | Jan 2020 - Present
Senior Backend Engineer
Business Problem: Nightly batch jobs missed their SLA.
• Rebuilt the pipeline on **Kafka**, cutting latency by 80%
• Led migration to AWS | https://example.com/aws-case
Technology Stack: Python, Kafka, AWS

Globex, Jun 2016 - Dec 2019
Software Engineer
Business Problem: Reporting was manual.
• Automated weekly reports
Technology Stack: Django, PostgreSQL

PROJECTS
**Resume Builder**
• Built a layout engine for generated resumes

EDUCATION
University of Texas | BS Computer Science | 2012 - 2016

CERTIFICATIONS
• AWS Solutions Architect | https://aws.amazon.com/certification
• Certified Scrum Master
"""

SAMPLE_LINK_URLS = {
    "mailto:jane@example.com",
    "https://linkedin.com/in/janedoe",
    "https://example.com/aws-case",
    "https://aws.amazon.com/certification",
}


def long_resume(jobs=30, bullets=8):
    lines = ["PROFESSIONAL EXPERIENCE"]
    for n in range(jobs):
        lines.append(f"Company {n} | Remote | 2010 - 2011")
        lines.append(f"Engineer {n}")
        lines.append(f"Business Problem: problem {n} needed solving across several teams")
        for b in range(bullets):
            lines.append(f"• Accomplishment {b} for company {n} with **measurable** impact")
        lines.append("Technology Stack: Python, PostgreSQL")
    return "\n".join(lines)


@pytest.fixture
def measure():
    return fake_measure


@pytest.fixture
def font():
    return FontSpec()


@pytest.fixture
def geometry():
    return PageGeometry(width=595.0, height=842.0)


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME
