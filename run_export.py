#!/usr/bin/env python3
"""Lay out a generated resume text file and write it as a PDF."""

import argparse
import logging
import os
import sys

from resume_layout.core.config import settings
from resume_layout.services.layout_engine import layout_resume
from resume_layout.services.paginator import PageGeometry
from resume_layout.services.pdf_writer import export_filename, write_pdf


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("input", help="text file with the generated resume")
    parser.add_argument("-o", "--output", help="output PDF path (default: derived from the header)")
    parser.add_argument("--page-format", choices=["a4", "letter"], default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)

    if not os.path.exists(args.input):
        print(f"ERROR: Input file not found: {args.input}", file=sys.stderr)
        return 1

    with open(args.input, encoding="utf-8") as f:
        text = f.read()

    print(f"Input: {args.input} ({len(text)} chars)")
    document = layout_resume(text, geometry=PageGeometry.from_settings(args.page_format))
    output = args.output or export_filename(document.header)
    write_pdf(document, output)

    print(f"Pages: {document.page_count}")
    print(f"Links: {len(document.links)}")
    for entry in document.links:
        print(f"  [page {entry.page_index + 1}] {entry.rect.url}")

    size_kb = os.path.getsize(output) / 1024
    print(f"\nOutput saved: {output} ({size_kb:.1f} KB)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
