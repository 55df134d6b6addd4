"""
Text extraction from a WebReg List view printed/saved as PDF.

Table rows are re-joined with tabs so they look like a copy-paste from the
browser; pages without a detectable table fall back to their plain text.
"""

import logging

import pdfplumber

logger = logging.getLogger(__name__)


def extract_tables(pdf_path: str, strategy: str = "auto"):
    all_tables = []  # list of (page_index, table_index, rows)
    with pdfplumber.open(pdf_path) as pdf:
        for i, page in enumerate(pdf.pages, start=1):
            tables = []
            if strategy in ("auto", "lines"):
                tables = page.extract_tables({
                    "vertical_strategy": "lines",
                    "horizontal_strategy": "lines",
                }) or []
            if strategy == "text" or (strategy == "auto" and not tables):
                tables = page.extract_tables({
                    "vertical_strategy": "text",
                    "horizontal_strategy": "text",
                }) or []
            for t_idx, table in enumerate(tables, start=1):
                all_tables.append((i, t_idx, table))
    return all_tables


def _row_to_line(row: list) -> str:
    cells = [" ".join((c or "").split()) for c in row]
    return "\t".join(c for c in cells if c)


def pdf_to_text(pdf_path: str, strategy: str = "lines") -> str:
    """Schedule text of a PDF: tab-joined table rows, else page text."""
    lines: list[str] = []
    for page_idx, t_idx, table in extract_tables(pdf_path, strategy=strategy):
        logger.debug("Page %d table %d: %d rows", page_idx, t_idx, len(table))
        lines.extend(ln for ln in (_row_to_line(r) for r in table) if ln)
    if lines:
        return "\n".join(lines)

    logger.info("No tables found in %s; using page text", pdf_path)
    with pdfplumber.open(pdf_path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)
