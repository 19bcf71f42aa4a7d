"""Citation table exports: CSV and Excel."""

import csv
import logging
from typing import Sequence

import openpyxl

from citetrend.exporters.summary import SUMMARY_FIELDS, summarize_publications
from citetrend.series.models import DenseCitationRow
from citetrend.series.pipeline import TABLE_COLUMNS

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────


def _table_rows(rows: Sequence[DenseCitationRow]) -> list[list]:
    return [[getattr(r, c) for c in TABLE_COLUMNS] for r in rows]


# ── CSV Export ───────────────────────────────────────────────────────


def export_table_csv(rows: Sequence[DenseCitationRow], output_path: str) -> None:
    """Export the dense citation table as CSV, one row per publication-year."""
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(TABLE_COLUMNS)
        writer.writerows(_table_rows(rows))

    logger.info("Citation CSV exported to %s (%d rows)", output_path, len(rows))


# ── Excel Export ─────────────────────────────────────────────────────


def export_table_excel(rows: Sequence[DenseCitationRow], output_path: str) -> None:
    """Export the citation table as Excel with a per-publication sheet."""
    wb = openpyxl.Workbook()

    ws1 = wb.active
    ws1.title = "Citation Table"
    ws1.append(TABLE_COLUMNS)
    for row in _table_rows(rows):
        ws1.append(row)
    _style_header(ws1)

    ws2 = wb.create_sheet("Publications")
    ws2.append(SUMMARY_FIELDS)
    for summary in summarize_publications(rows):
        ws2.append([summary[f] for f in SUMMARY_FIELDS])
    _style_header(ws2)

    wb.save(output_path)
    logger.info("Citation Excel exported to %s", output_path)


def _style_header(ws) -> None:
    """Bold the header row."""
    from openpyxl.styles import Font
    for cell in ws[1]:
        cell.font = Font(bold=True)
