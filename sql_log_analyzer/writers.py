"""Report writers — xlsx workbook (openpyxl) and flat CSV."""

import csv
import logging
import re

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from sql_log_analyzer.report import PER_TABLE_SECTION, Block, Report

logger = logging.getLogger(__name__)

MAX_SHEET_NAME = 31
_ILLEGAL_SHEET_CHARS = re.compile(r"[\\/?*\[\]:]")

TITLE_FONT = Font(bold=True)
HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="D9D9D9", end_color="D9D9D9", fill_type="solid")
AVG_FORMAT = "0.000"


def safe_sheet_name(name: str, used: set[str]) -> str:
    """Sanitize *name* into a unique Excel sheet title (max 31 chars)."""
    base = _ILLEGAL_SHEET_CHARS.sub("_", name)[:MAX_SHEET_NAME] or "_"
    candidate = base
    idx = 1
    while candidate.lower() in used:
        suffix = f"_{idx}"
        idx += 1
        candidate = base[: max(1, MAX_SHEET_NAME - len(suffix))] + suffix
    used.add(candidate.lower())
    return candidate


def _write_block(ws, block: Block):
    if block.title:
        ws.append(list(block.title))
        for cell in ws[ws.max_row]:
            cell.font = TITLE_FONT

    ws.append(list(block.columns))
    for cell in ws[ws.max_row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL

    avg_col = block.columns.index("avg_ms") + 1 if "avg_ms" in block.columns else None
    for row in block.rows:
        ws.append(list(row))
        if avg_col:
            ws.cell(row=ws.max_row, column=avg_col).number_format = AVG_FORMAT

    # blank separator
    ws.append([])


def write_workbook(report: Report, path: str, sheet_per_table: bool = False):
    """Write every section as a worksheet.

    With *sheet_per_table* the PerTable section is split into one worksheet
    per table block instead.
    """
    wb = Workbook()
    wb.remove(wb.active)
    used: set[str] = set()

    for section in report.sections:
        if sheet_per_table and section.name == PER_TABLE_SECTION:
            for block in section.blocks:
                ws = wb.create_sheet(safe_sheet_name(block.name or "table", used))
                _write_block(ws, block)
            continue

        ws = wb.create_sheet(safe_sheet_name(section.name, used))
        for block in section.blocks:
            _write_block(ws, block)

    wb.save(path)
    logger.info("Workbook written to %s (%d sheet(s))", path, len(wb.worksheets))


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value).replace("\r", " ").replace("\n", " ")


def write_csv(report: Report, path: str):
    """Write the first block of a flat report as CSV with a header row."""
    block = report.sections[0].blocks[0]
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(block.columns)
        for row in block.rows:
            writer.writerow([_csv_value(v) for v in row])
    logger.info("CSV written to %s (%d row(s))", path, len(block.rows))
