"""EMBUDO — Sheet Parse Pipeline.

    raw text → tokenize → classify → map → build → List[DailyRecord]

Pure and synchronous: the same text always yields the same records.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from embudo.config import settings
from embudo.ingest.builder import build_daily_records, build_monthly_records
from embudo.ingest.errors import EmptyInputError, NoRecordsError, UnrecognizedLayoutError
from embudo.ingest.layout import Layout, LayoutKind, classify, find_monthly_header, missing_keyword_groups
from embudo.ingest.tokenizer import CSV_DELIMITERS, PASTE_DELIMITERS, RawGrid, tokenize
from embudo.models.record_models import DailyRecord
from embudo.core.logging import get_logger

logger = get_logger("ingest.parser")


@dataclass
class ParseResult:
    layout: LayoutKind
    header_row_index: int
    records: List[DailyRecord] = field(default_factory=list)


def parse_grid(grid: RawGrid, scan_rows: Optional[int] = None) -> ParseResult:
    """Classify a tokenized grid and build its records.

    Raises a SheetParseError subclass when the grid is empty, no layout is
    recognized, or the recognized layout yields no valid record.
    """
    if not grid:
        raise EmptyInputError()

    scan = scan_rows if scan_rows is not None else settings.header_scan_rows
    layout = classify(grid, scan)

    if layout.kind == LayoutKind.DAILY:
        records = build_daily_records(grid, layout.header_row_index)
        if records:
            logger.info(
                f"Detected daily layout (header row {layout.header_row_index}), {len(records)} records",
                extra={"layout": layout.kind.value, "records": len(records)},
            )
            return ParseResult(layout.kind, layout.header_row_index, records)

        # A daily-looking header with no usable dates may still sit above a monthly table
        monthly_index = find_monthly_header(grid, scan)
        if monthly_index == -1:
            raise NoRecordsError(layout.kind.value, grid[layout.header_row_index])
        logger.info("Daily header produced no records, falling back to monthly layout")
        layout = Layout(LayoutKind.MONTHLY, monthly_index)

    if layout.kind == LayoutKind.MONTHLY:
        records = build_monthly_records(grid, layout.header_row_index)
        if not records:
            raise NoRecordsError(layout.kind.value, grid[layout.header_row_index])
        logger.info(
            f"Detected monthly transposed layout (header row {layout.header_row_index}), {len(records)} records",
            extra={"layout": layout.kind.value, "records": len(records)},
        )
        return ParseResult(layout.kind, layout.header_row_index, records)

    raise UnrecognizedLayoutError(grid[0], missing_keyword_groups(grid, scan), min(len(grid), scan))


def parse_text(text: str, delimiters: str = CSV_DELIMITERS, scan_rows: Optional[int] = None) -> ParseResult:
    return parse_grid(tokenize(text, delimiters), scan_rows)


def parse_csv(text: str) -> List[DailyRecord]:
    """Records from a CSV export (comma separated)."""
    return parse_text(text, CSV_DELIMITERS).records


def parse_pasted(text: str) -> List[DailyRecord]:
    """Records from a table pasted out of Excel / Sheets (tab or comma separated)."""
    return parse_text(text, PASTE_DELIMITERS).records
