"""EMBUDO — Record Builder.

Assembles DailyRecords out of a classified grid. Rows with unusable dates
are dropped, unreadable numbers become 0.
"""

import re
from typing import Dict, List, Optional, Sequence

from embudo.core.metric_registry import FieldKey, NUMERIC_FIELDS
from embudo.ingest.layout import detect_year, month_of
from embudo.ingest.mapping import NOT_FOUND, ColumnMap, map_columns, map_row_label, unmatched_columns
from embudo.ingest.numbers import parse_value
from embudo.ingest.tokenizer import RawGrid
from embudo.models.record_models import DailyRecord, to_iso_date
from embudo.core.logging import get_logger

logger = get_logger("ingest.builder")

_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$")


def normalize_date(cell: str) -> Optional[str]:
    """'1/12/25' -> '2025-12-01'. ISO dates pass through; anything else is None."""
    text = cell.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    text = text.strip()

    match = _DMY_RE.match(text)
    if match:
        day, month, year = match.groups()
        if len(year) == 2:
            year = "20" + year
        text = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return to_iso_date(text)


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _sorted_records(by_date: Dict[str, DailyRecord]) -> List[DailyRecord]:
    return [by_date[d] for d in sorted(by_date)]


# ─────────────────────────────────────────────
# DAILY LAYOUT
# ─────────────────────────────────────────────


def build_daily_record(row: Sequence[str], column_map: ColumnMap) -> Optional[DailyRecord]:
    """One record from one data row, or None if the date is unusable."""

    def raw(idx: int) -> str:
        return row[idx] if 0 <= idx < len(row) else ""

    date = normalize_date(raw(column_map[FieldKey.DATE]))
    if date is None:
        return None

    values: Dict[str, float] = {}
    for key, idx in column_map.items():
        if key in (FieldKey.DATE, FieldKey.FACTURADO):
            continue
        values[key.value] = parse_value(raw(idx)) if idx != NOT_FOUND else 0.0

    revenue = parse_value(raw(column_map[FieldKey.FACTURADO]))
    values["revenue"] = revenue
    values["facturado"] = revenue
    values["roas"] = _safe_ratio(revenue, values["spend"])

    return DailyRecord(date=date, **values)


def build_daily_records(grid: RawGrid, header_row_index: int) -> List[DailyRecord]:
    """Records for every data row below a daily header."""
    header = grid[header_row_index]
    column_map = map_columns(header)
    logger.debug(f"Columns not present in sheet: {unmatched_columns(column_map)}")

    by_date: Dict[str, DailyRecord] = {}
    dropped = 0
    for row in grid[header_row_index + 1:]:
        record = build_daily_record(row, column_map)
        if record is None:
            dropped += 1
            continue
        by_date[record.date] = record

    if dropped:
        logger.debug(f"Dropped {dropped} rows without a valid date")
    return _sorted_records(by_date)


# ─────────────────────────────────────────────
# MONTHLY (TRANSPOSED) LAYOUT
# ─────────────────────────────────────────────


def month_columns(header: Sequence[str], year: int) -> Dict[int, str]:
    """Column index -> first-of-month ISO date for every month column."""
    columns: Dict[int, str] = {}
    for idx, cell in enumerate(header):
        month = month_of(cell)
        if month is not None:
            columns[idx] = f"{year}-{month:02d}-01"
    return columns


def _apply_monthly_fallbacks(values: Dict[str, float]) -> None:
    if values["revenue"] == 0 and values["ventas"]:
        values["revenue"] = values["ventas"]
    values["facturado"] = values["revenue"]

    if values["roas"] == 0:
        values["roas"] = _safe_ratio(values["revenue"], values["spend"])
    if values["cpl"] == 0:
        values["cpl"] = _safe_ratio(values["spend"], values["leads"])


def build_monthly_records(
    grid: RawGrid, header_row_index: int, year: Optional[int] = None
) -> List[DailyRecord]:
    """One record per month column, filled from the labelled metric rows below."""
    header = grid[header_row_index]
    if year is None:
        year = detect_year(header)

    columns = month_columns(header, year)
    data: Dict[str, Dict[str, float]] = {
        date: {k.value: 0.0 for k in NUMERIC_FIELDS} for date in columns.values()
    }

    for row in grid[header_row_index + 1:]:
        key = map_row_label(row)
        if key is None:
            continue
        for idx, date in columns.items():
            if idx < len(row):
                data[date][key.value] = parse_value(row[idx])

    records: Dict[str, DailyRecord] = {}
    for date, values in data.items():
        _apply_monthly_fallbacks(values)
        records[date] = DailyRecord(date=date, **values)
    return _sorted_records(records)
