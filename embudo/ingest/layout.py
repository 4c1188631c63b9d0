"""EMBUDO — Layout Classifier.

Decides whether a grid is a daily sheet (one row per date) or a
transposed monthly sheet (one column per month), and where its header is.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from embudo.config import settings
from embudo.ingest.mapping import (
    DATE_KEYWORDS,
    SPEND_KEYWORDS,
    contains_keyword,
    normalize_header,
)
from embudo.ingest.tokenizer import RawGrid

MONTH_NUMBERS = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "september": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
    "deciembre": 12,
}

MIN_MONTH_COLUMNS = 3

_YEAR_RE = re.compile(r"20\d{2}")


class LayoutKind(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    NONE = "none"


@dataclass(frozen=True)
class Layout:
    kind: LayoutKind
    header_row_index: int = -1


def _scan_limit(grid: RawGrid, scan_rows: Optional[int]) -> int:
    return min(len(grid), scan_rows if scan_rows is not None else settings.header_scan_rows)


def is_daily_header(row: Sequence[str]) -> bool:
    cells = [normalize_header(c) for c in row]
    return contains_keyword(cells, DATE_KEYWORDS) and contains_keyword(cells, SPEND_KEYWORDS)


def month_of(cell: str) -> Optional[int]:
    """Month number of a header cell, e.g. 'Septiembre' -> 9."""
    return MONTH_NUMBERS.get(cell.lower().strip())


def is_monthly_header(row: Sequence[str]) -> bool:
    return sum(1 for c in row if month_of(c) is not None) >= MIN_MONTH_COLUMNS


def find_daily_header(grid: RawGrid, scan_rows: Optional[int] = None) -> int:
    for i in range(_scan_limit(grid, scan_rows)):
        if is_daily_header(grid[i]):
            return i
    return -1


def find_monthly_header(grid: RawGrid, scan_rows: Optional[int] = None) -> int:
    for i in range(_scan_limit(grid, scan_rows)):
        if is_monthly_header(grid[i]):
            return i
    return -1


def classify(grid: RawGrid, scan_rows: Optional[int] = None) -> Layout:
    """Daily detection first; monthly only if no daily header is found."""
    daily = find_daily_header(grid, scan_rows)
    if daily != -1:
        return Layout(LayoutKind.DAILY, daily)

    monthly = find_monthly_header(grid, scan_rows)
    if monthly != -1:
        return Layout(LayoutKind.MONTHLY, monthly)

    return Layout(LayoutKind.NONE)


def missing_keyword_groups(grid: RawGrid, scan_rows: Optional[int] = None) -> List[str]:
    """Which mandatory header groups never showed up in the scan window."""
    rows = [[normalize_header(c) for c in grid[i]] for i in range(_scan_limit(grid, scan_rows))]
    missing = []
    if not any(contains_keyword(r, DATE_KEYWORDS) for r in rows):
        missing.append(f"date ({', '.join(DATE_KEYWORDS)})")
    if not any(contains_keyword(r, SPEND_KEYWORDS) for r in rows):
        missing.append(f"spend ({', '.join(SPEND_KEYWORDS)})")
    if not missing:
        missing.append("date and spend in the same row")
    missing.append(f"months (at least {MIN_MONTH_COLUMNS} month names in one row)")
    return missing


def detect_year(header_row: Sequence[str], fallback: Optional[int] = None) -> int:
    """Year of a monthly sheet, from a '20xx' token anywhere in its header."""
    match = _YEAR_RE.search(" ".join(header_row))
    if match:
        return int(match.group(0))
    return fallback if fallback is not None else settings.fallback_year
