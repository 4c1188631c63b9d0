"""EMBUDO — Row Tokenizer.

Quote-aware scanner turning exported or pasted sheet text into a grid of
string cells. Quoted cells may contain delimiters and newlines.
"""

import csv
import io
from typing import List

RawGrid = List[List[str]]

CSV_DELIMITERS = ","
PASTE_DELIMITERS = ",\t"  # Excel/Sheets copy uses tabs, CSV uses commas

_BOM = "\ufeff"


def _is_blank(row: List[str]) -> bool:
    return not any(cell.strip() for cell in row)


def tokenize(text: str, delimiters: str = CSV_DELIMITERS) -> RawGrid:
    """Split `text` into rows of cells.

    Any character in `delimiters` separates cells outside quotes. A doubled
    quote inside quotes is a literal quote. Rows whose cells are all blank
    are dropped.
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    rows: RawGrid = []
    row: List[str] = []
    cell: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if char == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                cell.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char in delimiters and not in_quotes:
            row.append("".join(cell))
            cell = []
        elif char in "\r\n" and not in_quotes:
            if char == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            row.append("".join(cell))
            if not _is_blank(row):
                rows.append(row)
            row = []
            cell = []
        else:
            cell.append(char)
        i += 1

    if cell or row:
        row.append("".join(cell))
        if not _is_blank(row):
            rows.append(row)

    return rows


def to_csv(grid: RawGrid, delimiter: str = ",") -> str:
    """Serialize a grid with the quoting convention `tokenize` reads back."""
    out = io.StringIO(newline="")
    # "\r\n" terminator makes the writer quote cells holding a lone CR or LF
    writer = csv.writer(out, delimiter=delimiter, lineterminator="\r\n")
    for row in grid:
        writer.writerow(row)
    return out.getvalue()
