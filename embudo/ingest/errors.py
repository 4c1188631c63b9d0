"""EMBUDO — Sheet parsing errors.

Every fatal parse failure carries a message good enough for the person who
pasted the sheet to fix it: what was expected and what was found.
"""

from typing import List, Sequence


class SheetParseError(ValueError):
    """Base class for fatal parse failures."""


class EmptyInputError(SheetParseError):
    """The input produced no rows at all."""

    def __init__(self):
        super().__init__("The sheet is empty: no rows with content were found.")


class UnrecognizedLayoutError(SheetParseError):
    """Neither a daily nor a monthly header was found in the scan window."""

    def __init__(self, first_row: Sequence[str], missing_groups: List[str], scanned_rows: int):
        self.first_row = list(first_row)
        self.missing_groups = missing_groups
        self.scanned_rows = scanned_rows
        missing = ", ".join(missing_groups) if missing_groups else "none"
        super().__init__(
            f"Could not detect a daily or monthly layout in the first {scanned_rows} rows. "
            f"Expected a header with date and spend columns, or at least 3 month names. "
            f"Missing keyword groups: {missing}. First row: {self.first_row}"
        )


class MissingMandatoryColumnError(SheetParseError):
    """A daily header was found but lacks a mandatory column."""

    def __init__(self, missing: List[str], headers: Sequence[str]):
        self.missing = missing
        self.headers = list(headers)
        super().__init__(
            f"Mandatory column(s) not found: {', '.join(missing)}. "
            f"Detected headers: {self.headers}"
        )


class NoRecordsError(SheetParseError):
    """A header was recognized but no data row produced a valid record."""

    def __init__(self, layout: str, header: Sequence[str]):
        self.layout = layout
        self.header = list(header)
        super().__init__(
            f"Detected a {layout} layout but no row produced a valid record "
            f"(check the date cells). Header: {self.header}"
        )
