"""EMBUDO — Numeric Token Parser.

Resolves one spreadsheet cell into a float. Sheets come from Spanish-locale
exports, so a lone comma is read as the decimal separator and dotted
thousands groups ("34.697") are read as thousands.
"""

import math
import re
from typing import Any

_NON_NUMERIC_RE = re.compile(r"[^0-9.,\-]")
# "34.697", "2.000.000": dot used as a thousands separator
_DOT_THOUSANDS_RE = re.compile(r"-?[1-9]\d{0,2}(\.\d{3})+")
# Longest leading float, the way a spreadsheet parseFloat reads "12.5abc"
_FLOAT_PREFIX_RE = re.compile(r"-?(\d+\.?\d*|\.\d+)")


def _normalize_separators(clean: str) -> str:
    has_dot = "." in clean
    has_comma = "," in clean

    if has_dot and has_comma:
        if clean.rfind(",") > clean.rfind("."):
            # 1.234,56 (EU/ES)
            return clean.replace(".", "").replace(",", ".", 1)
        # 1,234.56 (US)
        return clean.replace(",", "")

    if has_comma:
        # Only comma: decimal separator. "1,200" reads as 1.2.
        return clean.replace(",", ".", 1)

    if has_dot and _DOT_THOUSANDS_RE.fullmatch(clean):
        return clean.replace(".", "")

    return clean


def parse_value(raw: Any) -> float:
    """Parse a raw cell into a number. Never raises; unparsable input yields 0.0."""
    if raw is None:
        return 0.0
    clean = _NON_NUMERIC_RE.sub("", str(raw))
    if not clean:
        return 0.0

    clean = _normalize_separators(clean)

    match = _FLOAT_PREFIX_RE.match(clean)
    if not match:
        return 0.0
    try:
        value = float(match.group(0))
    except ValueError:
        return 0.0
    # Digit runs past the float range come back as inf
    return value if math.isfinite(value) else 0.0


def is_numeric_text(text: str) -> bool:
    """True when a cell carries nothing but a number and its decoration."""
    stripped = text.strip()
    if not stripped:
        return False
    return not re.search(r"[^\d.,\-$%\s]", stripped) and bool(re.search(r"\d", stripped))
