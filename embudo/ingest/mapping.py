"""EMBUDO — Column / Label Mapper.

Assigns semantic field identities to header cells (daily layout) and to
row labels (monthly layout) by substring matching against ordered keyword
tables. Order matters: the first field whose keyword matches wins, so
"Inversión ($)" or "Fecha de Reporte" map without enumerating every header
variant a real sheet may use.
"""

import re
import unicodedata
from typing import Dict, List, Optional, Sequence, Tuple

from embudo.core.metric_registry import FieldKey
from embudo.ingest.errors import MissingMandatoryColumnError
from embudo.ingest.numbers import is_numeric_text

NOT_FOUND = -1

ColumnMap = Dict[FieldKey, int]

_HEADER_SEPARATORS_RE = re.compile(r"[\s_.\-]")
_LABEL_DISALLOWED_RE = re.compile(r"[^a-z$() ]")
_WHITESPACE_RE = re.compile(r"\s+")

LABEL_SCAN_CELLS = 3


def fold_accents(text: str) -> str:
    """'Inversión' -> 'Inversion'."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_header(cell: str) -> str:
    """'Fecha de Reporte' -> 'fechadereporte', 'AG_Cualificado' -> 'agcualificado'."""
    return _HEADER_SEPARATORS_RE.sub("", fold_accents(cell).lower().strip())


def normalize_label(cell: str) -> str:
    """'$Recolección (USD) 2025' -> '$recoleccion (usd)'."""
    text = _LABEL_DISALLOWED_RE.sub("", fold_accents(cell).lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


# ─────────────────────────────────────────────
# DAILY LAYOUT — header keywords per field
# ─────────────────────────────────────────────

DATE_KEYWORDS = ("date", "fecha", "dia")
SPEND_KEYWORDS = ("spend", "inversion", "gasto", "importe")

COLUMN_KEYWORDS: Tuple[Tuple[FieldKey, Tuple[str, ...]], ...] = (
    (FieldKey.DATE, DATE_KEYWORDS),
    (FieldKey.SPEND, SPEND_KEYWORDS),
    (FieldKey.IMPRESSIONS, ("impressions", "impresiones")),
    (FieldKey.REACH, ("reach", "alcance")),
    (FieldKey.CPM, ("cpm",)),
    (FieldKey.CLICKS, ("clicks", "clics")),
    (FieldKey.CTR, ("ctr",)),
    (FieldKey.CPC, ("cpc",)),
    (FieldKey.VISITS, ("visits", "visitas")),
    (FieldKey.LPC_RATE, ("lpc", "linkclick")),
    (FieldKey.LEADS, ("leads", "clientes", "potenciales")),
    (FieldKey.LP_RATE, ("lp%", "lprate")),
    (FieldKey.CPL, ("cpl",)),
    (FieldKey.AGENDAS_AUT, ("agendasaut", "aut")),
    (FieldKey.AGENDAS_SET, ("agendasset", "set")),
    (FieldKey.AGENDAS_TOTAL, ("agendastotal", "totalagendas", "total")),
    (FieldKey.AG_CUALIFICADO, ("agcualificado", "cualificados")),
    (FieldKey.CPL_CUALIFICADO, ("cplcualificado",)),
    (FieldKey.VCR_RATE, ("vcr%",)),
    (FieldKey.VCR_CASH, ("vcr$",)),
    (FieldKey.LLAMADAS, ("llamadas",)),
    (FieldKey.ASISTENCIAS, ("asistencias",)),
    (FieldKey.CANCELACIONES, ("cancelaciones",)),
    (FieldKey.ASIS_RATE, ("asis%", "asistencia%")),
    (FieldKey.ASIS_CASH, ("asis$",)),
    (FieldKey.CIERRES, ("cierres",)),
    (FieldKey.CC_RATE, ("cc%", "closing")),
    (FieldKey.LC_RATE, ("lc%",)),
    (FieldKey.VENTAS, ("ventas",)),
    (FieldKey.FACTURADO, ("facturado", "revenue", "ingresos")),
    (FieldKey.CPA, ("cpa",)),
    (FieldKey.BENEFICIO, ("beneficio", "profit")),
    (FieldKey.BFACTURADO, ("bfacturado",)),
    (FieldKey.ROI, ("roi",)),
    (FieldKey.R_ROI, ("rroi",)),
    (FieldKey.C_ROI, ("croi",)),
)

MANDATORY_COLUMNS = (FieldKey.DATE, FieldKey.SPEND)


def contains_keyword(cells: Sequence[str], keywords: Sequence[str]) -> bool:
    """True if any normalized cell contains any of the keywords."""
    return any(k in c for c in cells for k in keywords)


def find_column(headers: Sequence[str], keywords: Sequence[str]) -> int:
    """Index of the first normalized header containing any keyword."""
    simple = [_HEADER_SEPARATORS_RE.sub("", k) for k in keywords]
    for idx, header in enumerate(headers):
        if any(k in header for k in simple):
            return idx
    return NOT_FOUND


def map_columns(header_row: Sequence[str]) -> ColumnMap:
    """Map every field to a column index of a daily header row.

    Raises MissingMandatoryColumnError when date or spend is absent.
    """
    headers = [normalize_header(c) for c in header_row]
    column_map: ColumnMap = {
        key: find_column(headers, keywords) for key, keywords in COLUMN_KEYWORDS
    }

    missing = [k.value for k in MANDATORY_COLUMNS if column_map[k] == NOT_FOUND]
    if missing:
        raise MissingMandatoryColumnError(missing, header_row)
    return column_map


# ─────────────────────────────────────────────
# MONTHLY LAYOUT — row label keywords
# ─────────────────────────────────────────────

LABEL_KEYWORDS: Tuple[Tuple[str, FieldKey], ...] = (
    ("inversion", FieldKey.SPEND),
    ("clicks", FieldKey.CLICKS),
    ("leads", FieldKey.LEADS),
    ("agendas totales", FieldKey.AGENDAS_TOTAL),
    ("agendas cualificadas", FieldKey.AG_CUALIFICADO),
    ("asistencias totales", FieldKey.ASISTENCIAS),
    ("cierres", FieldKey.CIERRES),
    ("ventas", FieldKey.VENTAS),  # "$Ventas"
    ("recoleccion", FieldKey.REVENUE),  # "$Recolección"
    ("ingresos", FieldKey.REVENUE),
    ("cpl", FieldKey.CPL),
    ("cpa", FieldKey.CPA),
    ("roas", FieldKey.ROAS),  # "Efectivo ROAS"
)


def extract_row_label(row: Sequence[str]) -> str:
    """Normalized label of a metric row, taken from its first few cells."""
    label = ""
    for cell in row[:LABEL_SCAN_CELLS]:
        text = cell.strip()
        if len(text) <= 1 or is_numeric_text(text):
            continue
        label = normalize_label(text)
        if len(label) > 2:
            break
    return label


def map_row_label(row: Sequence[str]) -> Optional[FieldKey]:
    """Field a monthly metric row describes, or None if the label is unknown."""
    label = extract_row_label(row)
    if not label:
        return None
    for keyword, key in LABEL_KEYWORDS:
        if keyword in label:
            return key
    return None


def unmatched_columns(column_map: ColumnMap) -> List[str]:
    """Field names the header did not provide."""
    return [k.value for k, idx in column_map.items() if idx == NOT_FOUND]
