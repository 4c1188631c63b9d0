"""EMBUDO — Daily Record Models.

`DailyRecord` is the canonical output unit: one fixed-shape record per
calendar date. Every numeric field defaults to 0.0 so consumers never see
a missing metric. Fields serialize in camelCase (`agendasAut`, `rRoi`),
the naming the spreadsheet-facing collaborators use.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

ISO_DATE_FORMAT = "%Y-%m-%d"


def to_iso_date(value: str) -> Optional[str]:
    """Return `value` as a canonical YYYY-MM-DD string, or None if it is not a real date."""
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).strftime(ISO_DATE_FORMAT)
    except (TypeError, ValueError):
        return None


class DailyRecord(BaseModel):
    """Full-funnel metrics for a single date."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str

    # Meta
    spend: float = 0.0
    impressions: float = 0.0
    reach: float = 0.0
    cpm: float = 0.0
    clicks: float = 0.0
    ctr: float = 0.0
    cpc: float = 0.0

    # Funnel - Web
    visits: float = 0.0
    lpc_rate: float = 0.0
    leads: float = 0.0
    lp_rate: float = 0.0
    cpl: float = 0.0

    # Funnel - CRM / Agendas
    agendas_aut: float = 0.0
    agendas_set: float = 0.0
    agendas_total: float = 0.0
    ag_cualificado: float = 0.0
    cpl_cualificado: float = 0.0
    vcr_rate: float = 0.0
    vcr_cash: float = 0.0

    # Funnel - Calls / Assistance
    llamadas: float = 0.0
    asistencias: float = 0.0
    cancelaciones: float = 0.0
    asis_rate: float = 0.0
    asis_cash: float = 0.0

    # Funnel - Sales
    cierres: float = 0.0
    cc_rate: float = 0.0
    lc_rate: float = 0.0
    ventas: float = 0.0

    # Financials
    revenue: float = 0.0
    facturado: float = 0.0
    cpa: float = 0.0
    beneficio: float = 0.0
    bfacturado: float = 0.0

    # ROI
    roas: float = 0.0
    roi: float = 0.0
    r_roi: float = 0.0
    c_roi: float = 0.0

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        iso = to_iso_date(value.strip())
        if iso is None:
            raise ValueError(f"date must be a calendar date in YYYY-MM-DD format, got {value!r}")
        return iso


class ManualEntry(BaseModel):
    """Funnel counts typed in by the sales team for one date.

    Only the fields actually sent are merged onto the stored record.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    agendas_aut: Optional[float] = None
    agendas_set: Optional[float] = None
    ag_cualificado: Optional[float] = None
    llamadas: Optional[float] = None
    asistencias: Optional[float] = None
    cancelaciones: Optional[float] = None
    cierres: Optional[float] = None
    ventas: Optional[float] = None
    facturado: Optional[float] = None

    def updates(self) -> dict[str, float]:
        """Return the fields that were provided, keyed by field name."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
