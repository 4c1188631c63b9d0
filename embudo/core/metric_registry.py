"""EMBUDO — Unified Metric Registry.

Defines the closed set of field identities a funnel sheet can carry and
their classifications. Parsers, the formula engine and the summary engine
all key off `FieldKey`, so a new spreadsheet column starts here.
"""

from enum import Enum
from typing import Dict, List


class FieldKey(str, Enum):
    """Semantic identity of a sheet column / metric row."""

    DATE = "date"
    # Meta
    SPEND = "spend"
    IMPRESSIONS = "impressions"
    REACH = "reach"
    CPM = "cpm"
    CLICKS = "clicks"
    CTR = "ctr"
    CPC = "cpc"
    # Funnel - Web
    VISITS = "visits"
    LPC_RATE = "lpc_rate"
    LEADS = "leads"
    LP_RATE = "lp_rate"
    CPL = "cpl"
    # Funnel - CRM / Agendas
    AGENDAS_AUT = "agendas_aut"
    AGENDAS_SET = "agendas_set"
    AGENDAS_TOTAL = "agendas_total"
    AG_CUALIFICADO = "ag_cualificado"
    CPL_CUALIFICADO = "cpl_cualificado"
    VCR_RATE = "vcr_rate"
    VCR_CASH = "vcr_cash"
    # Funnel - Calls / Assistance
    LLAMADAS = "llamadas"
    ASISTENCIAS = "asistencias"
    CANCELACIONES = "cancelaciones"
    ASIS_RATE = "asis_rate"
    ASIS_CASH = "asis_cash"
    # Funnel - Sales
    CIERRES = "cierres"
    CC_RATE = "cc_rate"
    LC_RATE = "lc_rate"
    VENTAS = "ventas"
    # Financials
    REVENUE = "revenue"
    FACTURADO = "facturado"
    CPA = "cpa"
    BENEFICIO = "beneficio"
    BFACTURADO = "bfacturado"
    # ROI
    ROAS = "roas"
    ROI = "roi"
    R_ROI = "r_roi"
    C_ROI = "c_roi"


class MetricType(str, Enum):
    """How a metric is categorised."""

    VOLUME = "volume"  # Raw counts from the ad platform: impressions, clicks
    COST = "cost"  # Monetary: spend
    REVENUE = "revenue"  # Income: facturado, ventas amount
    RATE = "rate"  # Pre-computed rates copied from the sheet: ctr, cpc
    FUNNEL = "funnel"  # Manually counted CRM steps: agendas, asistencias
    DERIVED = "derived"  # Recomputed by the formula engine


class MetricDefinition:
    """Describes a single metric."""

    def __init__(
        self, key: FieldKey, metric_type: MetricType, unit: str = "", description: str = ""
    ):
        self.key = key
        self.metric_type = metric_type
        self.unit = unit
        self.description = description

    @property
    def name(self) -> str:
        return self.key.value

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


def _define(key, metric_type, unit, description):
    return key, MetricDefinition(key, metric_type, unit, description)


# ─────────────────────────────────────────────
# FUNNEL METRICS — Canonical Registry
# ─────────────────────────────────────────────

FUNNEL_METRICS: Dict[FieldKey, MetricDefinition] = dict(
    [
        # Meta
        _define(FieldKey.SPEND, MetricType.COST, "currency", "Inversión (ad spend)"),
        _define(FieldKey.IMPRESSIONS, MetricType.VOLUME, "count", "Impresiones"),
        _define(FieldKey.REACH, MetricType.VOLUME, "count", "Alcance (unique users)"),
        _define(FieldKey.CPM, MetricType.RATE, "currency", "Cost per 1000 impressions"),
        _define(FieldKey.CLICKS, MetricType.VOLUME, "count", "Clics"),
        _define(FieldKey.CTR, MetricType.RATE, "%", "Click-through rate"),
        _define(FieldKey.CPC, MetricType.RATE, "currency", "Cost per click"),
        # Funnel - Web
        _define(FieldKey.VISITS, MetricType.VOLUME, "count", "Landing page visits"),
        _define(FieldKey.LPC_RATE, MetricType.RATE, "%", "Visits per link click (%LPC)"),
        _define(FieldKey.LEADS, MetricType.VOLUME, "count", "Leads captured"),
        _define(FieldKey.LP_RATE, MetricType.RATE, "%", "Landing page conversion (LP%)"),
        _define(FieldKey.CPL, MetricType.DERIVED, "currency", "Cost per lead"),
        # Funnel - CRM / Agendas
        _define(FieldKey.AGENDAS_AUT, MetricType.FUNNEL, "count", "Self-booked appointments"),
        _define(FieldKey.AGENDAS_SET, MetricType.FUNNEL, "count", "Setter-booked appointments"),
        _define(FieldKey.AGENDAS_TOTAL, MetricType.DERIVED, "count", "All booked appointments"),
        _define(FieldKey.AG_CUALIFICADO, MetricType.FUNNEL, "count", "Qualified appointments"),
        _define(FieldKey.CPL_CUALIFICADO, MetricType.DERIVED, "currency", "Cost per qualified appointment"),
        _define(FieldKey.VCR_RATE, MetricType.RATE, "%", "VCR-%"),
        _define(FieldKey.VCR_CASH, MetricType.RATE, "currency", "VCR-$"),
        # Funnel - Calls / Assistance
        _define(FieldKey.LLAMADAS, MetricType.FUNNEL, "count", "Calls made"),
        _define(FieldKey.ASISTENCIAS, MetricType.FUNNEL, "count", "Attended appointments"),
        _define(FieldKey.CANCELACIONES, MetricType.FUNNEL, "count", "Cancelled appointments"),
        _define(FieldKey.ASIS_RATE, MetricType.DERIVED, "%", "Attendance / booked appointments"),
        _define(FieldKey.ASIS_CASH, MetricType.DERIVED, "currency", "Cost per attended appointment"),
        # Funnel - Sales
        _define(FieldKey.CIERRES, MetricType.FUNNEL, "count", "Closed appointments"),
        _define(FieldKey.CC_RATE, MetricType.DERIVED, "%", "Closings / attended appointments"),
        _define(FieldKey.LC_RATE, MetricType.DERIVED, "%", "Closings / leads"),
        _define(FieldKey.VENTAS, MetricType.FUNNEL, "count", "Sales"),
        # Financials
        _define(FieldKey.REVENUE, MetricType.REVENUE, "currency", "Billed revenue"),
        _define(FieldKey.FACTURADO, MetricType.REVENUE, "currency", "Billed revenue (alias of revenue)"),
        _define(FieldKey.CPA, MetricType.DERIVED, "currency", "Cost per sale"),
        _define(FieldKey.BENEFICIO, MetricType.DERIVED, "currency", "Revenue minus spend"),
        _define(FieldKey.BFACTURADO, MetricType.DERIVED, "currency", "Same as beneficio"),
        # ROI
        _define(FieldKey.ROAS, MetricType.DERIVED, "ratio", "Return on ad spend"),
        _define(FieldKey.ROI, MetricType.DERIVED, "%", "Profit over spend"),
        _define(FieldKey.R_ROI, MetricType.RATE, "%", "R-ROI as reported by the sheet"),
        _define(FieldKey.C_ROI, MetricType.DERIVED, "ratio", "Profit over spend as a ratio"),
    ]
)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────

NUMERIC_FIELDS: List[FieldKey] = list(FUNNEL_METRICS)


def get_metric(key: FieldKey | str) -> MetricDefinition | None:
    """Look up a metric by key or key name."""
    try:
        return FUNNEL_METRICS.get(FieldKey(key))
    except ValueError:
        return None


def metrics_by_type(metric_type: MetricType) -> list[MetricDefinition]:
    """Return all metrics of a given type."""
    return [m for m in FUNNEL_METRICS.values() if m.metric_type == metric_type]


DERIVED_FIELDS: List[FieldKey] = [m.key for m in metrics_by_type(MetricType.DERIVED)]
