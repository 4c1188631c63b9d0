"""EMBUDO — Funnel Summary Output Model."""

from pydantic import BaseModel


class FunnelSummary(BaseModel):
    """Aggregate KPIs over a window of daily records."""

    date_range_start: str = ""
    date_range_end: str = ""
    days: int = 0

    # Totals
    total_spend: float = 0.0
    total_impressions: float = 0.0
    total_reach: float = 0.0
    total_clicks: float = 0.0
    total_visits: float = 0.0
    total_leads: float = 0.0
    total_agendas: float = 0.0
    total_asistencias: float = 0.0
    total_cierres: float = 0.0
    total_ventas: float = 0.0
    total_revenue: float = 0.0
    total_beneficio: float = 0.0

    # Ratios over the totals
    overall_cpl: float = 0.0
    lp_conversion_rate: float = 0.0
    overall_roas: float = 0.0
    overall_roi: float = 0.0
    avg_ctr: float = 0.0
    avg_cpc: float = 0.0
    avg_cpm: float = 0.0
    avg_frequency: float = 0.0
    close_rate: float = 0.0
