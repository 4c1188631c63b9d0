"""EMBUDO — Summary Engine.

Aggregates a window of daily records into account-level totals and the
ratios the dashboard headlines: CPL, ROAS, ROI, CTR, CPC, CPM, frequency.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from embudo.models.record_models import DailyRecord
from embudo.models.summary_models import FunnelSummary
from embudo.core.logging import get_logger

logger = get_logger("analyzer.summary")

_SUMMED_FIELDS = (
    "spend",
    "impressions",
    "reach",
    "clicks",
    "visits",
    "leads",
    "agendas_total",
    "asistencias",
    "cierres",
    "ventas",
    "revenue",
    "beneficio",
)


def filter_records(
    records: Iterable[DailyRecord],
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[DailyRecord]:
    """Keep records with start <= date <= end (ISO strings compare by date)."""
    return [
        r for r in records if (not start or r.date >= start) and (not end or r.date <= end)
    ]


def build_summary(records: Iterable[DailyRecord]) -> FunnelSummary:
    """Totals and zero-safe ratios over the given records."""
    records = sorted(records, key=lambda r: r.date)
    if not records:
        return FunnelSummary()

    sums: Dict[str, float] = defaultdict(float)
    for r in records:
        for name in _SUMMED_FIELDS:
            sums[name] += getattr(r, name)

    spend = sums["spend"]
    impressions = sums["impressions"]
    clicks = sums["clicks"]
    leads = sums["leads"]
    revenue = sums["revenue"]

    summary = FunnelSummary(
        date_range_start=records[0].date,
        date_range_end=records[-1].date,
        days=len(records),
        total_spend=round(spend, 2),
        total_impressions=impressions,
        total_reach=sums["reach"],
        total_clicks=clicks,
        total_visits=sums["visits"],
        total_leads=leads,
        total_agendas=sums["agendas_total"],
        total_asistencias=sums["asistencias"],
        total_cierres=sums["cierres"],
        total_ventas=sums["ventas"],
        total_revenue=round(revenue, 2),
        total_beneficio=round(sums["beneficio"], 2),
        overall_cpl=round((spend / leads) if leads > 0 else 0, 4),
        lp_conversion_rate=round((leads / sums["visits"] * 100) if sums["visits"] > 0 else 0, 4),
        overall_roas=round((revenue / spend) if spend > 0 else 0, 4),
        overall_roi=round(((revenue - spend) / spend * 100) if spend > 0 else 0, 4),
        avg_ctr=round((clicks / impressions * 100) if impressions > 0 else 0, 4),
        avg_cpc=round((spend / clicks) if clicks > 0 else 0, 4),
        avg_cpm=round((spend / impressions * 1000) if impressions > 0 else 0, 4),
        avg_frequency=round((impressions / sums["reach"]) if sums["reach"] > 0 else 0, 4),
        close_rate=round(
            (sums["cierres"] / sums["asistencias"] * 100) if sums["asistencias"] > 0 else 0, 4
        ),
    )

    logger.info(f"Built summary over {summary.days} days ({summary.date_range_start} → {summary.date_range_end})")
    return summary
