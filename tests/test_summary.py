from embudo.analyzer.summary_engine import build_summary
from embudo.models.record_models import DailyRecord


def test_totals_and_ratios():
    records = [
        DailyRecord(
            date="2025-12-02", spend=300, impressions=3000, reach=1500, clicks=30,
            visits=20, leads=15, revenue=500, asistencias=4, cierres=1,
        ),
        DailyRecord(
            date="2025-12-01", spend=100, impressions=1000, reach=500, clicks=10,
            visits=20, leads=5, revenue=300,
        ),
    ]
    summary = build_summary(records)

    assert summary.date_range_start == "2025-12-01"
    assert summary.date_range_end == "2025-12-02"
    assert summary.days == 2
    assert summary.total_spend == 400
    assert summary.total_leads == 20
    assert summary.total_revenue == 800
    assert summary.overall_cpl == 20
    assert summary.lp_conversion_rate == 50
    assert summary.overall_roas == 2
    assert summary.overall_roi == 100
    assert summary.avg_ctr == 1
    assert summary.avg_cpc == 10
    assert summary.avg_cpm == 100
    assert summary.avg_frequency == 2
    assert summary.close_rate == 25


def test_empty_window():
    summary = build_summary([])
    assert summary.days == 0
    assert summary.overall_roas == 0
