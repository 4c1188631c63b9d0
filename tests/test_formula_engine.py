import pytest

from embudo.analyzer.formula_engine import recompute, resolve_updates
from embudo.core.metric_registry import FieldKey
from embudo.models.record_models import DailyRecord

SCENARIO = {
    "spend": 10000,
    "leads": 0,
    "agendasAut": 2,
    "agendasSet": 1,
    "asistencias": 2,
    "cierres": 1,
    "ventas": 1,
    "facturado": 50000,
}


def test_manual_entry_on_empty_date():
    record = recompute(None, SCENARIO, date="2025-12-05")
    assert record.date == "2025-12-05"
    assert record.agendas_total == 3
    assert record.asis_rate == pytest.approx(66.6667, rel=1e-4)
    assert record.cc_rate == 50
    assert record.lc_rate == 0
    assert record.cpl == 0
    assert record.cpa == 10000
    assert record.asis_cash == 5000
    assert record.revenue == record.facturado == 50000
    assert record.beneficio == record.bfacturado == 40000
    assert record.roas == 5
    assert record.roi == 400
    assert record.c_roi == 4


def test_recompute_is_idempotent():
    once = recompute(None, SCENARIO, date="2025-12-05")
    assert recompute(once) == once


def test_zero_spend_gives_zero_ratios():
    record = recompute(
        None,
        {"facturado": 1000, "leads": 4, "ag_cualificado": 2, "asistencias": 3, "ventas": 1},
        date="2025-12-05",
    )
    assert record.roas == 0
    assert record.roi == 0
    assert record.c_roi == 0
    assert record.cpl == 0
    assert record.cpl_cualificado == 0
    assert record.asis_cash == 0
    assert record.cpa == 0
    assert record.beneficio == 1000


def test_merge_keeps_untouched_fields_and_input():
    original = DailyRecord(date="2025-12-05", spend=500, impressions=9000, leads=5, roas=7)
    updated = recompute(original, {FieldKey.CIERRES: 1, "ventas": 2})
    assert updated.impressions == 9000
    assert updated.cpl == 100
    assert updated.cpa == 250
    assert updated.lc_rate == 20
    assert updated.roas == 0
    assert original.cierres == 0
    assert original.roas == 7


def test_facturado_wins_over_revenue():
    record = DailyRecord(date="2025-12-05", spend=100, revenue=300, facturado=0)
    assert recompute(record).facturado == 300
    assert recompute(record, {"facturado": 800}).revenue == 800


def test_update_keys():
    assert resolve_updates({"agendasAut": 1, "ag_cualificado": 2, "date": "x"}) == {
        "agendas_aut": 1.0,
        "ag_cualificado": 2.0,
    }
    with pytest.raises(ValueError):
        resolve_updates({"bogus": 1})


def test_new_record_needs_a_date():
    with pytest.raises(ValueError):
        recompute(None, SCENARIO)
