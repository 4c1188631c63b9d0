from embudo.analyzer.formula_engine import compute_derived
from embudo.core.metric_registry import (
    DERIVED_FIELDS,
    NUMERIC_FIELDS,
    FieldKey,
    MetricType,
    get_metric,
)
from embudo.models.record_models import DailyRecord


def test_every_numeric_field_is_on_the_record():
    names = [k.value for k in NUMERIC_FIELDS]
    assert FieldKey.DATE not in NUMERIC_FIELDS
    assert names == [n for n in DailyRecord.model_fields if n != "date"]


def test_formula_engine_covers_derived_fields():
    computed = compute_derived({})
    assert {k.value for k in DERIVED_FIELDS} <= set(computed)
    assert FieldKey.R_ROI not in DERIVED_FIELDS


def test_get_metric():
    assert get_metric("spend").metric_type == MetricType.COST
    assert get_metric(FieldKey.ROAS).name == "roas"
    assert get_metric("date") is None
    assert get_metric("nope") is None
