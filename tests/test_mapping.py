import pytest

from embudo.core.metric_registry import FieldKey
from embudo.ingest.errors import MissingMandatoryColumnError
from embudo.ingest.mapping import (
    NOT_FOUND,
    fold_accents,
    map_columns,
    map_row_label,
    normalize_header,
    normalize_label,
    unmatched_columns,
)


def test_normalizers():
    assert fold_accents("Recolección") == "Recoleccion"
    assert normalize_header(" Fecha de_Reporte ") == "fechadereporte"
    assert normalize_header("AG_Cualificado") == "agcualificado"
    assert normalize_label("$Recolección (USD) 2025") == "$recoleccion (usd)"


def test_maps_scenario_header():
    column_map = map_columns(["Fecha", "Inversión", "Leads"])
    assert column_map[FieldKey.DATE] == 0
    assert column_map[FieldKey.SPEND] == 1
    assert column_map[FieldKey.LEADS] == 2
    assert column_map[FieldKey.CLICKS] == NOT_FOUND
    assert "clicks" in unmatched_columns(column_map)


def test_substring_matching_tolerates_header_variants():
    column_map = map_columns(["Fecha de Reporte", "Inversión ($)", "AG_Cualificado", "Facturado"])
    assert column_map[FieldKey.DATE] == 0
    assert column_map[FieldKey.SPEND] == 1
    assert column_map[FieldKey.AG_CUALIFICADO] == 2
    assert column_map[FieldKey.FACTURADO] == 3


def test_first_matching_column_wins():
    column_map = map_columns(["Fecha", "Inversión", "Gasto"])
    assert column_map[FieldKey.SPEND] == 1


def test_missing_spend_is_fatal():
    with pytest.raises(MissingMandatoryColumnError) as exc_info:
        map_columns(["Fecha", "Leads"])
    assert exc_info.value.missing == ["spend"]
    assert "Leads" in str(exc_info.value)


@pytest.mark.parametrize(
    "row, expected",
    [
        (["Inversión", "100"], FieldKey.SPEND),
        (["", "Inversión", "100"], FieldKey.SPEND),
        (["$Recolección", "5"], FieldKey.REVENUE),
        (["Agendas Totales", "5"], FieldKey.AGENDAS_TOTAL),
        (["Asistencias Totales", "5"], FieldKey.ASISTENCIAS),
        (["$Ventas", "5"], FieldKey.VENTAS),
        (["Efectivo ROAS", "5"], FieldKey.ROAS),
        (["2.000", "Leads", "5"], FieldKey.LEADS),
        (["x", "Clicks", "5"], FieldKey.CLICKS),
    ],
)
def test_row_labels(row, expected):
    assert map_row_label(row) == expected


def test_unknown_row_label():
    assert map_row_label(["Notas", "abc"]) is None
    assert map_row_label(["", "", ""]) is None
