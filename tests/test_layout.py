from embudo.ingest.layout import (
    LayoutKind,
    classify,
    detect_year,
    missing_keyword_groups,
    month_of,
)


def test_daily_header_below_title_rows():
    grid = [
        ["Reporte Diciembre"],
        ["Cuenta", "Meta Ads"],
        ["Fecha", "Inversión", "Leads"],
        ["01/12/2025", "$34.697", "0"],
    ]
    layout = classify(grid, scan_rows=10)
    assert layout.kind == LayoutKind.DAILY
    assert layout.header_row_index == 2


def test_monthly_header():
    grid = [
        ["Métrica", "Enero", "Febrero", "Marzo"],
        ["Inversión", "1000", "2000", "3000"],
    ]
    layout = classify(grid, scan_rows=10)
    assert layout.kind == LayoutKind.MONTHLY
    assert layout.header_row_index == 0


def test_two_month_names_are_not_enough():
    grid = [["Métrica", "Enero", "Febrero"], ["Inversión", "1", "2"]]
    assert classify(grid, scan_rows=10).kind == LayoutKind.NONE


def test_daily_wins_over_monthly():
    grid = [
        ["Métrica", "Enero", "Febrero", "Marzo"],
        ["Fecha", "Gasto"],
    ]
    layout = classify(grid, scan_rows=10)
    assert layout.kind == LayoutKind.DAILY
    assert layout.header_row_index == 1


def test_header_outside_scan_window_is_ignored():
    grid = [["nota"]] * 10 + [["Fecha", "Inversión"], ["01/12/2025", "5"]]
    assert classify(grid, scan_rows=10).kind == LayoutKind.NONE
    assert classify(grid, scan_rows=11).kind == LayoutKind.DAILY


def test_date_and_spend_must_share_a_row():
    grid = [["Fecha", "Leads"], ["Inversión", "Leads"]]
    assert classify(grid, scan_rows=10).kind == LayoutKind.NONE
    assert "date and spend in the same row" in missing_keyword_groups(grid, scan_rows=10)


def test_missing_groups_name_absent_keywords():
    missing = missing_keyword_groups([["foo", "bar"]], scan_rows=10)
    assert missing[0].startswith("date (")
    assert missing[1].startswith("spend (")
    assert missing[-1].startswith("months")


def test_month_names():
    assert month_of("Enero") == 1
    assert month_of(" SEPTIEMBRE ") == 9
    assert month_of("september") == 9
    assert month_of("Deciembre") == 12
    assert month_of("Sept") is None


def test_detect_year():
    assert detect_year(["Resultados 2024", "Enero", "Febrero", "Marzo"]) == 2024
    assert detect_year(["Métrica", "Enero", "Febrero", "Marzo"], fallback=2023) == 2023
