from embudo.api import import_routes
from embudo.config import settings
from embudo.connectors.sheet.client import SheetFetchError

PASTED = "Fecha\tInversión\tLeads\n01/12/2025\t$34.697\t0\n02/12/2025\t35.845\t3"
CSV_BYTES = 'Fecha,Inversión,Leads\n01/12/2025,"$34.697",0\n02/12/2025,"35.845,00",3\n'.encode()


def _dates(client):
    return [r["date"] for r in client.get("/records").json()["records"]]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_paste_import(client):
    response = client.post("/import/paste", json={"text": PASTED})
    assert response.status_code == 200
    body = response.json()
    assert body["layout"] == "daily"
    assert body["record_count"] == 2
    assert body["records"][0]["spend"] == 34697
    assert "agendasAut" in body["records"][0]
    assert _dates(client) == ["2025-12-01", "2025-12-02"]


def test_paste_merge_and_replace(client):
    client.post("/import/paste", json={"text": PASTED})

    merge = "Fecha\tInversión\n03/12/2025\t10\n01/12/2025\t99"
    client.post("/import/paste", json={"text": merge, "mode": "merge"})
    assert _dates(client) == ["2025-12-01", "2025-12-02", "2025-12-03"]
    assert client.get("/records/2025-12-01").json()["spend"] == 99

    client.post("/import/paste", json={"text": "Fecha\tInversión\n09/12/2025\t1"})
    assert _dates(client) == ["2025-12-09"]


def test_rejected_paste_keeps_stored_records(client):
    client.post("/import/paste", json={"text": PASTED})

    response = client.post("/import/paste", json={"text": "foo\tbar\n1\t2"})
    assert response.status_code == 422
    assert "foo" in response.json()["detail"]
    assert _dates(client) == ["2025-12-01", "2025-12-02"]


def test_preview_does_not_store(client):
    response = client.post("/import/preview", json={"text": PASTED})
    assert response.json()["record_count"] == 2
    assert client.get("/records").json()["count"] == 0


def test_csv_upload(client):
    response = client.post("/import/csv", files={"file": ("meta.csv", CSV_BYTES, "text/csv")})
    assert response.status_code == 200
    assert [r["spend"] for r in response.json()["records"]] == [34697, 35845]


def test_csv_upload_latin1(client):
    data = "Fecha,Gasto,Campaña\n01/12/2025,100,Campaña frío\n".encode("latin-1")
    response = client.post("/import/csv", files={"file": ("meta.csv", data, "text/csv")})
    assert response.status_code == 200
    assert response.json()["record_count"] == 1


def test_csv_upload_rejects_other_files(client):
    response = client.post("/import/csv", files={"file": ("meta.xlsx", b"PK", "application/octet-stream")})
    assert response.status_code == 422


def test_records_window_and_missing_day(client):
    client.post("/import/paste", json={"text": PASTED})
    body = client.get("/records", params={"start": "2025-12-02"}).json()
    assert body["count"] == 1
    assert client.get("/records/2025-12-31").status_code == 404


def test_manual_entry_recomputes_formulas(client):
    client.post("/import/paste", json={"text": "Fecha\tInversión\tLeads\n05/12/2025\t10.000\t0"})

    response = client.put(
        "/records/2025-12-05/manual",
        json={
            "agendasAut": 2,
            "agendasSet": 1,
            "asistencias": 2,
            "cierres": 1,
            "ventas": 1,
            "facturado": 50000,
        },
    )
    assert response.status_code == 200
    record = response.json()
    assert record["agendasTotal"] == 3
    assert round(record["asisRate"], 1) == 66.7
    assert record["ccRate"] == 50
    assert record["lcRate"] == 0
    assert record["beneficio"] == 40000
    assert record["roas"] == 5
    assert record["roi"] == 400
    assert client.get("/records/2025-12-05").json() == record


def test_manual_entry_creates_day(client):
    response = client.put("/records/2025-12-07/manual", json={"ventas": 2})
    assert response.status_code == 200
    assert response.json()["spend"] == 0
    assert _dates(client) == ["2025-12-07"]


def test_manual_entry_bad_date(client):
    response = client.put("/records/2025-13-01/manual", json={"ventas": 2})
    assert response.status_code == 422


def test_export_csv(client):
    client.post("/import/paste", json={"text": PASTED})
    response = client.get("/records/export")
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.splitlines()
    assert lines[0].startswith("date,spend,impressions,reach,cpm,clicks,ctr,cpc,visits,lpcRate")
    assert lines[1].startswith("2025-12-01,34697,0,")
    assert len(lines) == 3


def test_summary(client):
    client.post("/import/paste", json={"text": PASTED})
    summary = client.get("/summary").json()["summary"]
    assert summary["days"] == 2
    assert summary["total_spend"] == 70542
    assert summary["total_leads"] == 3


def test_sync_without_url(client, monkeypatch):
    monkeypatch.setattr(settings, "sheet_csv_url", "")
    assert client.post("/sync").status_code == 400


def test_sync_fetch_failure(client, monkeypatch):
    async def failing_sync(session):
        raise SheetFetchError("Sheet export returned HTTP 503", 503)

    monkeypatch.setattr(settings, "sheet_csv_url", "https://sheets.example.test/export")
    monkeypatch.setattr(import_routes, "run_sync", failing_sync)
    assert client.post("/sync").status_code == 502


def test_oversized_number_is_stored_as_zero(client):
    text = "Fecha\tInversión\tLeads\n01/12/2025\t" + "9" * 400 + "\t2"
    assert client.post("/import/paste", json={"text": text}).status_code == 200

    response = client.get("/records")
    assert response.status_code == 200
    record = response.json()["records"][0]
    assert record["spend"] == 0
    assert record["leads"] == 2
    assert client.get("/summary").status_code == 200
    assert client.get("/records/export").status_code == 200


def test_manual_entry_rejects_non_finite_values(client):
    response = client.put(
        "/records/2025-12-07/manual",
        content='{"facturado": Infinity}',
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 422
    assert client.get("/records").json()["count"] == 0
