"""EMBUDO — Record & Summary Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlmodel import Session

from embudo.analyzer.summary_engine import build_summary
from embudo.core.metric_registry import NUMERIC_FIELDS
from embudo.database import get_session
from embudo.ingest.tokenizer import to_csv
from embudo.models.record_models import DailyRecord, ManualEntry
from embudo.models.summary_models import FunnelSummary
from embudo.store.repository import load_collection, save_record
from embudo.core.logging import get_logger

logger = get_logger("api.records")

router = APIRouter(tags=["Records"])


# ── Response Models ──


class RecordListResponse(BaseModel):
    status: str = "success"
    count: int
    records: List[DailyRecord]


class SummaryResponse(BaseModel):
    status: str = "success"
    summary: FunnelSummary


# ── Helpers ──


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(value)


def records_to_csv(records: List[DailyRecord]) -> str:
    """CSV export with the camelCase header the dashboard sheet uses."""
    fields = DailyRecord.model_fields
    header = ["date"] + [fields[k.value].alias or k.value for k in NUMERIC_FIELDS]
    rows = [header]
    for r in records:
        rows.append([r.date] + [_format_number(getattr(r, k.value)) for k in NUMERIC_FIELDS])
    return to_csv(rows)


# ── Endpoints ──


@router.get("/records", response_model=RecordListResponse)
async def list_records(
    start: Optional[str] = Query(None, description="First date (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Last date (YYYY-MM-DD)"),
    session: Session = Depends(get_session),
):
    """Stored records ordered by date, optionally limited to a window."""
    records = load_collection(session).between(start, end)
    return RecordListResponse(count=len(records), records=records)


@router.get("/records/export", response_class=PlainTextResponse)
async def export_records(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    """Stored records as CSV."""
    records = load_collection(session).between(start, end)
    return PlainTextResponse(records_to_csv(records), media_type="text/csv")


@router.get("/records/{date}", response_model=DailyRecord)
async def get_record(date: str, session: Session = Depends(get_session)):
    record = load_collection(session).get(date)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No record for {date}")
    return record


@router.put("/records/{date}/manual", response_model=DailyRecord)
async def save_manual_entry(
    date: str,
    entry: ManualEntry,
    session: Session = Depends(get_session),
):
    """Merge the sales team's manual counts into a day and recompute every formula.

    Creates the day with zeroed ad metrics if it does not exist yet.
    """
    collection = load_collection(session)
    try:
        record = collection.apply_manual(date, entry.updates())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    save_record(session, record)
    return record


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    start: Optional[str] = Query(None, description="First date (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Last date (YYYY-MM-DD)"),
    session: Session = Depends(get_session),
):
    """Aggregate KPIs over the stored records in the window."""
    records = load_collection(session).between(start, end)
    return SummaryResponse(summary=build_summary(records))
