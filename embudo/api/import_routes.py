"""EMBUDO — Import & Sync Routes."""

from enum import Enum
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel
from sqlmodel import Session

from embudo.analyzer.pipeline import import_text, run_sync
from embudo.config import settings
from embudo.connectors.sheet.client import SheetFetchError
from embudo.database import get_session
from embudo.ingest.encoding import decode_upload
from embudo.ingest.errors import SheetParseError
from embudo.ingest.parser import ParseResult, parse_text
from embudo.ingest.tokenizer import CSV_DELIMITERS, PASTE_DELIMITERS
from embudo.models.record_models import DailyRecord
from embudo.core.logging import get_logger

logger = get_logger("api.import")

router = APIRouter(tags=["Import"])


# ── Request / Response Models ──


class ImportMode(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"


class PasteRequest(BaseModel):
    """Request body for POST /import/paste and /import/preview."""

    text: str
    mode: ImportMode = ImportMode.REPLACE
    """`replace` swaps the whole collection, `merge` upserts the pasted dates."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "text": "Fecha\tInversión\tLeads\n01/12/2025\t$34.697\t0\n02/12/2025\t35.845,00\t3",
                    "mode": "replace",
                }
            ]
        }
    }


class ImportResponse(BaseModel):
    status: str = "success"
    layout: str
    record_count: int
    records: List[DailyRecord]


def _response(result: ParseResult) -> ImportResponse:
    return ImportResponse(
        layout=result.layout.value,
        record_count=len(result.records),
        records=result.records,
    )


# ── Endpoints ──


@router.post("/import/csv", response_model=ImportResponse)
async def import_csv(
    file: UploadFile = File(...),
    mode: ImportMode = Query(ImportMode.REPLACE),
    session: Session = Depends(get_session),
):
    """Import a CSV export (daily or monthly transposed layout)."""
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    text = decode_upload(await file.read())
    try:
        result = import_text(
            session, text, "csv", CSV_DELIMITERS, replace=mode == ImportMode.REPLACE
        )
    except SheetParseError as e:
        logger.warning(f"CSV import rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return _response(result)


@router.post("/import/paste", response_model=ImportResponse)
async def import_paste(request: PasteRequest, session: Session = Depends(get_session)):
    """Import a table pasted from Excel / Google Sheets (tab or comma separated)."""
    try:
        result = import_text(
            session,
            request.text,
            "paste",
            PASTE_DELIMITERS,
            replace=request.mode == ImportMode.REPLACE,
        )
    except SheetParseError as e:
        logger.warning(f"Paste import rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return _response(result)


@router.post("/import/preview", response_model=ImportResponse)
async def preview_paste(request: PasteRequest):
    """Parse a pasted table without storing it."""
    try:
        result = parse_text(request.text, PASTE_DELIMITERS)
    except SheetParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response(result)


@router.post("/sync", response_model=ImportResponse)
async def sync_remote(session: Session = Depends(get_session)):
    """Fetch the published sheet and replace the stored records with it.

    On failure the stored records are left as they were.
    """
    if not settings.sheet_csv_url:
        raise HTTPException(status_code=400, detail="SHEET_CSV_URL is not configured.")
    try:
        result = await run_sync(session)
    except SheetFetchError as e:
        logger.error(f"Sheet sync failed: {e}", extra={"status_code": e.status_code})
        raise HTTPException(status_code=502, detail=f"Sheet fetch failed: {e}")
    except SheetParseError as e:
        logger.error(f"Sheet sync could not parse the export: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return _response(result)
