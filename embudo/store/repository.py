"""EMBUDO — Record Repository.

Loads and saves the record collection. Writes are keyed by date, so
saving a record for a day that already exists replaces it.
"""

from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import delete
from sqlmodel import Session, select

from embudo.ingest.parser import ParseResult
from embudo.models.raw_models import RawSheetImport
from embudo.models.record_models import DailyRecord
from embudo.models.stored_models import StoredRecord
from embudo.store.collection import RecordCollection
from embudo.core.logging import get_logger

logger = get_logger("store.repository")


def load_collection(session: Session) -> RecordCollection:
    """Every stored record, ordered by date."""
    rows = session.exec(select(StoredRecord).order_by(StoredRecord.date)).all()
    return RecordCollection(DailyRecord.model_validate_json(r.record_json) for r in rows)


def _upsert_row(session: Session, record: DailyRecord) -> None:
    existing = session.get(StoredRecord, record.date)
    if existing:
        existing.record_json = record.model_dump_json()
        existing.updated_at = datetime.now(timezone.utc)
        session.add(existing)
    else:
        session.add(StoredRecord(date=record.date, record_json=record.model_dump_json()))


def save_record(session: Session, record: DailyRecord) -> None:
    """Insert or replace a single day."""
    _upsert_row(session, record)
    session.commit()
    logger.info(f"Saved record for {record.date}", extra={"date": record.date})


def save_collection(session: Session, records: Iterable[DailyRecord], replace: bool = True) -> int:
    """Persist imported records.

    With `replace` the stored collection becomes exactly `records`; otherwise
    they are merged in by date. Returns the number of records written.
    """
    if replace:
        session.execute(delete(StoredRecord))

    count = 0
    for record in records:
        _upsert_row(session, record)
        count += 1
    session.commit()

    logger.info(
        f"Stored {count} records ({'replace' if replace else 'merge'})",
        extra={"records": count},
    )
    return count


def log_import(session: Session, source: str, result: ParseResult, payload_text: str) -> RawSheetImport:
    """Stage the raw payload of an import as the audit trail.

    Not committed here: `save_collection` commits it together with the
    records, so the trail never lists an import that did not land.
    """
    raw = RawSheetImport(
        source=source,
        layout=result.layout.value,
        record_count=len(result.records),
        payload_text=payload_text,
    )
    session.add(raw)
    return raw
