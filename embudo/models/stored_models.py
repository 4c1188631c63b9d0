"""EMBUDO — Stored Record Model.

One row per calendar date. The date is the primary key, so re-importing or
re-entering a day updates the row instead of duplicating it.
"""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class StoredRecord(SQLModel, table=True):
    """Persisted DailyRecord, serialized as JSON."""

    __tablename__ = "daily_records"

    date: str = Field(primary_key=True, description="YYYY-MM-DD")
    record_json: str = Field(description="Full DailyRecord as JSON")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
