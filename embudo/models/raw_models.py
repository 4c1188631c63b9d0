"""EMBUDO — Raw Import Models (Immutable)."""

from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


class RawSheetImport(SQLModel, table=True):
    """Immutable copy of every imported sheet payload.

    Never modify this data — it's the audit trail.
    """

    __tablename__ = "raw_sheet_imports"

    id: Optional[int] = Field(default=None, primary_key=True)
    source: str = Field(index=True, description="csv | paste | remote")
    layout: str = Field(default="", description="daily | monthly")
    record_count: int = Field(default=0)
    imported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload_text: str = Field(description="Raw sheet text as received")
