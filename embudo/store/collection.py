"""EMBUDO — Record Collection.

Ordered, date-keyed set of DailyRecords. The date is the natural key:
the collection never holds two records for the same day and is kept
sorted ascending by date.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from embudo.analyzer.formula_engine import UpdateKey, recompute
from embudo.analyzer.summary_engine import filter_records
from embudo.models.record_models import DailyRecord, to_iso_date


class RecordCollection:
    """In-memory collection owned by its caller."""

    def __init__(self, records: Iterable[DailyRecord] = ()):
        by_date: Dict[str, DailyRecord] = {}
        for record in records:
            by_date[record.date] = record
        self._records: List[DailyRecord] = [by_date[d] for d in sorted(by_date)]

    def __iter__(self) -> Iterator[DailyRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, date: object) -> bool:
        return self.get(str(date)) is not None

    def _index_of(self, date: str) -> int:
        for idx, record in enumerate(self._records):
            if record.date == date:
                return idx
        return -1

    def get(self, date: str) -> Optional[DailyRecord]:
        idx = self._index_of(date)
        return self._records[idx] if idx >= 0 else None

    def dates(self) -> List[str]:
        return [r.date for r in self._records]

    def to_list(self) -> List[DailyRecord]:
        return list(self._records)

    def between(self, start: Optional[str] = None, end: Optional[str] = None) -> List[DailyRecord]:
        """Records with start <= date <= end; either bound may be omitted."""
        return filter_records(self._records, start, end)

    def upsert(self, record: DailyRecord) -> bool:
        """Insert or replace by date. Returns True if the date was new."""
        idx = self._index_of(record.date)
        if idx >= 0:
            self._records[idx] = record
            return False
        self._records.append(record)
        self._records.sort(key=lambda r: r.date)
        return True

    def merge(self, records: Iterable[DailyRecord]) -> int:
        """Upsert many records; returns how many dates were new."""
        return sum(1 for r in records if self.upsert(r))

    def replace_all(self, records: Iterable[DailyRecord]) -> None:
        self._records = RecordCollection(records)._records

    def apply_manual(self, date: str, updates: Mapping[UpdateKey, float]) -> DailyRecord:
        """Merge manual inputs into the record for `date` and recompute it.

        The new record is computed in full before it replaces the old one, so
        readers never see a record with stale derived fields.
        """
        iso = to_iso_date(date)
        if iso is None:
            raise ValueError(f"date must be a calendar date in YYYY-MM-DD format, got {date!r}")
        updated = recompute(self.get(iso), updates, date=iso)
        self.upsert(updated)
        return updated
