"""
Data models shared by the parsers, the merger and the summary helpers.

- ExportRow: one tokenized line of a Health Export CSV file
- RawRecord: one typed reading produced by a per-metric parser
- DayRecord: unified per-calendar-date output record
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .constants import FIELD_SOURCE_NAME, FIELD_TYPE


@dataclass(frozen=True)
class ExportRow:
    """A tokenized export line. The first field routes it to a parser."""
    fields: tuple[str, ...]

    @property
    def metric_type(self) -> str:
        return self.fields[FIELD_TYPE] if self.fields else ''

    @property
    def source_name(self) -> str:
        if len(self.fields) > FIELD_SOURCE_NAME:
            return self.fields[FIELD_SOURCE_NAME]
        return ''

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class RawRecord:
    """
    A single reading extracted from one export row.
    Created per parse call and folded into a DayRecord.
    """
    date: str  # YYYY-MM-DD, taken from the source timestamp text
    metric_type: str
    value: float | str

    # Interval records (sleep)
    duration: float | None = None  # minutes
    start: datetime | None = None
    end: datetime | None = None

    unit: str = ''


@dataclass(frozen=True)
class Quantity:
    """A number tagged with its source unit."""
    value: float
    unit: str

    def to_dict(self) -> dict:
        return {'value': self.value, 'unit': self.unit}


@dataclass(frozen=True)
class SleepSummary:
    """Stage durations for one sleep session, formatted as "<h>h <m>m"."""
    core: str
    deep: str
    rem: str
    total: str
    wake_ups: int | float  # averaged across nights in weekly summaries

    def to_dict(self) -> dict:
        return {
            'Core': self.core,
            'Deep': self.deep,
            'REM': self.rem,
            'Total': self.total,
            'wakeUps': self.wake_ups,
        }


@dataclass
class DayRecord:
    """
    All metrics known for one calendar date.

    At most one DayRecord exists per date within a collection. Records are
    not mutated after leaving the merger, except for the derived metrics
    pass which adds FFMI and BCI in place.
    """
    date: str
    metrics: dict[str, Any] = field(default_factory=dict)
    exercises: list | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        """JSON-ready representation."""
        data: dict[str, Any] = {
            'date': self.date,
            'metrics': {key: _serialize(value) for key, value in self.metrics.items()},
        }
        if self.exercises is not None:
            data['exercises'] = [_serialize(e) for e in self.exercises]
        if self.description:
            data['description'] = self.description
        return data


@dataclass
class AggregationResult:
    """Result of running the engine over one batch of export rows."""
    days: list[DayRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    records_parsed: int = 0
    unclaimed: int = 0

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


def _serialize(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value
