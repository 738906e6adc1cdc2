"""Step count parser. Sums readings per day from allow-listed sources."""

from typing import Iterable
import logging

from ..constants import (
    FIELD_START, FIELD_UNIT, FIELD_VALUE, MIN_POINT_FIELDS,
    STEP_COUNT, STEP_COUNT_KEY, STEP_SOURCES,
)
from ..models import DayRecord, ExportRow, RawRecord
from ..utils import extract_date, parse_number, round_half_up
from .base import BaseMetricParser

logger = logging.getLogger(__name__)


class StepCountParser(BaseMetricParser):
    """
    Parser for HKQuantityTypeIdentifierStepCount rows.

    Phones and watches both write step samples to the export, so only
    sources in the allow-list are counted; everything else is dropped
    without an error.
    """

    METRIC_TYPE = STEP_COUNT
    METRIC_KEY = STEP_COUNT_KEY
    MIN_FIELDS = MIN_POINT_FIELDS

    def __init__(self, allowed_sources: Iterable[str] = STEP_SOURCES):
        super().__init__()
        self.allowed_sources = frozenset(allowed_sources)

    def parse_records(self, rows: Iterable[ExportRow]) -> list[RawRecord]:
        accepted = []
        dropped = 0
        for row in rows:
            if row.source_name in self.allowed_sources:
                accepted.append(row)
            else:
                dropped += 1
        if dropped:
            logger.debug(f"Dropped {dropped} step rows from sources outside the allow-list")
        return super().parse_records(accepted)

    def parse_record(self, row: ExportRow) -> RawRecord | None:
        fields = row.fields
        return RawRecord(
            date=extract_date(fields[FIELD_START]),
            metric_type=row.metric_type,
            value=round_half_up(parse_number(fields[FIELD_VALUE])),
            unit=fields[FIELD_UNIT],
        )

    def build_days(self, records: list[RawRecord]) -> list[DayRecord]:
        totals: dict[str, float] = {}
        for record in records:
            running = totals.get(record.date, 0.0)
            totals[record.date] = round_half_up(running + record.value)

        return [
            DayRecord(date=day, metrics={self.METRIC_KEY: total})
            for day, total in totals.items()
        ]
