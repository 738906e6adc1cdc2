"""Sleep analysis parser. Hands interval records to the session grouper."""

from ..constants import (
    FIELD_END, FIELD_STAGE, FIELD_START, MIN_INTERVAL_FIELDS, SLEEP_ANALYSIS,
    SLEEP_KEY, SLEEP_VALUE_PREFIX,
)
from ..models import DayRecord, ExportRow, RawRecord
from ..sleep import split_sessions, summarize_sessions
from ..utils import extract_date, parse_timestamp
from .base import BaseMetricParser


def normalize_stage(value: str) -> str:
    """HKCategoryValueSleepAnalysisAsleepCore -> asleepCore."""
    value = value.replace('\r', '').replace('\n', '').strip()
    if value.startswith(SLEEP_VALUE_PREFIX):
        value = value[len(SLEEP_VALUE_PREFIX):]
        value = value[:1].lower() + value[1:]
    return value


class SleepAnalysisParser(BaseMetricParser):
    """Parser for HKCategoryTypeIdentifierSleepAnalysis interval rows."""

    METRIC_TYPE = SLEEP_ANALYSIS
    METRIC_KEY = SLEEP_KEY
    MIN_FIELDS = MIN_INTERVAL_FIELDS

    def parse_record(self, row: ExportRow) -> RawRecord | None:
        fields = row.fields
        date = extract_date(fields[FIELD_START])
        start = parse_timestamp(fields[FIELD_START])
        end = parse_timestamp(fields[FIELD_END])

        if start is not None and end is not None and end < start:
            self._log_error(f"Sleep row ends before it starts: {list(fields)}")
            return None

        duration = None
        if start is not None and end is not None:
            duration = (end - start).total_seconds() / 60
        else:
            self._log_error(f"Sleep row without usable timestamps: {list(fields)}")

        return RawRecord(
            date=date,
            metric_type=row.metric_type,
            value=normalize_stage(fields[FIELD_STAGE]),
            duration=duration,
            start=start,
            end=end,
        )

    def build_days(self, records: list[RawRecord]) -> list[DayRecord]:
        # A nap and the night that start on one date share that date's summary
        by_date: dict[str, list[list[RawRecord]]] = {}
        for session in split_sessions(records):
            by_date.setdefault(session[0].date, []).append(session)

        days = []
        for day, sessions in by_date.items():
            summary = summarize_sessions(sessions)
            if summary is not None:
                days.append(DayRecord(date=day, metrics={self.METRIC_KEY: summary}))
        return days
