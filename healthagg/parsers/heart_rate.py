"""
Heart rate parser.

Uses pandas to reduce the many per-minute samples of a day into
average, max and min.
"""

import pandas as pd

from ..constants import (
    FIELD_START, FIELD_UNIT, FIELD_VALUE, HEART_RATE, HEART_RATE_KEY,
    MIN_POINT_FIELDS,
)
from ..models import DayRecord, ExportRow, Quantity, RawRecord
from ..utils import extract_date, parse_number, round_half_up
from .base import BaseMetricParser


class HeartRateParser(BaseMetricParser):
    """Parser for HKQuantityTypeIdentifierHeartRate rows."""

    METRIC_TYPE = HEART_RATE
    METRIC_KEY = HEART_RATE_KEY
    MIN_FIELDS = MIN_POINT_FIELDS

    def parse_record(self, row: ExportRow) -> RawRecord | None:
        fields = row.fields
        return RawRecord(
            date=extract_date(fields[FIELD_START]),
            metric_type=row.metric_type,
            value=parse_number(fields[FIELD_VALUE]),
            unit=fields[FIELD_UNIT],
        )

    def build_days(self, records: list[RawRecord]) -> list[DayRecord]:
        df = pd.DataFrame(
            [{'date': r.date, 'value': r.value, 'unit': r.unit} for r in records]
        )

        # The first unit seen for a date tags all three statistics
        daily = df.groupby('date', sort=False).agg(
            average=('value', 'mean'),
            max_value=('value', 'max'),
            min_value=('value', 'min'),
            unit=('unit', 'first'),
        ).reset_index()

        days = []
        for _, row in daily.iterrows():
            unit = row['unit']
            days.append(DayRecord(
                date=row['date'],
                metrics={
                    self.METRIC_KEY: {
                        'average': Quantity(round_half_up(float(row['average'])), unit),
                        'max': Quantity(round_half_up(float(row['max_value'])), unit),
                        'min': Quantity(round_half_up(float(row['min_value'])), unit),
                    }
                },
            ))
        return days
