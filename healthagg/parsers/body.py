"""
Body composition parsers: body mass, BMI, lean body mass and body fat.

Scales sync several readings a day; the last reading of a date wins.
"""

from ..constants import (
    BODY_FAT_PERCENTAGE, BODY_FAT_PERCENTAGE_KEY, BODY_MASS, BODY_MASS_INDEX,
    BODY_MASS_INDEX_KEY, BODY_MASS_KEY, FIELD_START, FIELD_UNIT, FIELD_VALUE,
    LEAN_BODY_MASS, LEAN_BODY_MASS_KEY, MIN_POINT_FIELDS,
)
from ..models import DayRecord, ExportRow, RawRecord
from ..utils import extract_date, parse_number, round_half_up
from .base import BaseMetricParser


class BodyMetricParser(BaseMetricParser):
    """Last-value-wins parser for a single point-style body metric."""

    MIN_FIELDS = MIN_POINT_FIELDS

    def convert(self, value: float) -> float:
        """Hook for unit conversion before rounding."""
        return value

    def parse_record(self, row: ExportRow) -> RawRecord | None:
        fields = row.fields
        value = self.convert(parse_number(fields[FIELD_VALUE]))
        return RawRecord(
            date=extract_date(fields[FIELD_START]),
            metric_type=row.metric_type,
            value=round_half_up(value),
            unit=fields[FIELD_UNIT],
        )

    def build_days(self, records: list[RawRecord]) -> list[DayRecord]:
        latest: dict[str, float] = {}
        for record in records:
            latest[record.date] = record.value

        return [
            DayRecord(date=day, metrics={self.METRIC_KEY: value})
            for day, value in latest.items()
        ]


class BodyMassParser(BodyMetricParser):
    METRIC_TYPE = BODY_MASS
    METRIC_KEY = BODY_MASS_KEY


class BodyMassIndexParser(BodyMetricParser):
    METRIC_TYPE = BODY_MASS_INDEX
    METRIC_KEY = BODY_MASS_INDEX_KEY


class LeanBodyMassParser(BodyMetricParser):
    METRIC_TYPE = LEAN_BODY_MASS
    METRIC_KEY = LEAN_BODY_MASS_KEY


class BodyFatPercentageParser(BodyMetricParser):
    """Body fat arrives as a fraction (0.15) and is stored as a percentage (15)."""

    METRIC_TYPE = BODY_FAT_PERCENTAGE
    METRIC_KEY = BODY_FAT_PERCENTAGE_KEY

    def convert(self, value: float) -> float:
        return value * 100
