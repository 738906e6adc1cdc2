"""
Weekly grouping and averaged health summaries over daily records.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable
import logging

import pandas as pd

from .constants import SLEEP_KEY
from .models import DayRecord, Quantity, SleepSummary
from .utils import format_duration, parse_duration, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class WeekSummary:
    """Daily records of one ISO week plus their averaged metrics."""
    week: str
    total_days: int
    days: list[DayRecord] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'week': self.week,
            'totalDays': self.total_days,
            'days': [d.to_dict() for d in self.days],
            'summary': {
                k: v.to_dict() if hasattr(v, 'to_dict') else v
                for k, v in self.summary.items()
            },
        }


def week_key(day: str) -> str:
    """'2025-08-24' -> '2025-week-34' (ISO year and week)."""
    iso = date.fromisoformat(day).isocalendar()
    return f"{iso[0]}-week-{iso[1]:02d}"


def _numeric(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, Quantity):
        return float(value.value)
    if isinstance(value, dict):
        average = value.get('average')
        if isinstance(average, Quantity):
            return float(average.value)
    return None


def average_sleep(summaries: list[SleepSummary]) -> SleepSummary | None:
    """Average stage durations (per minute) and wake-ups over several nights."""
    if not summaries:
        return None

    df = pd.DataFrame([
        {
            'core': parse_duration(s.core),
            'deep': parse_duration(s.deep),
            'rem': parse_duration(s.rem),
            'total': parse_duration(s.total),
            'wake_ups': s.wake_ups,
        }
        for s in summaries
    ])
    means = df.mean()

    return SleepSummary(
        core=format_duration(means['core']),
        deep=format_duration(means['deep']),
        rem=format_duration(means['rem']),
        total=format_duration(means['total']),
        wake_ups=round_half_up(float(means['wake_ups'])),
    )


def calculate_health_summary(days: Iterable[DayRecord]) -> dict[str, Any]:
    """
    Average every metric over the days that report it.

    Numbers are averaged and rounded to two decimals, heart rate uses its
    daily average, and sleep is averaged stage by stage. Metrics of any
    other shape are left out.
    """
    days = list(days)
    if not days:
        return {}

    numeric_rows: list[dict[str, float]] = []
    sleep: list[SleepSummary] = []
    for day in days:
        row = {}
        for key, value in day.metrics.items():
            if key == SLEEP_KEY:
                if isinstance(value, SleepSummary):
                    sleep.append(value)
                continue
            number = _numeric(value)
            if number is not None:
                row[key] = number
        numeric_rows.append(row)

    summary: dict[str, Any] = {}
    df = pd.DataFrame(numeric_rows)
    if not df.empty:
        for key, mean in df.mean(skipna=True).items():
            if pd.notna(mean):
                summary[key] = round_half_up(float(mean))

    sleep_average = average_sleep(sleep)
    if sleep_average is not None:
        summary[SLEEP_KEY] = sleep_average

    return summary


def group_by_week(days: Iterable[DayRecord]) -> list[WeekSummary]:
    """Bucket daily records by ISO week, in ascending order."""
    weeks: dict[str, list[DayRecord]] = {}
    for day in sorted(days, key=lambda d: d.date):
        weeks.setdefault(week_key(day.date), []).append(day)

    logger.info(f"Grouped daily records into {len(weeks)} weeks")
    return [
        WeekSummary(
            week=key,
            total_days=len(week_days),
            days=week_days,
            summary=calculate_health_summary(week_days),
        )
        for key, week_days in sorted(weeks.items())
    ]
