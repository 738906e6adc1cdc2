"""
Merging of per-day records produced by independent parsers.

Sources are folded in the order they are supplied:
- Metric maps merge key by key; on collision the later source wins
- Exercise lists are concatenated
- A later non-empty description replaces the earlier one
"""

from dataclasses import replace
from functools import reduce
from typing import Iterable, Sequence
import logging

from .derived import apply_derived_metrics
from .models import DayRecord

logger = logging.getLogger(__name__)


def merge_day(existing: DayRecord | None, new: DayRecord) -> DayRecord:
    """Combine two records for the same date into a new record."""
    if existing is None:
        return DayRecord(
            date=new.date,
            metrics=dict(new.metrics),
            exercises=list(new.exercises) if new.exercises is not None else None,
            description=new.description,
        )

    exercises = existing.exercises
    if new.exercises is not None:
        exercises = (existing.exercises or []) + list(new.exercises)

    return replace(
        existing,
        metrics={**existing.metrics, **new.metrics},
        exercises=exercises,
        description=new.description or existing.description,
    )


def _fold_source(
    merged: dict[str, DayRecord], source: Iterable[DayRecord]
) -> dict[str, DayRecord]:
    result = dict(merged)
    for day in source:
        result[day.date] = merge_day(result.get(day.date), day)
    return result


def merge_day_records(sources: Sequence[Iterable[DayRecord]]) -> list[DayRecord]:
    """
    Merge parser outputs into one record per date, sorted by date.
    The inputs are not modified.
    """
    merged = reduce(_fold_source, sources, {})
    return [merged[day] for day in sorted(merged)]


def merge(sources: Sequence[Iterable[DayRecord]], derive: bool = True) -> list[DayRecord]:
    """
    Merge parser outputs and, by default, add derived metrics in place
    as a final pass over the merged records.
    """
    days = merge_day_records(sources)
    if derive:
        apply_derived_metrics(days)
    logger.info(f"Merged {len(sources)} sources into {len(days)} daily records")
    return days
