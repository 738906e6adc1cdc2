"""
Health metrics aggregation engine.

Turns Health Export CSV rows (one file per metric) into one record per
calendar day:
- Per-metric parsers (steps, sleep, body composition, heart rate)
- Sleep session reconstruction across midnight
- Derived body-composition indices (FFMI, BCI)
- Deterministic merge of all parser outputs
"""

from .engine import HealthEngine, aggregate
from .models import DayRecord, ExportRow, Quantity, RawRecord, SleepSummary

__all__ = [
    'HealthEngine',
    'aggregate',
    'DayRecord',
    'ExportRow',
    'Quantity',
    'RawRecord',
    'SleepSummary',
]
