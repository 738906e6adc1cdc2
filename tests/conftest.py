from datetime import datetime

import pytest

from healthagg.constants import SLEEP_ANALYSIS
from healthagg.models import ExportRow, RawRecord
from healthagg.utils import extract_date


@pytest.fixture
def point_row():
    """
    Build a 9-field point row: type, source, version, device, created,
    start, end, unit, value.
    """
    def _make(metric_type, start, value, unit='count', source='Zepp Life'):
        return ExportRow((
            metric_type,
            source,
            '202503131848',
            'iPhone13,2',
            '',
            start,
            start,
            unit,
            str(value),
        ))
    return _make


@pytest.fixture
def sleep_row():
    """Build an 8-field sleep interval row."""
    def _make(start, end, stage, source='Zepp Life'):
        return ExportRow((
            SLEEP_ANALYSIS,
            source,
            '202503131848',
            'iPhone13,2',
            '',
            start,
            end,
            stage,
        ))
    return _make


@pytest.fixture
def sleep_record():
    """Build a sleep RawRecord directly from ISO timestamps."""
    def _make(start, end, stage):
        start_dt = datetime.fromisoformat(start)
        end_dt = datetime.fromisoformat(end)
        return RawRecord(
            date=extract_date(start),
            metric_type=SLEEP_ANALYSIS,
            value=stage,
            duration=(end_dt - start_dt).total_seconds() / 60,
            start=start_dt,
            end=end_dt,
        )
    return _make
