"""
Pure helpers used by every parser: date extraction, rounding and
timestamp parsing.
"""

import logging
import math
import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from .constants import MINUTES_PER_HOUR

logger = logging.getLogger(__name__)

# Health Export timestamp formats, most common first
DATETIME_FORMATS = [
    '%Y-%m-%d %H:%M:%S %z',    # 2025-08-23 19:50:00 +0000
    '%Y-%m-%d %H:%M:%S%z',     # 2025-08-23 19:50:00+0000
    '%Y-%m-%dT%H:%M:%S%z',     # 2025-08-23T19:50:00+00:00
    '%Y-%m-%dT%H:%M:%S.%f%z',  # 2025-08-23T19:50:00.000+00:00
    '%Y-%m-%dT%H:%M:%S',       # 2025-08-23T19:50:00
    '%Y-%m-%d %H:%M:%S',       # 2025-08-23 19:50:00
    '%Y-%m-%dT%H:%M',          # 2025-08-23T19:50
]

_DATE_SEPARATOR = re.compile(r'[T ]')
_DURATION = re.compile(r'(\d+)h\s*(\d+)m')


def extract_date(timestamp: str) -> str:
    """
    Return the date portion of a timestamp (text before the first space or T).
    No timezone conversion: the source's own date is authoritative.

    Raises ValueError when that portion is not a YYYY-MM-DD date.
    """
    day = _DATE_SEPARATOR.split(timestamp.strip(), maxsplit=1)[0]
    try:
        date.fromisoformat(day)
    except ValueError:
        raise ValueError(f"No calendar date in timestamp: {timestamp!r}") from None
    return day


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to `places` decimals, halves away from zero.

    Works on the shortest decimal representation of the float, so
    89.05000305175781 -> 89.05 and 2.675 -> 2.68.
    """
    exponent = Decimal(1).scaleb(-places)
    # float() first: numpy scalars have a non-numeric repr
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def parse_number(text: str) -> float:
    """Parse a numeric field. Raises ValueError for blank or non-finite input."""
    cleaned = text.replace('\r', '').replace('\n', '').strip()
    value = float(cleaned)
    if not math.isfinite(value):
        raise ValueError(f"Non-finite value: {text!r}")
    return value


def parse_timestamp(value: str) -> datetime | None:
    """
    Parse an export timestamp into a naive UTC instant.

    Tries the known formats first and falls back to pandas, which handles
    most other ISO-like variants. Returns None when nothing matches.
    """
    if not value or not value.strip():
        return None

    value = value.strip()
    for fmt in DATETIME_FORMATS:
        try:
            return _to_utc_naive(datetime.strptime(value, fmt))
        except ValueError:
            continue

    try:
        parsed = pd.to_datetime(value)
    except (ValueError, TypeError):
        logger.warning(f"Could not parse datetime: {value}")
        return None
    if pd.isna(parsed):
        return None
    return _to_utc_naive(parsed.to_pydatetime())


def _to_utc_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def format_duration(minutes: float) -> str:
    """Format minutes as "<hours>h <minutes>m", rounded to the whole minute."""
    total = int(round_half_up(minutes, 0))
    hours, remaining = divmod(total, MINUTES_PER_HOUR)
    return f"{hours}h {remaining}m"


def parse_duration(text: str) -> int:
    """Inverse of format_duration. Unrecognized text counts as 0 minutes."""
    match = _DURATION.search(text or '')
    if not match:
        return 0
    return int(match.group(1)) * MINUTES_PER_HOUR + int(match.group(2))
