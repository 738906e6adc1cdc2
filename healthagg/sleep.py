"""
Sleep session reconstruction and per-session stage metrics.

Sleep trackers write one interval record per stage. A night's records are
clustered into a session by the gap between them, and each session is
attributed to the date it started on, even when it runs past midnight.
"""

from collections import defaultdict
from datetime import timedelta
from typing import Iterable
import logging

from .constants import (
    ASLEEP_CORE, ASLEEP_DEEP, ASLEEP_REM, ASLEEP_STATES, AWAKE, IN_BED,
    SLEEP_SESSION_GAP, SLEEP_STATES,
)
from .models import RawRecord, SleepSummary
from .utils import format_duration

logger = logging.getLogger(__name__)


def split_sessions(
    records: Iterable[RawRecord],
    gap: timedelta = SLEEP_SESSION_GAP,
) -> list[list[RawRecord]]:
    """
    Cluster sleep interval records into sessions, in start order.

    A record opens a new session when there is no open session, or when it
    starts more than `gap` after the previous record ended; otherwise it
    joins the open session. Records without a start or end timestamp are
    skipped.
    """
    timed = [r for r in records if r.start is not None and r.end is not None]
    timed.sort(key=lambda r: r.start)

    sessions: list[list[RawRecord]] = []
    for record in timed:
        if not sessions or record.start - sessions[-1][-1].end > gap:
            logger.debug(f"Opening sleep session for {record.date} at {record.start}")
            sessions.append([])
        sessions[-1].append(record)

    return sessions


def group_by_session(
    records: Iterable[RawRecord],
    gap: timedelta = SLEEP_SESSION_GAP,
) -> dict[str, list[RawRecord]]:
    """
    Sessions keyed by the date of their first record.

    A session keeps the key it was opened with. If two sessions open on the
    same date (a nap and the night), their records share that date's list;
    use split_sessions when the boundary between them matters.
    """
    grouped: dict[str, list[RawRecord]] = {}
    for session in split_sessions(records, gap):
        grouped.setdefault(session[0].date, []).extend(session)
    return grouped


def _tally(records: Iterable[RawRecord]) -> tuple[dict[str, float], int]:
    minutes: dict[str, float] = defaultdict(float)
    wake_ups = 0
    previous: str | None = None

    for record in records:
        state = record.value
        if not isinstance(state, str) or state not in SLEEP_STATES:
            continue

        minutes[state] += record.duration or 0
        if previous in ASLEEP_STATES and state == AWAKE:
            wake_ups += 1
        previous = state

    return minutes, wake_ups


def summarize_sessions(sessions: Iterable[Iterable[RawRecord]]) -> SleepSummary | None:
    """
    Combine several sessions (usually all those starting on one date).

    Stage minutes and wake-ups are tallied per session and summed, so a
    transition across a session boundary never counts as a wake-up.
    Returns None when every session is empty.
    """
    minutes: dict[str, float] = defaultdict(float)
    wake_ups = 0
    seen = False

    for session in sessions:
        session = list(session)
        if not session:
            continue
        seen = True
        session_minutes, session_wake_ups = _tally(session)
        for state, value in session_minutes.items():
            minutes[state] += value
        wake_ups += session_wake_ups

    if not seen:
        return None

    total = minutes[ASLEEP_CORE] + minutes[ASLEEP_DEEP] + minutes[ASLEEP_REM]
    logger.debug(
        f"Sleep: {total:.0f} min asleep, {minutes[IN_BED]:.0f} min in bed, "
        f"{wake_ups} wake-ups"
    )

    return SleepSummary(
        core=format_duration(minutes[ASLEEP_CORE]),
        deep=format_duration(minutes[ASLEEP_DEEP]),
        rem=format_duration(minutes[ASLEEP_REM]),
        total=format_duration(total),
        wake_ups=wake_ups,
    )


def calculate_sleep_metrics(records: Iterable[RawRecord]) -> SleepSummary | None:
    """
    Reduce one session's records into stage durations and a wake-up count.

    A wake-up is counted each time an asleep stage is directly followed by
    `awake`. Total sleep is Core + Deep + REM. Stage values outside the known
    set are ignored. Returns None for an empty session.
    """
    return summarize_sessions([records])
