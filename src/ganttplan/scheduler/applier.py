"""Forward calendar walk: consume a duration across working days."""

from __future__ import annotations

from datetime import datetime, timedelta

from ganttplan.calendar import Calendar
from ganttplan.logger import debug_enabled, get_logger
from ganttplan.models import DurationSpec

from .durations import (
    MIN_INSTANT,
    coarse_day_count,
    duration_span,
    inclusive_days,
    is_time_based,
    start_of_next_day,
)

logger = get_logger()


def apply_calendar(
    start: datetime,
    span: timedelta,
    calendar: Calendar,
    *,
    time_based: bool = False,
) -> tuple[datetime, int]:
    """Walk forward from start, consuming span on working days only.

    Non-working days are skipped without consuming anything. On a working day
    the walk consumes the rest of the day or the remaining span, whichever is
    smaller.

    Args:
        start: Start instant (aware, in the calendar's zone)
        span: Elapsed time to consume
        calendar: Calendar deciding which days are working days
        time_based: If True the end is the exact instant the span runs out;
            otherwise it is the last instant of the final working day

    Returns:
        Tuple of (end, day_count). day_count is the inclusive number of
        calendar days from the first working day to the end, at least 1.
        A zero span returns (start, 0).
    """
    start = start.astimezone(calendar.zone())
    if span <= timedelta(0):
        return start, 0

    # A non-working start day does not count towards the day span
    current = start
    while not calendar.is_working_day(current):
        if debug_enabled():
            logger.debug(f"      {current.date()} is not a working day, moving start")
        current = start_of_next_day(current)
    effective_start = current

    remaining = span
    while remaining > timedelta(0):
        if not calendar.is_working_day(current):
            if debug_enabled():
                logger.debug(f"      skipping {current.date()}")
            current = start_of_next_day(current)
            continue
        day_end = start_of_next_day(current)
        available = day_end - current
        if remaining <= available:
            current = current + remaining if time_based else current + remaining - MIN_INSTANT
            break
        remaining -= available
        current = day_end

    return current, inclusive_days(effective_start, current)


def apply_duration(
    start: datetime,
    duration: DurationSpec,
    calendar: Calendar,
    *,
    literal_coarse_units: bool = True,
) -> tuple[datetime, int]:
    """Apply a task duration from start, returning (end, day_count).

    Week and month durations, when literal_coarse_units is on, report their
    literal day multiple (7 or 30 per unit) and end that many days after
    start, ignoring calendar exclusions.
    """
    literal_days = coarse_day_count(duration) if literal_coarse_units else None
    if literal_days is not None:
        start = start.astimezone(calendar.zone())
        return start + timedelta(days=literal_days) - MIN_INSTANT, literal_days
    return apply_calendar(
        start, duration_span(duration), calendar, time_based=is_time_based(duration)
    )
