"""Duration conversion and day-boundary helpers."""

from __future__ import annotations

from datetime import datetime, time, timedelta

from ganttplan.models import (
    DAYS_PER_MONTH,
    DAYS_PER_WEEK,
    HOURS_PER_DAY,
    DurationSpec,
    DurationUnit,
    Task,
)

# Smallest step between two distinct instants (datetime resolution)
MIN_INSTANT = timedelta(microseconds=1)

CLOCK_UNITS = frozenset({DurationUnit.MINUTE, DurationUnit.HOUR})


def to_span(value: int, unit: DurationUnit) -> timedelta:
    """Convert a duration value and unit to elapsed time.

    Months are a fixed 30 days. Non-positive values give a zero span.
    """
    if value <= 0:
        return timedelta(0)
    if unit == DurationUnit.MINUTE:
        return timedelta(minutes=value)
    if unit == DurationUnit.HOUR:
        return timedelta(hours=value)
    if unit == DurationUnit.WEEK:
        return timedelta(hours=value * DAYS_PER_WEEK * HOURS_PER_DAY)
    if unit == DurationUnit.MONTH:
        return timedelta(hours=value * DAYS_PER_MONTH * HOURS_PER_DAY)
    return timedelta(hours=value * HOURS_PER_DAY)


def duration_span(duration: DurationSpec) -> timedelta:
    """Elapsed time of a DurationSpec."""
    return to_span(duration.value, duration.unit)


def is_clock_unit(duration: DurationSpec) -> bool:
    return duration.unit in CLOCK_UNITS


def is_time_based(duration: DurationSpec) -> bool:
    """True if a duration ends at an exact instant rather than at the end of a day.

    Minutes, and hours short of a full day, are placed to the instant.
    """
    if duration.unit == DurationUnit.MINUTE:
        return True
    return duration.unit == DurationUnit.HOUR and duration.value < HOURS_PER_DAY


def is_clock_granular(task: Task) -> bool:
    """True if a task is positioned at sub-day precision.

    That is the case when it carries an explicit time of day or its duration
    is in minutes or hours.
    """
    return task.has_time or task.start_clock is not None or is_clock_unit(task.duration)


def coarse_day_count(duration: DurationSpec) -> int | None:
    """Literal day count of a week or month duration, None for other units."""
    if duration.value <= 0:
        return None
    if duration.unit == DurationUnit.WEEK:
        return duration.value * DAYS_PER_WEEK
    if duration.unit == DurationUnit.MONTH:
        return duration.value * DAYS_PER_MONTH
    return None


def start_of_day(instant: datetime) -> datetime:
    """Midnight of the instant's calendar day, in the instant's own zone."""
    return datetime.combine(instant.date(), time(0), tzinfo=instant.tzinfo)


def start_of_next_day(instant: datetime) -> datetime:
    """Midnight of the calendar day after the instant's day."""
    return datetime.combine(instant.date() + timedelta(days=1), time(0), tzinfo=instant.tzinfo)


def inclusive_days(start: datetime, end: datetime) -> int:
    """Inclusive count of calendar days from start's day to end's day, at least 1."""
    return max((end.date() - start.date()).days + 1, 1)
