"""Working calendar: time zone, weekend set and explicit date lists.

A day is non-working when weekend exclusion is on and its weekday is in the
weekend set (default Saturday/Sunday), unless the exact date is listed as an
include. Any other day is non-working only if the date is explicitly excluded.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from .logger import get_logger

logger = get_logger()

DEFAULT_TIMEZONE = "UTC"


class Weekday(str, Enum):
    """Days of the week, ordered like date.weekday()."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> Weekday:
        return list(cls)[day.weekday()]


DEFAULT_WEEKEND = (Weekday.SATURDAY, Weekday.SUNDAY)

_WEEKDAY_ALIASES = {
    "mon": Weekday.MONDAY,
    "tue": Weekday.TUESDAY,
    "tues": Weekday.TUESDAY,
    "wed": Weekday.WEDNESDAY,
    "thu": Weekday.THURSDAY,
    "thur": Weekday.THURSDAY,
    "thurs": Weekday.THURSDAY,
    "fri": Weekday.FRIDAY,
    "sat": Weekday.SATURDAY,
    "sun": Weekday.SUNDAY,
}


def parse_weekday(text: str) -> Weekday | None:
    """Parse a weekday name or common abbreviation, case-insensitively."""
    token = text.strip().lower()
    if token in _WEEKDAY_ALIASES:
        return _WEEKDAY_ALIASES[token]
    try:
        return Weekday(token)
    except ValueError:
        return None


@lru_cache(maxsize=32)
def load_zone(name: str) -> ZoneInfo:
    """Load a time zone, falling back to UTC when the name is unknown."""
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone '{name}', using {DEFAULT_TIMEZONE}")
        return ZoneInfo(DEFAULT_TIMEZONE)


class Calendar(BaseModel):
    """Business calendar used to skip non-working days."""

    timezone: str = DEFAULT_TIMEZONE
    exclude_weekends: bool = False
    weekend_days: list[Weekday] = Field(default_factory=list[Weekday])  # Empty = Sat/Sun
    exclude_dates: list[date] = Field(default_factory=list[date])
    include_dates: list[date] = Field(default_factory=list[date])

    @field_validator("weekend_days", mode="before")
    @classmethod
    def parse_weekend_names(cls, v: object) -> object:
        """Accept abbreviations such as 'fri' as well as full names."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            parsed: list[object] = []
            for item in v:  # type: ignore[misc]
                weekday = parse_weekday(item) if isinstance(item, str) else None
                parsed.append(weekday or item)
            return parsed
        return v

    @classmethod
    def from_directives(
        cls,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        excludes: Iterable[str | date] = (),
        includes: Iterable[str | date] = (),
        weekend: Iterable[str] | None = None,
    ) -> Calendar:
        """Build a calendar from shorthand directives.

        - excludes: "weekends", weekday names (added to the weekend set) or dates
        - includes: weekend dates that are worked anyway
        - weekend: weekday names; the weekend becomes Saturday plus these days
          (an empty list means the default Saturday/Sunday)

        Any weekend-related directive turns weekend exclusion on.

        Raises:
            ValueError: If an exclude/include entry is neither a weekday nor a date
        """
        exclude_weekends = False
        weekend_days: list[Weekday] = []
        exclude_dates: list[date] = []
        include_dates: list[date] = []

        for item in excludes:
            if isinstance(item, date):
                exclude_dates.append(_as_date(item))
                continue
            token = item.strip().lower()
            if token.startswith("weekend"):
                exclude_weekends = True
                if not weekend_days:
                    weekend_days = list(DEFAULT_WEEKEND)
                continue
            weekday = parse_weekday(token)
            if weekday is not None:
                exclude_weekends = True
                if weekday not in weekend_days:
                    weekend_days.append(weekday)
                continue
            exclude_dates.append(date.fromisoformat(token))

        for item in includes:
            include_dates.append(_as_date(item) if isinstance(item, date) else date.fromisoformat(item))

        if weekend is not None:
            exclude_weekends = True
            names = list(weekend)
            tokens = [parse_weekday(t) for t in names]
            unknown = [t for t, wd in zip(names, tokens, strict=True) if wd is None]
            if unknown:
                raise ValueError(f"Unknown weekday(s) in weekend: {', '.join(unknown)}")
            if tokens:
                weekend_days = [Weekday.SATURDAY]
                for weekday in tokens:
                    if weekday is not None and weekday not in weekend_days:
                        weekend_days.append(weekday)
            else:
                weekend_days = list(DEFAULT_WEEKEND)

        return cls(
            timezone=timezone,
            exclude_weekends=exclude_weekends,
            weekend_days=weekend_days,
            exclude_dates=exclude_dates,
            include_dates=include_dates,
        )

    def zone(self) -> ZoneInfo:
        """Get the calendar's time zone."""
        return load_zone(self.timezone)

    def weekend(self) -> frozenset[Weekday]:
        """Get the effective weekend set."""
        return frozenset(self.weekend_days or DEFAULT_WEEKEND)

    def local_date(self, day: date | datetime) -> date:
        """Calendar date of a day or instant, as seen in this calendar's zone."""
        if isinstance(day, datetime):
            if day.tzinfo is not None:
                day = day.astimezone(self.zone())
            return day.date()
        return day

    def is_working_day(self, day: date | datetime) -> bool:
        """Check whether a day is a working day under this calendar."""
        local = self.local_date(day)
        if self.exclude_weekends and Weekday.of(local) in self.weekend():
            # Includes only override the weekend rule
            return local in self.include_dates
        return local not in self.exclude_dates


def is_working_day(day: date | datetime, calendar: Calendar) -> bool:
    """Check whether a day is a working day under a calendar."""
    return calendar.is_working_day(day)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
