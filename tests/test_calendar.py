"""Tests for working calendars."""

from datetime import date, datetime, timezone

import pytest

from ganttplan.calendar import Calendar, Weekday, is_working_day, parse_weekday

SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)
MONDAY = date(2024, 1, 8)
FRIDAY = date(2024, 1, 5)


class TestWorkingDays:
    """Test the working-day rules."""

    def test_every_day_works_by_default(self) -> None:
        """Test that a calendar with no directives has no days off."""
        calendar = Calendar()

        assert calendar.is_working_day(SATURDAY)
        assert calendar.is_working_day(SUNDAY)

    def test_weekend_exclusion(self) -> None:
        """Test that Saturday and Sunday are skipped once weekends are excluded."""
        calendar = Calendar(exclude_weekends=True)

        assert not calendar.is_working_day(SATURDAY)
        assert not calendar.is_working_day(SUNDAY)
        assert calendar.is_working_day(MONDAY)

    def test_include_overrides_weekend(self) -> None:
        """Test that an included weekend date is a working day."""
        calendar = Calendar(exclude_weekends=True, include_dates=[SATURDAY])

        assert calendar.is_working_day(SATURDAY)
        assert not calendar.is_working_day(SUNDAY)

    def test_explicit_exclude_beats_include_on_weekday(self) -> None:
        """Test that an include does not undo the exclusion of a weekday."""
        calendar = Calendar(exclude_dates=[MONDAY], include_dates=[MONDAY])

        assert not calendar.is_working_day(MONDAY)

    def test_included_weekend_day_also_excluded(self) -> None:
        """Test that the include list alone decides on a weekend day."""
        calendar = Calendar(exclude_weekends=True, exclude_dates=[SATURDAY], include_dates=[SATURDAY])

        assert calendar.is_working_day(SATURDAY)

    def test_explicit_exclude(self) -> None:
        """Test that excluded dates are non-working without weekend exclusion."""
        calendar = Calendar(exclude_dates=[MONDAY])

        assert not calendar.is_working_day(MONDAY)
        assert calendar.is_working_day(SATURDAY)

    def test_custom_weekend(self) -> None:
        """Test a weekend made of Friday only."""
        calendar = Calendar(exclude_weekends=True, weekend_days=["fri"])

        assert calendar.weekend_days == [Weekday.FRIDAY]
        assert not calendar.is_working_day(FRIDAY)
        assert calendar.is_working_day(SATURDAY)

    def test_instant_is_judged_in_calendar_zone(self) -> None:
        """Test that an aware instant is converted to the calendar's zone first."""
        calendar = Calendar(timezone="Asia/Tokyo", exclude_weekends=True)
        # Friday 20:00 UTC is Saturday 05:00 in Tokyo
        instant = datetime(2024, 1, 5, 20, 0, tzinfo=timezone.utc)

        assert not calendar.is_working_day(instant)
        assert Calendar(exclude_weekends=True).is_working_day(instant)

    def test_module_function_delegates(self) -> None:
        """Test the free function form."""
        assert not is_working_day(SUNDAY, Calendar(exclude_weekends=True))


class TestFromDirectives:
    """Test building calendars from document shorthand."""

    def test_excludes_weekends(self) -> None:
        """Test the 'weekends' keyword."""
        calendar = Calendar.from_directives(excludes=["weekends"])

        assert calendar.exclude_weekends
        assert calendar.weekend() == frozenset({Weekday.SATURDAY, Weekday.SUNDAY})

    def test_excluded_weekday_name_joins_weekend(self) -> None:
        """Test that 'excludes: friday' makes Friday a weekend day."""
        calendar = Calendar.from_directives(excludes=["friday"])

        assert calendar.exclude_weekends
        assert calendar.weekend() == frozenset({Weekday.FRIDAY})

    def test_weekend_directive_adds_to_saturday(self) -> None:
        """Test that 'weekend: friday' means a Friday/Saturday weekend."""
        calendar = Calendar.from_directives(weekend=["friday"])

        assert calendar.exclude_weekends
        assert calendar.weekend() == frozenset({Weekday.FRIDAY, Weekday.SATURDAY})

    def test_empty_weekend_directive_uses_default(self) -> None:
        """Test that an empty weekend list keeps Saturday/Sunday."""
        calendar = Calendar.from_directives(weekend=[])

        assert calendar.weekend() == frozenset({Weekday.SATURDAY, Weekday.SUNDAY})

    def test_unknown_weekend_day_rejected(self) -> None:
        """Test that a misspelled weekday is an error."""
        with pytest.raises(ValueError, match="blursday"):
            Calendar.from_directives(weekend=["blursday"])

    def test_dates(self) -> None:
        """Test explicit exclude and include dates, as strings and dates."""
        calendar = Calendar.from_directives(
            excludes=["2024-01-15", date(2024, 1, 16)],
            includes=["2024-01-06"],
        )

        assert calendar.exclude_dates == [date(2024, 1, 15), date(2024, 1, 16)]
        assert calendar.include_dates == [SATURDAY]
        assert not calendar.exclude_weekends

    def test_invalid_exclude_rejected(self) -> None:
        """Test that an exclude that is neither weekday nor date is an error."""
        with pytest.raises(ValueError):
            Calendar.from_directives(excludes=["someday"])


class TestZones:
    """Test time zone handling."""

    def test_zone_lookup(self) -> None:
        """Test that a named zone is loaded."""
        assert Calendar(timezone="Europe/Berlin").zone().key == "Europe/Berlin"

    def test_unknown_zone_falls_back_to_utc(self) -> None:
        """Test that an unknown zone name does not abort."""
        assert Calendar(timezone="Mars/Olympus_Mons").zone().key == "UTC"


class TestParseWeekday:
    """Test weekday name parsing."""

    def test_full_and_abbreviated_names(self) -> None:
        """Test names are case-insensitive and accept abbreviations."""
        assert parse_weekday("Friday") == Weekday.FRIDAY
        assert parse_weekday("thurs") == Weekday.THURSDAY
        assert parse_weekday(" SUN ") == Weekday.SUNDAY

    def test_unknown_name(self) -> None:
        """Test that unknown names give None."""
        assert parse_weekday("nope") is None

    def test_weekday_of_date(self) -> None:
        """Test mapping a date to its weekday."""
        assert Weekday.of(MONDAY) == Weekday.MONDAY
        assert Weekday.of(SUNDAY) == Weekday.SUNDAY
