"""Data models for ganttplan."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .calendar import Calendar, Weekday

# Duration conversion constants
HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


class DurationUnit(str, Enum):
    """Units a task duration can be expressed in."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class TaskStatus(str, Enum):
    """Status tag of a task, as shown by the renderer."""

    NORMAL = "normal"
    DONE = "done"
    ACTIVE = "active"
    CRITICAL = "critical"
    MILESTONE = "milestone"


class DependencyKind(str, Enum):
    """Kinds of explicit dependency between tasks."""

    AFTER = "after"  # Start strictly after the target ends
    BEFORE = "before"  # End before the target starts ("until" is an alias)


_DURATION_SUFFIXES = {
    "mo": DurationUnit.MONTH,
    "w": DurationUnit.WEEK,
    "d": DurationUnit.DAY,
    "h": DurationUnit.HOUR,
    "m": DurationUnit.MINUTE,
}

_DURATION_RE = re.compile(r"^(\d+)\s*(mo|w|d|h|m)?$")


@dataclass(frozen=True)
class DurationSpec:
    """A duration as written by the user: a value and a unit."""

    value: int
    unit: DurationUnit = DurationUnit.DAY

    @classmethod
    def parse(cls, text: str) -> DurationSpec:
        """Parse a duration string.

        Supported formats:
        - "3d" - days (a bare number also means days)
        - "2w" - weeks
        - "1mo" - months (30 days each)
        - "4h" - hours
        - "30m" - minutes

        Raises:
            ValueError: If the string is not a duration
        """
        match = _DURATION_RE.match(text.strip().lower())
        if not match:
            raise ValueError(f"Invalid duration: {text!r}")
        value, suffix = match.groups()
        return cls(value=int(value), unit=_DURATION_SUFFIXES[suffix or "d"])

    @property
    def is_zero(self) -> bool:
        return self.value <= 0

    def __str__(self) -> str:
        suffix = {v: k for k, v in _DURATION_SUFFIXES.items()}[self.unit]
        return f"{self.value}{suffix}"


@dataclass(frozen=True)
class Dependency:
    """An explicit edge from a task to the task it depends on."""

    kind: DependencyKind
    target: str

    def __str__(self) -> str:
        return f"{self.kind.value} {self.target}"


def _default_dependencies() -> list[Dependency]:
    return []


def _default_tasks() -> list[Task]:
    return []


def _default_sections() -> list[Section]:
    return []


@dataclass
class Task:
    """A single schedule row (or a vertical marker).

    Input fields (explicit_start, explicit_end, start_clock, duration,
    dependencies) come from the document. Resolved fields (start, end,
    day_count) are written by the resolver.
    """

    name: str
    id: str
    explicit_id: bool = False
    section: str = ""
    index: int = 0  # Ordinal position within the section
    status: TaskStatus = TaskStatus.NORMAL
    is_milestone: bool = False
    is_vertical: bool = False  # Point annotation: no row, never a sequential anchor
    has_time: bool = False  # Start carries a time of day
    progress: int = 0
    duration: DurationSpec = field(default_factory=lambda: DurationSpec(1))
    duration_explicit: bool = False
    dependencies: list[Dependency] = field(default_factory=_default_dependencies)

    explicit_start: datetime | None = None
    explicit_end: datetime | None = None
    start_clock: time | None = None  # Bare time of day, anchored to the baseline day

    start: datetime | None = None
    end: datetime | None = None
    day_count: int = 0

    line: int | None = None
    column: int | None = None

    @property
    def has_explicit_start(self) -> bool:
        """True if the document anchors this task by a date or a time of day."""
        return self.explicit_start is not None or self.start_clock is not None

    @property
    def position(self) -> str:
        """Source position as 'line:column', or '?' if unknown."""
        if self.line is None:
            return "?"
        return f"{self.line}:{self.column or 1}"

    def dependencies_of(self, kind: DependencyKind) -> list[str]:
        """Get target IDs of the dependencies of one kind, in declaration order."""
        return [dep.target for dep in self.dependencies if dep.kind == kind]


@dataclass
class Section:
    """A named, ordered group of tasks."""

    name: str
    tasks: list[Task] = field(default_factory=_default_tasks)


@dataclass(frozen=True)
class TickInterval:
    """Axis tick spacing hint for the renderer (e.g. 1 week)."""

    value: int
    unit: str

    @classmethod
    def parse(cls, text: str) -> TickInterval:
        """Parse "1week", "2day", "30minute" style intervals."""
        match = re.match(
            r"^([1-9]\d*)(millisecond|second|minute|hour|day|week|month)$", text.strip().lower()
        )
        if not match:
            raise ValueError(f"Invalid tick interval: {text!r}")
        return cls(value=int(match.group(1)), unit=match.group(2))


@dataclass(frozen=True)
class TodayMarker:
    """Renderer hint controlling the 'today' line."""

    enabled: bool = True
    day: date | None = None


@dataclass
class ScheduleModel:
    """A complete schedule document: calendar, sections and markers."""

    calendar: Calendar
    sections: list[Section] = field(default_factory=_default_sections)
    verticals: list[Task] = field(default_factory=_default_tasks)
    title: str = ""
    tick: TickInterval | None = None
    week_start: Weekday | None = None
    today: TodayMarker = field(default_factory=TodayMarker)

    def iter_tasks(self) -> Iterator[Task]:
        """Iterate over every section task, vertical ones included, in document order."""
        for section in self.sections:
            yield from section.tasks

    def scheduled_tasks(self) -> list[Task]:
        """Get the tasks that occupy a schedule row (non-vertical)."""
        return [task for task in self.iter_tasks() if not task.is_vertical]
