"""Pytest configuration and fixtures for ganttplan tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import date, datetime, timezone
from typing import Any

import pytest

from ganttplan.calendar import Calendar
from ganttplan.logger import reset_logger
from ganttplan.models import (
    Dependency,
    DependencyKind,
    DurationSpec,
    ScheduleModel,
    Section,
    Task,
)
from ganttplan.parser import DocumentParser

# Fixed "current instant" so baseline starts are reproducible
NOW = datetime(2024, 3, 4, 15, 30, tzinfo=timezone.utc)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_task(  # noqa: PLR0913 - mirrors the Task fields tests care about
    task_id: str,
    *,
    start: date | datetime | None = None,
    duration: str = "1d",
    after: Sequence[str] = (),
    until: Sequence[str] = (),
    line: int | None = None,
    **kwargs: Any,
) -> Task:
    """Create an unresolved task the way the parser would."""
    if isinstance(start, date) and not isinstance(start, datetime):
        start = datetime.combine(start, datetime.min.time())
    dependencies = [Dependency(DependencyKind.AFTER, t) for t in after]
    dependencies += [Dependency(DependencyKind.BEFORE, t) for t in until]
    return Task(
        name=kwargs.pop("name", task_id),
        id=task_id,
        explicit_id=True,
        explicit_start=start,
        duration=DurationSpec.parse(duration),
        duration_explicit=True,
        dependencies=dependencies,
        line=line,
        **kwargs,
    )


def make_model(
    *sections: list[Task] | tuple[str, list[Task]],
    calendar: Calendar | None = None,
    verticals: list[Task] | None = None,
) -> ScheduleModel:
    """Create a schedule model; bare lists become unnamed sections."""
    model = ScheduleModel(calendar=calendar or Calendar(), verticals=list(verticals or []))
    for entry in sections:
        name, tasks = entry if isinstance(entry, tuple) else ("", entry)
        for index, task in enumerate(tasks):
            task.section = name
            task.index = index
        model.sections.append(Section(name=name, tasks=tasks))
    return model


def by_id(model: ScheduleModel) -> dict[str, Task]:
    """Index the resolved tasks of a model by ID."""
    return {task.id: task for task in model.scheduled_tasks()}


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Keep logger configuration from leaking between tests."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def weekday_calendar() -> Calendar:
    """UTC calendar that skips Saturdays and Sundays."""
    return Calendar(exclude_weekends=True)


@pytest.fixture
def parse_yaml() -> Callable[[str], ScheduleModel]:
    """Parse a YAML document from a string."""
    parser = DocumentParser()

    def _parse(text: str) -> ScheduleModel:
        return parser.parse_string(text)

    return _parse
