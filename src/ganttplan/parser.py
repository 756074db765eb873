"""YAML parser for ganttplan schedule documents."""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .calendar import Calendar, parse_weekday
from .exceptions import ParseError, ValidationError
from .models import (
    HOURS_PER_DAY,
    Dependency,
    DependencyKind,
    DurationSpec,
    ScheduleModel,
    Section,
    Task,
    TaskStatus,
    TickInterval,
    TodayMarker,
)
from .scheduler.config import SchedulingConfig
from .schemas import COLUMN_KEY, LINE_KEY, CalendarSchema, DocumentSchema, TaskSchema

MAX_PROGRESS = 100

_STATUS_ALIASES = {
    "normal": TaskStatus.NORMAL,
    "done": TaskStatus.DONE,
    "active": TaskStatus.ACTIVE,
    "crit": TaskStatus.CRITICAL,
    "critical": TaskStatus.CRITICAL,
    "milestone": TaskStatus.MILESTONE,
}

_CLOCK_FORMATS = ("%H:%M:%S.%f", "%H:%M:%S", "%H:%M")


class _PositionLoader(yaml.SafeLoader):
    """Safe loader that records where each mapping starts in the source."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        mapping = super().construct_mapping(node, deep=deep)
        mapping[LINE_KEY] = node.start_mark.line + 1
        mapping[COLUMN_KEY] = node.start_mark.column + 1
        return mapping


def parse_clock(text: str) -> time | None:
    """Parse a bare time of day ("10:30", "10:30:15", "10:30:15.250")."""
    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt).time()
        except ValueError:
            continue
    return None


class DocumentParser:
    """Parser for schedule YAML documents.

    Produces an unresolved ScheduleModel. Dates are kept as written; the
    resolver places them in the calendar's time zone.
    """

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()
        self._date_format: str | None = None

    def parse_file(self, file_path: Path | str, calendar: Calendar | None = None) -> ScheduleModel:
        """Parse a YAML file into a ScheduleModel.

        Args:
            file_path: Path to the document
            calendar: Calendar defaults, overridden by the document's own calendar
        """
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")
        with path.open(encoding="utf-8") as f:
            return self.parse_string(f.read(), calendar)

    def parse_string(self, text: str, calendar: Calendar | None = None) -> ScheduleModel:
        """Parse YAML text into a ScheduleModel."""
        try:
            data: Any = yaml.load(text, Loader=_PositionLoader)  # noqa: S506 - SafeLoader subclass
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self._parse_data(data, calendar)  # type: ignore[arg-type]

    def _parse_data(self, data: dict[str, Any], defaults: Calendar | None) -> ScheduleModel:
        """Convert loaded YAML data into a ScheduleModel."""
        try:
            schema = DocumentSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid document structure: {e}") from e

        self._date_format = schema.date_format
        has_calendar = "calendar" in data
        model = ScheduleModel(
            calendar=self._build_calendar(schema.calendar, defaults if not has_calendar else None),
            title=schema.title,
        )

        if schema.tasks:
            model.sections.append(
                Section(name="", tasks=self._build_tasks(schema.tasks, section=""))
            )
        for section_schema in schema.sections:
            model.sections.append(
                Section(
                    name=section_schema.name,
                    tasks=self._build_tasks(section_schema.tasks, section=section_schema.name),
                )
            )
        for marker_schema in schema.markers:
            marker = self._build_task(marker_schema, section="", index=0)
            marker.is_vertical = True
            self._apply_zero_default(marker)
            model.verticals.append(marker)

        if not model.scheduled_tasks():
            raise ParseError("Document contains no tasks")

        self._apply_hints(model, schema)
        return model

    def _build_calendar(self, schema: CalendarSchema, defaults: Calendar | None) -> Calendar:
        if defaults is not None:
            return defaults.model_copy(deep=True)
        try:
            return Calendar.from_directives(
                timezone=schema.timezone,
                excludes=[self._calendar_item(v) for v in schema.excludes],
                includes=[self._calendar_item(v) for v in schema.includes],
                weekend=schema.weekend,
            )
        except ValueError as e:
            raise ValidationError(f"Invalid calendar: {e}") from e

    def _calendar_item(self, value: date | str) -> date | str:
        """Dates written in the document's date_format become date objects."""
        if isinstance(value, str) and self._date_format:
            try:
                return datetime.strptime(value, self._date_format).date()
            except ValueError:
                return value
        return value

    def _apply_hints(self, model: ScheduleModel, schema: DocumentSchema) -> None:
        """Copy renderer-only hints; the resolver never looks at these."""
        try:
            if schema.tick_interval:
                model.tick = TickInterval.parse(schema.tick_interval)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if schema.week_start:
            weekday = parse_weekday(schema.week_start)
            if weekday is None:
                raise ValidationError(f"Invalid week_start: {schema.week_start!r}")
            model.week_start = weekday

        marker = schema.today_marker
        if isinstance(marker, bool):
            model.today = TodayMarker(enabled=marker)
        elif isinstance(marker, date):
            model.today = TodayMarker(enabled=True, day=marker)
        elif isinstance(marker, str):
            token = marker.strip().lower()
            if token in ("off", "false", "no"):
                model.today = TodayMarker(enabled=False)
            elif token not in ("", "on", "true", "yes"):
                try:
                    day = self._parse_datetime(marker, self._date_format).date()
                except ValueError as e:
                    raise ValidationError(f"Invalid today_marker: {e}") from e
                model.today = TodayMarker(enabled=True, day=day)

    def _build_tasks(self, schemas: list[TaskSchema], section: str) -> list[Task]:
        return [
            self._build_task(task_schema, section=section, index=index)
            for index, task_schema in enumerate(schemas)
        ]

    def _build_task(self, schema: TaskSchema, *, section: str, index: int) -> Task:  # noqa: PLR0912 - one branch per field
        """Convert one task entry into a Task."""
        task = Task(
            name=schema.name,
            id=schema.id or f"task_{schema.line or index}",
            explicit_id=bool(schema.id),
            section=section,
            index=index,
            line=schema.line,
            column=schema.column,
        )

        if schema.status:
            status = _STATUS_ALIASES.get(schema.status.strip().lower())
            if status is None:
                raise ValidationError(
                    f"Task '{task.id}' has invalid status '{schema.status}'",
                    line=schema.line,
                    column=schema.column,
                )
            task.status = status
            task.is_milestone = status == TaskStatus.MILESTONE
        if schema.progress is not None:
            task.progress = max(0, min(schema.progress, MAX_PROGRESS))

        task.dependencies = [Dependency(DependencyKind.AFTER, t) for t in schema.after]
        task.dependencies += [
            Dependency(DependencyKind.BEFORE, t) for t in schema.before + schema.until
        ]

        try:
            self._apply_start(task, schema.start)
            if schema.end is not None:
                task.explicit_end = self._to_datetime(schema.end)
            if schema.duration is not None:
                task.duration = DurationSpec.parse(schema.duration)
                task.duration_explicit = True
            else:
                task.duration = DurationSpec.parse(self.config.default_duration)
        except ValueError as e:
            raise ValidationError(
                f"Task '{task.id}': {e}", line=schema.line, column=schema.column
            ) from e

        if task.is_milestone:
            self._apply_zero_default(task)
        if schema.vertical:
            task.is_vertical = True
            task.is_milestone = False
            self._apply_zero_default(task)

        # Start and end together define an inclusive day span
        if task.explicit_start is not None and task.explicit_end is not None:
            elapsed = task.explicit_end.replace(tzinfo=None) - task.explicit_start.replace(tzinfo=None)
            hours = elapsed.total_seconds() / 3600
            task.duration = DurationSpec(max(int(hours / HOURS_PER_DAY) + 1, 1))
            task.duration_explicit = True

        return task

    def _apply_start(self, task: Task, value: datetime | date | str | None) -> None:
        if value is None:
            return
        if isinstance(value, str):
            clock = parse_clock(value)
            if clock is not None:
                task.start_clock = clock
                task.has_time = True
                return
            task.has_time = ":" in value
        elif isinstance(value, datetime):
            task.has_time = True
        task.explicit_start = self._to_datetime(value)

    def _to_datetime(self, value: datetime | date | str) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time(0))
        return self._parse_datetime(value, self._date_format)

    def _parse_datetime(self, text: str, date_format: str | None) -> datetime:
        """Parse a date string with the document's format, or ISO 8601."""
        text = text.strip()
        if date_format:
            try:
                return datetime.strptime(text, date_format)
            except ValueError:
                pass
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date: {text!r}") from None

    def _apply_zero_default(self, task: Task) -> None:
        """Milestones and markers are points unless a duration was given."""
        if not task.duration_explicit:
            task.duration = DurationSpec(0)
            task.duration_explicit = True


def parse_document(
    path: Path | str,
    *,
    calendar: Calendar | None = None,
    config: SchedulingConfig | None = None,
) -> ScheduleModel:
    """Parse a schedule document from a file."""
    return DocumentParser(config).parse_file(path, calendar)
