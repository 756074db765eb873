"""ganttplan - turn declared tasks, dependencies and business calendars into a dated schedule."""

from .calendar import Calendar, Weekday, is_working_day
from .exceptions import (
    CircularDependencyError,
    GanttplanError,
    ParseError,
    UnresolvableReferenceError,
    ValidationError,
)
from .models import (
    Dependency,
    DependencyKind,
    DurationSpec,
    DurationUnit,
    ScheduleModel,
    Section,
    Task,
    TaskStatus,
)
from .parser import DocumentParser, parse_document
from .scheduler import SchedulingConfig, resolve_schedule

__all__ = [
    "Calendar",
    "CircularDependencyError",
    "Dependency",
    "DependencyKind",
    "DocumentParser",
    "DurationSpec",
    "DurationUnit",
    "GanttplanError",
    "ParseError",
    "ScheduleModel",
    "SchedulingConfig",
    "Section",
    "Task",
    "TaskStatus",
    "UnresolvableReferenceError",
    "ValidationError",
    "Weekday",
    "is_working_day",
    "parse_document",
    "resolve_schedule",
]
