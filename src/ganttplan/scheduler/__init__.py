"""Scheduler package - dependency and calendar aware schedule resolution.

This package turns a schedule model with explicit dates, durations and
dependencies into fully dated tasks:
- Duration conversion and day-boundary helpers
- A forward calendar walk that skips non-working days
- A binding phase that flattens tasks into an arena with typed edges
- A resolver that places each task from its anchors

Main entry points:
- resolve_schedule: Resolve a ScheduleModel (pure function of its inputs and `now`)
- ScheduleResolver: The class behind resolve_schedule

Configuration:
- SchedulingConfig: Resolver and ingester knobs
"""

# Calendar walk
from .applier import apply_calendar, apply_duration

# Configuration
from .config import SchedulingConfig

# Duration conversion
from .durations import MIN_INSTANT, duration_span, is_clock_granular, to_span

# Binding phase
from .graph import Edge, EdgeKind, TaskGraph, bind_tasks

# Resolution
from .resolver import ScheduleResolver, resolve_schedule

__all__ = [
    # Calendar walk
    "apply_calendar",
    "apply_duration",
    # Configuration
    "SchedulingConfig",
    # Duration conversion
    "MIN_INSTANT",
    "duration_span",
    "is_clock_granular",
    "to_span",
    # Binding phase
    "Edge",
    "EdgeKind",
    "TaskGraph",
    "bind_tasks",
    # Resolution
    "ScheduleResolver",
    "resolve_schedule",
]
