"""Dependency resolution: give every task a concrete start and end.

Resolution runs in two phases. The binding phase (graph.bind_tasks) turns
the document into an arena of tasks with typed edges. This module then
orders the arena topologically and places each task in turn:

1. An explicit start (date, or time of day on the baseline day)
2. After dependencies: strictly after the latest target end
3. Before/until dependencies: the earliest target start minus this task's duration
4. The previous task in the same section
5. The document baseline start

Before/until dependencies also fix the end: one instant before the day of
the earliest such target start, or for a zero-duration task a single point
at that instant. Everything else walks the calendar forward from the start.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta
from enum import Enum

from ganttplan.exceptions import CircularDependencyError
from ganttplan.logger import checks_enabled, get_logger
from ganttplan.models import DurationSpec, DurationUnit, ScheduleModel, Task

from .applier import apply_duration
from .config import SchedulingConfig
from .durations import (
    MIN_INSTANT,
    duration_span,
    inclusive_days,
    is_clock_granular,
    is_clock_unit,
    start_of_day,
    start_of_next_day,
)
from .graph import EdgeKind, TaskGraph, bind_tasks

logger = get_logger()


class _State(Enum):
    UNVISITED = 0
    RESOLVING = 1
    RESOLVED = 2


def _fmt(instant: datetime) -> str:
    return instant.strftime("%Y-%m-%d %H:%M")


class ScheduleResolver:
    """Resolves a schedule model into fully dated tasks.

    The resolver works on its own deep copy of the model: the caller's model
    is never modified, and nothing is returned when resolution fails.
    """

    def __init__(
        self,
        model: ScheduleModel,
        *,
        now: datetime,
        config: SchedulingConfig | None = None,
    ):
        """Initialize the resolver.

        Args:
            model: Schedule model to resolve
            now: Current instant, used for the baseline start when no task has
                an explicit start
            config: Optional scheduling configuration
        """
        self.model = copy.deepcopy(model)
        self.calendar = self.model.calendar
        self.zone = self.calendar.zone()
        self.now = now
        self.config = config or SchedulingConfig()
        self.baseline = self._baseline_start()

    def resolve(self) -> ScheduleModel:
        """Resolve every non-vertical task.

        Returns:
            The resolved copy of the model

        Raises:
            UnresolvableReferenceError: If a dependency names an unknown task
            CircularDependencyError: If tasks depend on each other in a cycle
        """
        graph = bind_tasks(self.model, id_separator=self.config.id_suffix_separator)
        logger.changes(f"Baseline start: {_fmt(self.baseline)} ({self.zone.key})")

        for position in self._resolution_order(graph):
            self._place(graph, position)

        return self.model

    def _localize(self, instant: datetime) -> datetime:
        """Express an instant in the calendar zone; naive values are local to it."""
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.zone)
        return instant.astimezone(self.zone)

    def _baseline_start(self) -> datetime:
        """Earliest explicit start in the document, or today's midnight."""
        candidates: list[datetime] = []
        for task in self.model.iter_tasks():
            if task.explicit_start is not None:
                candidates.append(self._localize(task.explicit_start))
        for marker in self.model.verticals:
            if marker.explicit_start is not None:
                candidates.append(self._marker_end(marker))
        if candidates:
            return min(candidates)
        return start_of_day(self._localize(self.now))

    def _marker_end(self, marker: Task) -> datetime:
        assert marker.explicit_start is not None
        end = self._localize(marker.explicit_start) + duration_span(marker.duration)
        if not marker.duration.is_zero and is_clock_unit(marker.duration):
            # Clock-length markers are padded by a minute
            end += timedelta(minutes=1)
        return end

    def _resolution_order(self, graph: TaskGraph) -> list[int]:
        """Order the arena so that every task comes after everything it depends on.

        Uses an explicit stack so that long dependency chains are not limited by
        the interpreter's recursion depth.

        Raises:
            CircularDependencyError: If a task transitively depends on itself
        """
        state = [_State.UNVISITED] * len(graph.tasks)
        order: list[int] = []

        for root in range(len(graph.tasks)):
            if state[root] is not _State.UNVISITED:
                continue
            state[root] = _State.RESOLVING
            stack = [(root, iter(graph.edges[root]))]
            while stack:
                position, pending = stack[-1]
                edge = next(pending, None)
                if edge is None:
                    stack.pop()
                    state[position] = _State.RESOLVED
                    order.append(position)
                    continue
                if state[edge.target] is _State.RESOLVING:
                    path = [p for p, _ in stack]
                    raise self._cycle_error(graph, path, edge.target)
                if state[edge.target] is _State.UNVISITED:
                    state[edge.target] = _State.RESOLVING
                    stack.append((edge.target, iter(graph.edges[edge.target])))

        return order

    def _cycle_error(self, graph: TaskGraph, path: list[int], target: int) -> CircularDependencyError:
        cycle = [graph.tasks[p].id for p in path[path.index(target) :]]
        cycle.append(graph.tasks[target].id)
        task = graph.tasks[target]
        return CircularDependencyError(
            f"Circular dependency detected: {' -> '.join(cycle)}",
            line=task.line,
            column=task.column,
            cycle=cycle,
        )

    def _adjacent_start(self, task: Task, target: Task) -> datetime:
        """First instant strictly after target ends, at the granularity of the pair."""
        assert target.end is not None
        if is_clock_granular(task) or is_clock_granular(target):
            return target.end + MIN_INSTANT
        return start_of_next_day(target.end)

    def _explicit_start(self, task: Task) -> datetime | None:
        """Normalized explicit start of a task, if it has one."""
        if task.explicit_start is not None:
            start = self._localize(task.explicit_start)
            if not is_clock_granular(task):
                start = start_of_day(start)
            task.explicit_start = start
            return start
        if task.start_clock is not None:
            # A bare time of day lands on the baseline day
            task.has_time = True
            return datetime.combine(self.baseline.date(), task.start_clock, tzinfo=self.zone)
        return None

    def _place(self, graph: TaskGraph, position: int) -> None:  # noqa: PLR0912 - one branch per anchor kind
        """Compute start, end and day count for one task whose dependencies are placed."""
        task = graph.tasks[position]
        if task.explicit_end is not None:
            task.explicit_end = self._localize(task.explicit_end)
            if not is_clock_granular(task):
                task.explicit_end = start_of_day(task.explicit_end)

        start = self._explicit_start(task)
        explicit = start is not None
        if start is not None and checks_enabled():
            logger.checks(f"  {task.id}: explicit start {_fmt(start)}")

        for target_pos in graph.edges_of(position, EdgeKind.AFTER):
            target = graph.tasks[target_pos]
            anchor = self._adjacent_start(task, target)
            logger.checks(f"  {task.id}: after {target.id} -> not before {_fmt(anchor)}")
            if start is None or anchor > start:
                start = anchor

        deadlines: list[datetime] = []
        for target_pos in graph.edges_of(position, EdgeKind.BEFORE):
            target = graph.tasks[target_pos]
            assert target.start is not None
            logger.checks(f"  {task.id}: until {target.id} -> end before {_fmt(target.start)}")
            deadlines.append(target.start)
        if deadlines and not explicit:
            # Work backward from the nearest deadline
            if task.duration.is_zero:
                candidate = start_of_day(min(deadlines)) - MIN_INSTANT
            else:
                candidate = min(deadlines) - duration_span(task.duration)
            if start is None or candidate > start:
                start = candidate

        for target_pos in graph.edges_of(position, EdgeKind.SEQUENTIAL):
            previous = graph.tasks[target_pos]
            start = self._adjacent_start(task, previous)
            logger.checks(f"  {task.id}: follows {previous.id} -> {_fmt(start)}")

        if start is None:
            start = self.baseline
            logger.checks(f"  {task.id}: no anchor, using baseline {_fmt(start)}")

        if deadlines and self._place_before_deadline(task, start, min(deadlines)):
            return

        end, days = apply_duration(
            start,
            task.duration,
            self.calendar,
            literal_coarse_units=self.config.literal_coarse_units,
        )
        self._commit(task, start, end, days)

    def _place_before_deadline(self, task: Task, start: datetime, deadline: datetime) -> bool:
        """End the task one instant before the deadline's day.

        Returns:
            False if the deadline falls before the start, in which case the
            task is left to be scheduled forward
        """
        end = start_of_day(deadline) - MIN_INSTANT
        if end < start:
            logger.warning(
                f"Task '{task.id}' ({task.position}) cannot finish before {_fmt(deadline)} "
                f"when starting {_fmt(start)}; scheduling it forward instead"
            )
            return False
        if task.duration.is_zero:
            # Point tasks sit on the last instant before the deadline day
            self._commit(task, start, start, 0)
            return True
        days = inclusive_days(start, end)
        task.duration = DurationSpec(days, DurationUnit.DAY)
        task.duration_explicit = True
        self._commit(task, start, end, days)
        return True

    def _commit(self, task: Task, start: datetime, end: datetime, days: int) -> None:
        task.start = start
        task.end = end
        task.day_count = days
        logger.changes(f"  {task.id}: {_fmt(start)} -> {_fmt(end)} ({days}d)")


def resolve_schedule(
    model: ScheduleModel,
    *,
    now: datetime,
    config: SchedulingConfig | None = None,
) -> ScheduleModel:
    """Resolve a schedule model into fully dated tasks.

    Args:
        model: Schedule model from the ingester (left unmodified)
        now: Current instant; only used when no task has an explicit start
        config: Optional scheduling configuration

    Returns:
        A resolved copy of the model

    Raises:
        UnresolvableReferenceError: If a dependency names an unknown task
        CircularDependencyError: If tasks depend on each other in a cycle
    """
    return ScheduleResolver(model, now=now, config=config).resolve()
