"""Binding phase: flatten tasks into an arena and bind dependency edges.

Identifiers are resolved exactly once here. Everything downstream works on
integer indices into the arena.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ganttplan.exceptions import UnresolvableReferenceError
from ganttplan.logger import get_logger
from ganttplan.models import DependencyKind, ScheduleModel, Task

logger = get_logger()


class EdgeKind(str, Enum):
    """Why one task has to be resolved before another."""

    SEQUENTIAL = "sequential"  # Previous task in the same section (implicit)
    AFTER = "after"  # Start after the target ends
    BEFORE = "before"  # End before the target starts


@dataclass(frozen=True)
class Edge:
    """A bound dependency: the owning task depends on the task at `target`."""

    kind: EdgeKind
    target: int


_KIND_TO_EDGE = {
    DependencyKind.AFTER: EdgeKind.AFTER,
    DependencyKind.BEFORE: EdgeKind.BEFORE,
}


def _default_edges() -> list[list[Edge]]:
    return []


@dataclass
class TaskGraph:
    """Arena of schedulable tasks plus typed edges bound to arena indices."""

    tasks: list[Task]
    edges: list[list[Edge]] = field(default_factory=_default_edges)
    index: dict[str, int] = field(default_factory=dict[str, int])
    predecessors: list[int | None] = field(default_factory=list[int | None])

    def edges_of(self, position: int, kind: EdgeKind) -> list[int]:
        """Get target indices of one edge kind for a task, in declaration order."""
        return [edge.target for edge in self.edges[position] if edge.kind == kind]


def dedupe_ids(tasks: list[Task], separator: str = "_") -> dict[str, int]:
    """Make task IDs unique, renaming later duplicates in place.

    The first task with an ID keeps it. Each later duplicate gets the
    smallest numeric suffix not yet taken and loses its explicit-ID status.

    Returns:
        Mapping from (now unique) ID to the task's position in `tasks`
    """
    index: dict[str, int] = {}
    for position, task in enumerate(tasks):
        if task.id in index:
            original = task.id
            suffix = 1
            while f"{original}{separator}{suffix}" in index:
                suffix += 1
            task.id = f"{original}{separator}{suffix}"
            task.explicit_id = False
            logger.changes(f"Renamed duplicate id '{original}' to '{task.id}' ({task.position})")
        index[task.id] = position
    return index


def bind_tasks(model: ScheduleModel, *, id_separator: str = "_") -> TaskGraph:
    """Build the task graph for a schedule model.

    Vertical markers are left out: they are never resolved, never act as a
    sequential predecessor and cannot be the target of a dependency.

    Raises:
        UnresolvableReferenceError: If a dependency names an unknown ID
    """
    tasks = model.scheduled_tasks()
    index = dedupe_ids(tasks, id_separator)

    predecessors: list[int | None] = []
    offset = 0
    for section in model.sections:
        previous: int | None = None
        for task in section.tasks:
            if task.is_vertical:
                continue
            predecessors.append(previous)
            previous = offset
            offset += 1

    edges: list[list[Edge]] = []
    for position, task in enumerate(tasks):
        bound: list[Edge] = []
        for dep in task.dependencies:
            target = index.get(dep.target)
            if target is None:
                raise UnresolvableReferenceError(
                    f"Task '{task.id}' depends on unknown task '{dep.target}'",
                    line=task.line,
                    column=task.column,
                    target=dep.target,
                )
            bound.append(Edge(_KIND_TO_EDGE[dep.kind], target))

        predecessor = predecessors[position]
        if not bound and not task.has_explicit_start and predecessor is not None:
            bound.append(Edge(EdgeKind.SEQUENTIAL, predecessor))
        edges.append(bound)

    return TaskGraph(tasks=tasks, edges=edges, index=index, predecessors=predecessors)
