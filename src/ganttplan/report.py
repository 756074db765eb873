"""Plain-text and CSV output of a resolved schedule."""

from __future__ import annotations

import csv
import io
from datetime import datetime

from .models import ScheduleModel, Task
from .scheduler import is_clock_granular

CSV_HEADER = ["section", "id", "name", "status", "start", "end", "days"]


def format_instant(instant: datetime | None, *, with_time: bool) -> str:
    """Format an instant as a date, or date and time for clock-granular tasks."""
    if instant is None:
        return ""
    if with_time:
        return instant.strftime("%Y-%m-%d %H:%M")
    return instant.strftime("%Y-%m-%d")


def _row(task: Task) -> list[str]:
    with_time = is_clock_granular(task)
    return [
        task.section,
        task.id,
        task.name,
        task.status.value,
        format_instant(task.start, with_time=with_time),
        format_instant(task.end, with_time=with_time),
        str(task.day_count),
    ]


def format_csv(model: ScheduleModel) -> str:
    """Render the resolved tasks as CSV, one row per schedulable task."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for task in model.scheduled_tasks():
        writer.writerow(_row(task))
    return buffer.getvalue()


def format_text(model: ScheduleModel) -> str:
    """Render the resolved tasks as an aligned text table grouped by section."""
    lines: list[str] = []
    if model.title:
        lines.append(model.title)
        lines.append("=" * len(model.title))

    rows = [_row(task)[1:] for task in model.scheduled_tasks()]
    headers = [h.upper() for h in CSV_HEADER[1:]]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]

    def fmt(cells: list[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths, strict=True)).rstrip()

    for section in model.sections:
        tasks = [task for task in section.tasks if not task.is_vertical]
        if not tasks:
            continue
        if lines:
            lines.append("")
        if section.name:
            lines.append(f"[{section.name}]")
        lines.append(fmt(headers))
        lines.extend(fmt(_row(task)[1:]) for task in tasks)

    markers = [m for m in model.verticals if m.explicit_start is not None]
    if markers:
        lines.append("")
        lines.append("Markers:")
        for marker in markers:
            assert marker.explicit_start is not None
            lines.append(
                f"  {marker.name}: "
                f"{format_instant(marker.explicit_start, with_time=is_clock_granular(marker))}"
            )

    return "\n".join(lines) + "\n"
