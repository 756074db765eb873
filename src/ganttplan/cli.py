"""Command-line interface for ganttplan."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from .exceptions import GanttplanError, ValidationError
from .logger import setup_logger
from .models import ScheduleModel
from .parser import DocumentParser
from .report import format_csv, format_text
from .scheduler import resolve_schedule
from .unified_config import discover_config

app = typer.Typer(
    name="ganttplan",
    help="Resolve task dependencies and business calendars into a dated schedule",
    add_completion=False,
)


class _State:
    config_path: Path | None = None


class OutputFormat(str, Enum):
    """Output formats for the resolved schedule."""

    TEXT = "text"
    CSV = "csv"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=warnings only (default), 1=placements, 2=anchor checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: ganttplan_config.yaml next to the document)",
        ),
    ] = None,
) -> None:
    """Global options for ganttplan commands."""
    setup_logger(verbose)
    _State.config_path = config


def _parse_now(now: str | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(now)
    except ValueError:
        typer.echo(f"Error: Invalid --now value '{now}'. Use ISO format (YYYY-MM-DD[THH:MM])", err=True)
        raise typer.Exit(1) from None


def _describe(error: Exception) -> str:
    if isinstance(error, ValidationError) and error.position:
        return f"{error.position}: {error}"
    return str(error)


def _load_and_resolve(file: Path, now: datetime) -> ScheduleModel:
    config = discover_config(file, _State.config_path)
    parser = DocumentParser(config.scheduler)
    model = parser.parse_file(file, config.calendar)
    return resolve_schedule(model, now=now, config=config.scheduler)


@app.command()
def resolve(
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    *,
    now: Annotated[
        str | None,
        typer.Option(
            "--now",
            help="Current instant (ISO format), used when no task has a start. Defaults to now",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Resolve a schedule document and print every task's dates."""
    try:
        model = _load_and_resolve(file, _parse_now(now))
    except (GanttplanError, FileNotFoundError) as e:
        typer.echo(f"Error: {_describe(e)}", err=True)
        raise typer.Exit(1) from None

    text = format_csv(model) if output_format == OutputFormat.CSV else format_text(model)

    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Schedule written to {output}")
    else:
        typer.echo(text, nl=False)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    *,
    now: Annotated[
        str | None, typer.Option("--now", help="Current instant (ISO format)")
    ] = None,
) -> None:
    """Check that a schedule document resolves without errors."""
    try:
        model = _load_and_resolve(file, _parse_now(now))
    except (GanttplanError, FileNotFoundError) as e:
        typer.echo(f"Error: {_describe(e)}", err=True)
        raise typer.Exit(1) from None

    count = len(model.scheduled_tasks())
    typer.echo(f"OK: {count} task{'s' if count != 1 else ''} resolved")


def main() -> None:
    """Entry point for the ganttplan console script."""
    app()


if __name__ == "__main__":
    app()
