"""Tests for CLI commands."""

import csv
import io
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ganttplan.cli import app
from ganttplan.unified_config import CONFIG_FILENAME

runner = CliRunner()

PLAN = """
title: Fruit plan
calendar:
  excludes: weekends
tasks:
  - {name: apple, id: a, start: 2017-07-20, duration: 1w}
  - {name: banana, id: b, start: 2017-07-23, duration: 1d, status: crit}
  - {name: cherry, id: c, after: b a, duration: 1d, status: active}
  - {name: kiwi, id: d, start: 2017-07-20, until: b c}
"""


@pytest.fixture
def plan_file(tmp_path: Path) -> Path:
    path = tmp_path / "plan.yaml"
    path.write_text(PLAN, encoding="utf-8")
    return path


class TestResolveCommand:
    """Test the resolve CLI command."""

    def test_text_output(self, plan_file: Path) -> None:
        """Test the default table output."""
        result = runner.invoke(app, ["resolve", str(plan_file)])

        assert result.exit_code == 0
        assert "Fruit plan" in result.stdout
        assert "2017-07-27" in result.stdout
        assert "cherry" in result.stdout

    def test_csv_output(self, plan_file: Path) -> None:
        """Test CSV output."""
        result = runner.invoke(app, ["resolve", str(plan_file), "--format", "csv"])

        assert result.exit_code == 0
        rows = {row["id"]: row for row in csv.DictReader(io.StringIO(result.stdout))}
        assert rows["c"]["start"] == "2017-07-27"
        assert rows["d"]["end"] == "2017-07-22"
        assert rows["d"]["days"] == "3"

    def test_output_file(self, plan_file: Path, tmp_path: Path) -> None:
        """Test writing the schedule to a file."""
        output = tmp_path / "out.csv"

        result = runner.invoke(app, ["resolve", str(plan_file), "-f", "csv", "-o", str(output)])

        assert result.exit_code == 0
        assert "Schedule written to" in result.stdout
        assert output.read_text(encoding="utf-8").startswith("section,id,name")

    def test_now_sets_baseline(self, tmp_path: Path) -> None:
        """Test that --now anchors a plan without dates."""
        path = tmp_path / "plan.yaml"
        path.write_text("tasks:\n  - {name: A, id: a}\n  - {name: B, id: b}\n", encoding="utf-8")

        result = runner.invoke(app, ["resolve", str(path), "-f", "csv", "--now", "2024-03-04T10:00"])

        assert result.exit_code == 0
        rows = list(csv.DictReader(io.StringIO(result.stdout)))
        assert [row["start"] for row in rows] == ["2024-03-04", "2024-03-05"]

    def test_invalid_now(self, plan_file: Path) -> None:
        """Test a malformed --now value."""
        result = runner.invoke(app, ["resolve", str(plan_file), "--now", "yesterday"])

        assert result.exit_code == 1

    def test_cycle_fails(self, tmp_path: Path) -> None:
        """Test that a cycle exits with an error and its position."""
        path = tmp_path / "plan.yaml"
        path.write_text(
            "tasks:\n  - {name: A, id: a, after: b}\n  - {name: B, id: b, after: a}\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["resolve", str(path)])

        assert result.exit_code == 1
        assert "Circular dependency" in result.output
        assert "2:5" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a document that does not exist."""
        result = runner.invoke(app, ["resolve", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_config_next_to_document(self, tmp_path: Path) -> None:
        """Test that ganttplan_config.yaml beside the document supplies the calendar."""
        (tmp_path / CONFIG_FILENAME).write_text("calendar:\n  excludes: weekends\n", encoding="utf-8")
        path = tmp_path / "plan.yaml"
        path.write_text("tasks:\n  - {name: A, id: a, start: 2024-01-05, duration: 2d}\n", encoding="utf-8")

        result = runner.invoke(app, ["resolve", str(path), "-f", "csv"])

        assert result.exit_code == 0
        row = next(csv.DictReader(io.StringIO(result.stdout)))
        assert row["end"] == "2024-01-08"

    def test_explicit_config_option(self, tmp_path: Path) -> None:
        """Test the global --config option."""
        config = tmp_path / "custom.yaml"
        config.write_text("scheduler:\n  literal_coarse_units: false\n", encoding="utf-8")
        path = tmp_path / "plan.yaml"
        path.write_text(
            "calendar:\n  excludes: weekends\n"
            "tasks:\n  - {name: A, id: a, start: 2017-07-20, duration: 1w}\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["--config", str(config), "resolve", str(path), "-f", "csv"])

        assert result.exit_code == 0
        row = next(csv.DictReader(io.StringIO(result.stdout)))
        assert row["end"] == "2017-07-28"


class TestCheckCommand:
    """Test the check CLI command."""

    def test_ok(self, plan_file: Path) -> None:
        """Test a document that resolves."""
        result = runner.invoke(app, ["check", str(plan_file)])

        assert result.exit_code == 0
        assert "OK: 4 tasks resolved" in result.stdout

    def test_unknown_reference(self, tmp_path: Path) -> None:
        """Test a dependency on a missing task."""
        path = tmp_path / "plan.yaml"
        path.write_text("tasks:\n  - {name: A, id: a, after: ghost}\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert "ghost" in result.output
