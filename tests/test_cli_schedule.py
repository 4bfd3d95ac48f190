import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from planner_scheduler.cli import app


runner = CliRunner()


def test_cli_schedule_text():
    r = runner.invoke(app, ["schedule", "examples/basic-tasks.yaml", "--start", "2025-11-24"])
    assert r.exit_code == 0, r.output
    assert "Warnings:" in r.stdout
    assert "Task 'C' may miss deadline." in r.stdout
    assert "critical_path=25h" in r.stdout


def test_cli_schedule_json():
    r = runner.invoke(
        app, ["schedule", "examples/basic-tasks.yaml", "--start", "2025-11-24", "--format", "json"]
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.stdout)
    assert payload["recommendedOrder"] == ["A", "B", "C", "D"]
    assert [s["isCriticalPath"] for s in payload["schedule"]] == [True, True, False, True]
    assert payload["metrics"]["criticalPathLength"] == 25


def test_cli_schedule_yaml_out(tmp_path: Path):
    out_path = tmp_path / "schedule.yaml"
    r = runner.invoke(
        app,
        [
            "schedule",
            "examples/basic-tasks.yaml",
            "--start",
            "2025-11-24",
            "--format",
            "yaml",
            "--out",
            str(out_path),
        ],
    )
    assert r.exit_code == 0, r.output
    assert f"OK: wrote schedule to {out_path}" in r.stdout
    got = yaml.safe_load(out_path.read_text(encoding="utf-8"))
    assert got["metrics"]["projectEnd"] == "2025-12-02"


def test_cli_schedule_with_config():
    r = runner.invoke(
        app,
        [
            "schedule",
            "examples/basic-tasks.yaml",
            "--start",
            "2025-11-24",
            "--format",
            "json",
            "--config",
            "examples/scheduler-config.yaml",
        ],
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.stdout)
    assert payload["schedule"][0]["suggestedEnd"] == "2025-11-26"


def test_cli_schedule_bad_start_date():
    r = runner.invoke(app, ["schedule", "examples/basic-tasks.yaml", "--start", "24/11/2025"])
    assert r.exit_code == 2
    assert "E_SCHEDULE_INVALID_START" in r.output


def test_cli_schedule_invalid_graph_json():
    r = runner.invoke(app, ["schedule", "examples/invalid-duplicate-title.yaml", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["command"] == "schedule"
    assert [e["code"] for e in payload["errors"]] == ["E_DUPLICATE_TITLE"]


def test_cli_schedule_missing_config_file():
    r = runner.invoke(
        app, ["schedule", "examples/basic-tasks.yaml", "--config", "examples/nope.yaml"]
    )
    assert r.exit_code == 1
    assert "E_CONFIG_FILE_NOT_FOUND" in r.output


def test_cli_schedule_unexpected_error_is_generic(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("internal detail")

    monkeypatch.setattr("planner_scheduler.cli.generate_schedule", boom)
    r = runner.invoke(app, ["schedule", "examples/basic-tasks.yaml"])
    assert r.exit_code == 1
    assert "An error occurred while generating the schedule." in r.output


def test_cli_schedule_non_finite_config_is_invalid(tmp_path: Path):
    cfg = tmp_path / "nan.yaml"
    cfg.write_text("work_hours_per_day: .nan\n", encoding="utf-8")
    r = runner.invoke(app, ["schedule", "examples/basic-tasks.yaml", "--config", str(cfg)])
    assert r.exit_code == 2
    assert "E_CONFIG_FILE_INVALID" in r.output
