from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Optional

import typer

from planner_scheduler.core.config.scheduler_config import SchedulerConfig, load_and_merge
from planner_scheduler.core.critical.critical_path import critical_path
from planner_scheduler.core.errors import (
    ConfigError,
    InvalidSchedule,
    ScheduleError,
    TaskLoadError,
    TaskValidationError,
)
from planner_scheduler.core.io.dump_result import (
    dump_result_json,
    dump_result_yaml,
    format_result_text,
    write_text,
)
from planner_scheduler.core.io.load_tasks import load_task_file, parse_tasks
from planner_scheduler.core.model import TaskInput
from planner_scheduler.core.order.topological_order import topological_order
from planner_scheduler.core.schedule import generate_schedule
from planner_scheduler.core.validate.validate_graph import validate_graph
from planner_scheduler.logging_setup import LOG_FORMAT_ENV, LOG_LEVEL_ENV, setup_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)

logger = logging.getLogger(__name__)

TOOL = "planner-scheduler"
GENERIC_FAILURE = "An error occurred while generating the schedule."


@app.callback()
def _callback(
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar=LOG_LEVEL_ENV, help="DEBUG|INFO|WARNING|ERROR"
    ),
    log_format: str = typer.Option(
        "text", "--log-format", envvar=LOG_FORMAT_ENV, help="Log format: text|json"
    ),
) -> None:
    """Task scheduler CLI."""
    setup_logging(log_level, log_format)


def _to_item(e: ScheduleError) -> dict:
    source = "load" if isinstance(e, TaskLoadError) else "validate"
    return {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "path": e.path,
        "severity": "error",
        "source": source,
    }


def _emit_json(command: str, ok: bool, errors: list[ScheduleError], exit_code: int, **extra: Any) -> None:
    payload = {
        "tool": TOOL,
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
        **extra,
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _fail(command: str, format: str, errors: list[ScheduleError], exit_code: int) -> None:
    if format == "json":
        _emit_json(command, False, errors, exit_code)
    _print_errors(errors)
    raise typer.Exit(code=exit_code)


def _check_format(command: str, format: str, allowed: tuple[str, ...]) -> None:
    if format not in allowed:
        err = TaskValidationError(
            code=f"E_{command.upper().replace('-', '_')}_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: {', '.join(allowed)})",
            file=None,
            path="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _load_config(command: str, format: str, config_file: Optional[str]) -> SchedulerConfig:
    try:
        return load_and_merge(config_file)
    except FileNotFoundError:
        _fail(
            command,
            format,
            [
                TaskLoadError(
                    code="E_CONFIG_FILE_NOT_FOUND",
                    message=f"config file not found: {config_file}",
                    file=None,
                    path="config",
                )
            ],
            1,
        )
    except ConfigError as e:
        _fail(
            command,
            format,
            [
                TaskValidationError(
                    code="E_CONFIG_FILE_INVALID",
                    message=str(e),
                    file=config_file,
                    path="config",
                )
            ],
            2,
        )
    raise AssertionError("unreachable")  # pragma: no cover


def _load_tasks(command: str, format: str, path: str, config: SchedulerConfig) -> tuple[list[TaskInput], Optional[str]]:
    try:
        payload = load_task_file(path)
    except TaskLoadError as e:
        _fail(command, format, [e], 1)

    tasks, errors = parse_tasks(payload, config=config)
    if errors or tasks is None:
        _fail(command, format, list(errors), 2)
    assert tasks is not None
    return tasks, payload.get("__file__")


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Optional scheduler config YAML"),
) -> None:
    """Validate a task file: field shapes, unique titles, known dependencies, no cycles."""
    _check_format("validate", format, ("text", "json"))
    config = _load_config("validate", format, config_file)
    tasks, file = _load_tasks("validate", format, path, config)

    try:
        validate_graph(tasks, file=file)
    except InvalidSchedule as e:
        _fail("validate", format, [e], 2)

    roots = sorted(t.title for t in tasks if not t.dependencies)
    edge_count = sum(len(t.dependencies) for t in tasks)

    if format == "text":
        typer.echo(f"OK: {len(tasks)} tasks ({edge_count} dependencies)\nRoots: " + ", ".join(roots))
        return

    _emit_json(
        "validate",
        True,
        [],
        0,
        summary={"task_count": len(tasks), "dependency_count": edge_count, "roots": roots},
    )


@app.command("schedule")
def schedule(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    start: Optional[str] = typer.Option(
        None, "--start", help="Calendar start date YYYY-MM-DD (default: today)"
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json|yaml"),
    out: Optional[str] = typer.Option(None, "--out", help="Write the rendered schedule to this file"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Optional scheduler config YAML"),
) -> None:
    """Generate an ordered, calendar-projected schedule with critical path and warnings."""
    _check_format("schedule", format, ("text", "json", "yaml"))

    start_date: Optional[date] = None
    if start is not None:
        try:
            start_date = date.fromisoformat(start)
        except ValueError:
            _fail(
                "schedule",
                format,
                [
                    TaskValidationError(
                        code="E_SCHEDULE_INVALID_START",
                        message=f"--start must be a date in YYYY-MM-DD form, got: {start}",
                        file=None,
                        path="start",
                    )
                ],
                2,
            )

    config = _load_config("schedule", format, config_file)
    tasks, file = _load_tasks("schedule", format, path, config)

    try:
        result = generate_schedule(tasks, start_date=start_date, config=config, file=file)
    except InvalidSchedule as e:
        _fail("schedule", format, [e], 2)
    except Exception:
        logger.exception("schedule generation failed for %s", path)
        typer.echo(GENERIC_FAILURE, err=True)
        raise typer.Exit(code=1)

    if format == "json":
        rendered = dump_result_json(result)
    elif format == "yaml":
        rendered = dump_result_yaml(result)
    else:
        rendered = format_result_text(result)

    if out is not None:
        write_text(out, rendered if rendered.endswith("\n") else rendered + "\n")
        typer.echo(f"OK: wrote schedule to {out}")
        return

    typer.echo(rendered.rstrip("\n"))


@app.command("critical-path")
def critical_path_cmd(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Optional scheduler config YAML"),
) -> None:
    """Show earliest/latest start and slack per task, in hours."""
    _check_format("critical-path", format, ("text", "json"))
    config = _load_config("critical-path", format, config_file)
    tasks, file = _load_tasks("critical-path", format, path, config)

    try:
        validate_graph(tasks, file=file)
    except InvalidSchedule as e:
        _fail("critical-path", format, [e], 2)

    ordered = topological_order(tasks)
    analysis = critical_path(ordered, epsilon=config.slack_epsilon)

    if format == "json":
        _emit_json(
            "critical-path",
            True,
            [],
            0,
            project_duration=analysis.project_duration,
            tasks=[
                {
                    "title": t.title,
                    "earliest_start": analysis.earliest_start[t.title],
                    "latest_start": analysis.latest_start[t.title],
                    "slack": analysis.slack[t.title],
                    "critical": t.title in analysis.critical,
                }
                for t in ordered
            ],
        )

    rows = [("Task", "ES", "LS", "Slack", "Critical")]
    for t in ordered:
        rows.append(
            (
                t.title,
                f"{analysis.earliest_start[t.title]:g}",
                f"{analysis.latest_start[t.title]:g}",
                f"{analysis.slack[t.title]:g}",
                "yes" if t.title in analysis.critical else "no",
            )
        )
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    for r in rows:
        typer.echo("  ".join(cell.ljust(w) for cell, w in zip(r, widths)).rstrip())
    typer.echo(f"Project duration: {analysis.project_duration:g}h")


def _print_errors(errors: list[ScheduleError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="planner-scheduler")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
