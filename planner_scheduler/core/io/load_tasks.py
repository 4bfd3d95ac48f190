from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Optional, cast

import yaml

from planner_scheduler.core.config.scheduler_config import DEFAULT_CONFIG, SchedulerConfig
from planner_scheduler.core.errors import TaskLoadError, TaskValidationError
from planner_scheduler.core.model import TaskInput


MIN_ESTIMATED_HOURS = 0.5
MAX_ESTIMATED_HOURS = 1000.0


def load_task_file(path: str) -> dict[str, Any]:
    """Load a YAML/JSON task file.

    The document is either a list of tasks or a mapping with a ``tasks`` list.
    Returns a dict with keys: tasks, __file__.
    Does not coerce types; parse_tasks owns shape checking.
    """

    p = Path(path)
    if not p.exists():
        raise TaskLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise TaskLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise TaskLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                file=str(p),
            )
    except TaskLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise TaskLoadError(code=code, message=str(e), file=str(p)) from e

    if isinstance(data, list):
        tasks: Any = data
    elif isinstance(data, dict):
        tasks = data.get("tasks")
    else:
        raise TaskLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a list of tasks or a mapping with 'tasks'",
            file=str(p),
        )

    return {"tasks": tasks, "__file__": str(p)}


def parse_tasks(
    payload: dict[str, Any],
    *,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> tuple[Optional[list[TaskInput]], list[TaskValidationError]]:
    """Shape-check a task payload and build TaskInput records.

    Returns (tasks, errors). Tasks is None when errors exist. Graph-level
    problems (duplicates, unknown dependencies, cycles) are left to the
    graph validator.
    """

    file = cast(Optional[str], payload.get("__file__"))
    errors: list[TaskValidationError] = []

    raw_tasks = payload.get("tasks")
    if not isinstance(raw_tasks, list):
        errors.append(
            TaskValidationError(
                code="E_REQUIRED_FIELD",
                message="tasks is required and must be an array",
                file=file,
                path="tasks",
            )
        )
        return None, errors

    if not raw_tasks:
        errors.append(
            TaskValidationError(
                code="E_EMPTY_TASKS",
                message="tasks must contain at least one task",
                file=file,
                path="tasks",
            )
        )
        return None, errors

    if len(raw_tasks) > config.max_tasks:
        errors.append(
            TaskValidationError(
                code="E_TOO_MANY_TASKS",
                message=f"at most {config.max_tasks} tasks are allowed, got {len(raw_tasks)}",
                file=file,
                path="tasks",
            )
        )
        return None, errors

    tasks: list[TaskInput] = []
    for i, raw in enumerate(raw_tasks):
        task_path = f"tasks[{i}]"
        if not isinstance(raw, dict):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="task must be an object",
                    file=file,
                    path=task_path,
                )
            )
            continue

        task_errors: list[TaskValidationError] = []

        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            task_errors.append(
                TaskValidationError(
                    code="E_REQUIRED_FIELD",
                    message="title is required and must be a non-empty string",
                    file=file,
                    path=f"{task_path}.title",
                )
            )

        hours = raw.get("estimatedHours")
        if hours is None:
            task_errors.append(
                TaskValidationError(
                    code="E_REQUIRED_FIELD",
                    message="estimatedHours is required",
                    file=file,
                    path=f"{task_path}.estimatedHours",
                )
            )
        elif isinstance(hours, bool) or not isinstance(hours, (int, float)):
            task_errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="estimatedHours must be a number",
                    file=file,
                    path=f"{task_path}.estimatedHours",
                )
            )
        elif not MIN_ESTIMATED_HOURS <= hours <= MAX_ESTIMATED_HOURS:
            task_errors.append(
                TaskValidationError(
                    code="E_OUT_OF_RANGE",
                    message=f"estimatedHours must be between {MIN_ESTIMATED_HOURS:g} and {MAX_ESTIMATED_HOURS:g}",
                    file=file,
                    path=f"{task_path}.estimatedHours",
                )
            )

        due_raw = raw.get("dueDate")
        due_date: Optional[datetime] = None
        if due_raw is None:
            task_errors.append(
                TaskValidationError(
                    code="E_REQUIRED_FIELD",
                    message="dueDate is required",
                    file=file,
                    path=f"{task_path}.dueDate",
                )
            )
        else:
            due_date = _coerce_datetime(due_raw)
            if due_date is None:
                task_errors.append(
                    TaskValidationError(
                        code="E_INVALID_DATE",
                        message="dueDate must be an ISO date or date-time",
                        file=file,
                        path=f"{task_path}.dueDate",
                    )
                )

        deps = raw.get("dependencies", [])
        if deps is None:
            deps = []
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            task_errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="dependencies must be an array of strings",
                    file=file,
                    path=f"{task_path}.dependencies",
                )
            )
            deps = []
        elif len(deps) > config.max_dependencies_per_task:
            task_errors.append(
                TaskValidationError(
                    code="E_TOO_MANY_DEPENDENCIES",
                    message=f"at most {config.max_dependencies_per_task} dependencies are allowed per task",
                    file=file,
                    path=f"{task_path}.dependencies",
                )
            )

        priority = raw.get("priority")
        if priority is not None and (isinstance(priority, bool) or not isinstance(priority, int)):
            task_errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="priority must be an integer",
                    file=file,
                    path=f"{task_path}.priority",
                )
            )

        if task_errors:
            errors.extend(task_errors)
            continue

        tasks.append(
            TaskInput(
                title=cast(str, title),
                estimated_hours=float(hours),
                due_date=cast(datetime, due_date),
                dependencies=_unique(cast(list[str], deps)),
                priority=cast(Optional[int], priority) or 0,
            )
        )

    if errors:
        return None, _sorted(errors)
    return tasks, []


def _coerce_datetime(v: Any) -> Optional[datetime]:
    # YAML hands back date/datetime objects for unquoted ISO values.
    if isinstance(v, datetime):
        return v.replace(tzinfo=None)
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    if isinstance(v, str) and v.strip():
        text = v.strip()
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def _unique(titles: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(titles))


def _sorted(errors: Iterable[TaskValidationError]) -> list[TaskValidationError]:
    return sorted(
        list(errors),
        key=lambda e: (
            e.file or "",
            e.path or "",
            e.code,
        ),
    )
