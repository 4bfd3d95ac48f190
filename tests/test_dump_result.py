import json
from datetime import date
from pathlib import Path

import yaml

from planner_scheduler.core.io.dump_result import (
    dump_result_json,
    dump_result_yaml,
    format_result_text,
    result_to_dict,
    write_text,
)
from planner_scheduler.core.io.load_tasks import load_task_file, parse_tasks
from planner_scheduler.core.schedule import generate_schedule


def _result():
    tasks, _ = parse_tasks(load_task_file("examples/basic-tasks.yaml"))
    return generate_schedule(tasks, start_date=date(2025, 11, 24))


def test_wire_shape_uses_camel_case_keys():
    d = result_to_dict(_result())
    assert set(d) == {"recommendedOrder", "schedule", "warnings", "metrics"}
    assert d["schedule"][0] == {
        "title": "A",
        "estimatedHours": 5.0,
        "dependencies": [],
        "suggestedStart": "2025-11-24",
        "suggestedEnd": "2025-11-25",
        "orderIndex": 1,
        "isCriticalPath": True,
    }
    assert d["metrics"] == {
        "projectStart": "2025-11-24",
        "projectEnd": "2025-12-02",
        "totalHours": 35.0,
        "totalTasks": 4,
        "criticalPathLength": 25.0,
    }


def test_json_and_yaml_documents_match(tmp_path: Path):
    result = _result()
    out = tmp_path / "nested" / "schedule.yaml"
    write_text(str(out), dump_result_yaml(result))
    assert yaml.safe_load(out.read_text(encoding="utf-8")) == json.loads(dump_result_json(result))


def test_text_rendering_lists_tasks_warnings_and_metrics():
    text = format_result_text(_result())
    lines = text.splitlines()
    assert lines[0].split() == ["#", "Task", "Hours", "Start", "End", "Critical"]
    assert lines[1].split() == ["1", "A", "5", "2025-11-24", "2025-11-25", "yes"]
    assert "Warnings:" in lines
    assert lines[-1] == (
        "Project: 2025-11-24 -> 2025-12-02 | tasks=4 hours=35 critical_path=25h"
    )
