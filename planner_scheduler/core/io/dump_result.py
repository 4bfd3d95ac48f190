from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

from planner_scheduler.core.model import ScheduleResult


def result_to_dict(result: ScheduleResult) -> dict[str, Any]:
    """Wire shape of a schedule result (camelCase keys, YYYY-MM-DD dates)."""
    m = result.metrics
    return {
        "recommendedOrder": list(result.recommended_order),
        "schedule": [
            {
                "title": s.title,
                "estimatedHours": s.estimated_hours,
                "dependencies": list(s.dependencies),
                "suggestedStart": _iso(s.suggested_start),
                "suggestedEnd": _iso(s.suggested_end),
                "orderIndex": s.order_index,
                "isCriticalPath": s.is_critical_path,
            }
            for s in result.schedule
        ],
        "warnings": list(result.warnings),
        "metrics": {
            "projectStart": _iso(m.project_start),
            "projectEnd": _iso(m.project_end),
            "totalHours": m.total_hours,
            "totalTasks": m.total_tasks,
            "criticalPathLength": m.critical_path_length,
        },
    }


def dump_result_json(result: ScheduleResult) -> str:
    return json.dumps(result_to_dict(result), indent=2)


def dump_result_yaml(result: ScheduleResult) -> str:
    return yaml.safe_dump(
        result_to_dict(result), sort_keys=False, default_flow_style=False, allow_unicode=True
    )


def write_text(path: str, text: str) -> None:
    p = Path(path)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def format_result_text(result: ScheduleResult) -> str:
    rows = [("#", "Task", "Hours", "Start", "End", "Critical")]
    for s in result.schedule:
        rows.append(
            (
                str(s.order_index),
                s.title,
                f"{s.estimated_hours:g}",
                _iso(s.suggested_start) or "",
                _iso(s.suggested_end) or "",
                "yes" if s.is_critical_path else "no",
            )
        )
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(r, widths)).rstrip() for r in rows]

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"- {w}" for w in result.warnings)

    m = result.metrics
    lines.append("")
    lines.append(
        f"Project: {_iso(m.project_start)} -> {_iso(m.project_end)} | "
        f"tasks={m.total_tasks} hours={m.total_hours:g} critical_path={m.critical_path_length:g}h"
    )
    return "\n".join(lines)


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d is not None else None
