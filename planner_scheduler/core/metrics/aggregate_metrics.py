from __future__ import annotations

from typing import Sequence

from planner_scheduler.core.model import ScheduledTask, ScheduleMetrics, TaskInput


def aggregate_metrics(
    schedule: Sequence[ScheduledTask], tasks: Sequence[TaskInput]
) -> ScheduleMetrics:
    return ScheduleMetrics(
        project_start=min((s.suggested_start for s in schedule), default=None),
        project_end=max((s.suggested_end for s in schedule), default=None),
        total_hours=sum(t.estimated_hours for t in tasks),
        total_tasks=len(tasks),
        critical_path_length=sum(s.estimated_hours for s in schedule if s.is_critical_path),
    )
