from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from planner_scheduler.core.config.scheduler_config import DEFAULT_CONFIG, SchedulerConfig
from planner_scheduler.core.critical.critical_path import critical_path
from planner_scheduler.core.errors import InvalidSchedule
from planner_scheduler.core.metrics.aggregate_metrics import aggregate_metrics
from planner_scheduler.core.model import ScheduledTask, ScheduleResult, TaskInput
from planner_scheduler.core.order.topological_order import topological_order
from planner_scheduler.core.project.project_calendar import project_calendar
from planner_scheduler.core.validate.validate_graph import validate_graph


logger = logging.getLogger(__name__)


def generate_schedule(
    tasks: Sequence[TaskInput],
    *,
    start_date: Optional[date] = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
    file: Optional[str] = None,
) -> ScheduleResult:
    """Validate, order, project and analyze a task set.

    Raises InvalidSchedule (DuplicateTitle, UnknownDependency,
    CircularDependency) before any ordering happens. Everything after
    validation is pure and total.
    """

    try:
        validate_graph(tasks, file=file)
    except InvalidSchedule as e:
        logger.info("rejected task set: %s", e)
        raise

    ordered = topological_order(tasks)
    projection = project_calendar(
        ordered,
        start_date=start_date,
        work_hours_per_day=config.work_hours_per_day,
    )
    analysis = critical_path(ordered, epsilon=config.slack_epsilon)

    schedule = [
        ScheduledTask(
            title=task.title,
            estimated_hours=task.estimated_hours,
            dependencies=task.dependencies,
            suggested_start=span.start,
            suggested_end=span.end,
            order_index=i + 1,
            is_critical_path=task.title in analysis.critical,
        )
        for i, (task, span) in enumerate(zip(ordered, projection.spans))
    ]

    if projection.warnings:
        logger.debug("%d tasks at deadline risk", len(projection.warnings))

    return ScheduleResult(
        recommended_order=[t.title for t in ordered],
        schedule=schedule,
        warnings=list(projection.warnings),
        metrics=aggregate_metrics(schedule, tasks),
    )
