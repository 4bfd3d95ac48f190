from datetime import date, datetime

from planner_scheduler.core.metrics.aggregate_metrics import aggregate_metrics
from planner_scheduler.core.model import ScheduledTask, TaskInput


def _scheduled(title: str, hours: float, start: date, end: date, critical: bool) -> ScheduledTask:
    return ScheduledTask(
        title=title,
        estimated_hours=hours,
        dependencies=(),
        suggested_start=start,
        suggested_end=end,
        order_index=1,
        is_critical_path=critical,
    )


def test_metrics_reduce_schedule():
    schedule = [
        _scheduled("a", 5, date(2025, 11, 24), date(2025, 11, 25), True),
        _scheduled("b", 10, date(2025, 11, 25), date(2025, 11, 27), False),
        _scheduled("c", 8, date(2025, 11, 27), date(2025, 11, 28), True),
    ]
    tasks = [
        TaskInput(title=s.title, estimated_hours=s.estimated_hours, due_date=datetime(2025, 12, 31))
        for s in schedule
    ]
    m = aggregate_metrics(schedule, tasks)
    assert m.project_start == date(2025, 11, 24)
    assert m.project_end == date(2025, 11, 28)
    assert m.total_hours == 23
    assert m.total_tasks == 3
    assert m.critical_path_length == 13


def test_metrics_for_empty_schedule():
    m = aggregate_metrics([], [])
    assert m.project_start is None
    assert m.project_end is None
    assert m.total_tasks == 0
    assert m.critical_path_length == 0
