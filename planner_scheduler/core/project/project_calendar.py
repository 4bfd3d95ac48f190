from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from planner_scheduler.core.model import TaskInput


logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
SATURDAY, SUNDAY = 5, 6


@dataclass(frozen=True)
class TaskSpan:
    title: str
    start: date
    end: date


@dataclass(frozen=True)
class CalendarProjection:
    spans: list[TaskSpan]
    warnings: list[str]


def is_weekend(d: date) -> bool:
    return d.weekday() in (SATURDAY, SUNDAY)


def next_working_day(d: date) -> date:
    """Return d itself when it is a weekday, else the following Monday."""
    while is_weekend(d):
        d += timedelta(days=1)
    return d


def add_working_days(start: date, days: int) -> date:
    """Advance start by `days` working days; weekend days do not count."""
    current = start
    added = 0
    while added < days:
        current += timedelta(days=1)
        if not is_weekend(current):
            added += 1
    return current


def working_days_for(hours: float, work_hours_per_day: float = 8.0) -> int:
    return math.ceil(hours / work_hours_per_day)


def project_calendar(
    ordered: Sequence[TaskInput],
    *,
    start_date: Optional[date] = None,
    work_hours_per_day: float = 8.0,
) -> CalendarProjection:
    """Assign working-day start/end dates to tasks on a single track.

    One executor: every task starts no earlier than the previous task's end,
    and no earlier than the end of any of its dependencies. Independent
    branches are therefore serialized, never run side by side.
    """

    cursor = start_date or date.today()
    end_by_title: dict[str, date] = {}
    spans: list[TaskSpan] = []
    warnings: list[str] = []

    for task in ordered:
        start = max(
            [cursor] + [end_by_title[d] for d in task.dependencies if d in end_by_title]
        )
        start = next_working_day(start)
        end = add_working_days(start, working_days_for(task.estimated_hours, work_hours_per_day))

        if datetime.combine(end, datetime.min.time()) > task.due_date:
            warnings.append(
                f"Task '{task.title}' may miss deadline. "
                f"Estimated completion: {end.strftime(DATE_FORMAT)}, "
                f"Due: {task.due_date.strftime(DATE_FORMAT)}"
            )

        spans.append(TaskSpan(title=task.title, start=start, end=end))
        end_by_title[task.title] = end
        cursor = end

    logger.debug("projected %d tasks, %d deadline warnings", len(spans), len(warnings))
    return CalendarProjection(spans=spans, warnings=warnings)
