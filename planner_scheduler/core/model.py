from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class TaskInput:
    title: str
    estimated_hours: float
    due_date: datetime

    dependencies: tuple[str, ...] = ()
    priority: int = 0


@dataclass(frozen=True)
class ScheduledTask:
    title: str
    estimated_hours: float
    dependencies: tuple[str, ...]
    suggested_start: date
    suggested_end: date
    order_index: int  # 1-based position in the recommended order
    is_critical_path: bool


@dataclass(frozen=True)
class ScheduleMetrics:
    project_start: Optional[date]
    project_end: Optional[date]
    total_hours: float
    total_tasks: int
    critical_path_length: float


@dataclass(frozen=True)
class ScheduleResult:
    recommended_order: list[str]
    schedule: list[ScheduledTask]
    warnings: list[str]
    metrics: ScheduleMetrics
