"""Critical path analysis in abstract hour units.

Calendar effects (weekends, the single-track cursor) are ignored here: the
graph is measured as if every task could start the moment its dependencies
finish.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from planner_scheduler.core.model import TaskInput


logger = logging.getLogger(__name__)

SLACK_EPSILON = 0.01


@dataclass(frozen=True)
class CriticalPathAnalysis:
    earliest_start: dict[str, float]
    latest_start: dict[str, float]
    slack: dict[str, float]
    project_duration: float
    critical: frozenset[str]


def critical_path(
    ordered: Sequence[TaskInput], *, epsilon: float = SLACK_EPSILON
) -> CriticalPathAnalysis:
    """Forward/backward pass over tasks given in topological order."""

    hours = {t.title: t.estimated_hours for t in ordered}
    dependents: dict[str, list[str]] = {t.title: [] for t in ordered}
    for t in ordered:
        for dep in t.dependencies:
            dependents[dep].append(t.title)

    earliest: dict[str, float] = {}
    for t in ordered:
        if not t.dependencies:
            earliest[t.title] = 0.0
        else:
            earliest[t.title] = max(earliest[d] + hours[d] for d in t.dependencies)

    duration = max((earliest[t.title] + t.estimated_hours for t in ordered), default=0.0)

    latest: dict[str, float] = {}
    for t in reversed(ordered):
        after = dependents[t.title]
        if not after:
            latest[t.title] = duration - t.estimated_hours
        else:
            latest[t.title] = min(latest[d] for d in after) - t.estimated_hours

    slack = {title: latest[title] - earliest[title] for title in earliest}
    critical = frozenset(title for title, s in slack.items() if abs(s) < epsilon)

    logger.debug("project duration %.2fh, %d critical tasks", duration, len(critical))
    return CriticalPathAnalysis(
        earliest_start=earliest,
        latest_start=latest,
        slack=slack,
        project_duration=duration,
        critical=critical,
    )
