"""Deterministic dependency ordering (Kahn's algorithm).

Among tasks whose dependencies are all placed, the next one is chosen by:
higher priority first, then earlier due date, then title (ordinal). The title
tie-break is total, so the order is fully determined by the input.
"""
from __future__ import annotations

import heapq
import logging
from datetime import datetime
from typing import Sequence

from planner_scheduler.core.model import TaskInput


logger = logging.getLogger(__name__)

ReadyKey = tuple[int, datetime, str]


class ReadyQueue:
    """Tasks with in-degree zero, popped in scheduling preference order.

    One queue per ordering run; never shared between calls.
    """

    def __init__(self) -> None:
        self._heap: list[ReadyKey] = []

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, task: TaskInput) -> None:
        heapq.heappush(self._heap, ready_key(task))

    def pop(self) -> str:
        return heapq.heappop(self._heap)[2]


def ready_key(task: TaskInput) -> ReadyKey:
    return (-task.priority, task.due_date, task.title)


def topological_order(tasks: Sequence[TaskInput]) -> list[TaskInput]:
    """Return all tasks in a dependency-respecting order.

    Expects validated input (unique titles, known dependencies, no cycles).
    """

    by_title: dict[str, TaskInput] = {t.title: t for t in tasks}
    in_degree: dict[str, int] = {t.title: 0 for t in tasks}
    dependents: dict[str, list[str]] = {t.title: [] for t in tasks}

    for t in tasks:
        for dep in t.dependencies:
            dependents[dep].append(t.title)
            in_degree[t.title] += 1

    ready = ReadyQueue()
    for t in tasks:
        if in_degree[t.title] == 0:
            ready.push(t)

    out: list[TaskInput] = []
    while ready:
        title = ready.pop()
        out.append(by_title[title])
        for nxt in dependents[title]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                ready.push(by_title[nxt])

    logger.debug("ordered %d tasks", len(out))
    return out
