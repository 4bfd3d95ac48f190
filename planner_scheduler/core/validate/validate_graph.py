from __future__ import annotations

import logging
from collections import Counter
from typing import Optional, Sequence

from planner_scheduler.core.errors import (
    CircularDependency,
    DuplicateTitle,
    UnknownDependency,
)
from planner_scheduler.core.model import TaskInput


logger = logging.getLogger(__name__)


def validate_graph(tasks: Sequence[TaskInput], *, file: Optional[str] = None) -> None:
    """Reject task sets that cannot be scheduled.

    Checks run in order and stop at the first violation:
    duplicate titles, unknown dependencies, dependency cycles.
    Raises a subclass of InvalidSchedule.
    """

    counts = Counter(t.title for t in tasks)
    for t in tasks:
        if counts[t.title] > 1:
            raise DuplicateTitle(
                code="E_DUPLICATE_TITLE",
                message=f"duplicate task title: {t.title} (count={counts[t.title]}). "
                "Each task must have a unique title.",
                file=file,
                path="tasks.title",
                title=t.title,
            )

    titles = set(counts)
    for t in tasks:
        for dep in t.dependencies:
            if dep not in titles:
                raise UnknownDependency(
                    code="E_UNKNOWN_DEPENDENCY",
                    message=f"Task '{t.title}' has invalid dependency: '{dep}'",
                    file=file,
                    path="tasks.dependencies",
                    task=t.title,
                    missing_dependency=dep,
                )

    cycle = find_cycle({t.title: t.dependencies for t in tasks})
    if cycle is not None:
        raise CircularDependency(
            code="E_CIRCULAR_DEPENDENCY",
            message="dependency cycle detected: " + " -> ".join(cycle),
            file=file,
            path="tasks.dependencies",
            cycle=cycle,
        )

    logger.debug("validated %d tasks", len(tasks))


def find_cycle(id_to_deps: dict[str, Sequence[str]]) -> Optional[tuple[str, ...]]:
    """Return the first dependency cycle found, e.g. ("A", "B", "A"), or None.

    Depth-first over every unvisited node with an explicit stack, so deep
    chains never hit the interpreter's recursion limit.
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    state: dict[str, int] = {nid: WHITE for nid in id_to_deps}

    for start in id_to_deps:
        if state[start] != WHITE:
            continue

        state[start] = GRAY
        path: list[str] = [start]
        stack = [iter(id_to_deps[start])]
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                state[path.pop()] = BLACK
                continue
            if nxt not in state:
                continue
            if state[nxt] == GRAY:
                idx = path.index(nxt)
                return tuple(path[idx:] + [nxt])
            if state[nxt] == WHITE:
                state[nxt] = GRAY
                path.append(nxt)
                stack.append(iter(id_to_deps[nxt]))

    return None
