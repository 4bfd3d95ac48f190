from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ScheduleError(Exception):
    """Base error envelope. Prefer returning/printing these rather than raising raw exceptions."""

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<tasks>"
        return f"{loc}: {self.code}: {self.message}"


class TaskLoadError(ScheduleError):
    pass


class TaskValidationError(ScheduleError):
    pass


class InvalidSchedule(TaskValidationError):
    """The task graph cannot be scheduled. Raised fail-fast by the graph validator."""


class DuplicateTitle(InvalidSchedule):
    def __init__(self, *, title: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        object.__setattr__(self, "title", title)


class UnknownDependency(InvalidSchedule):
    def __init__(self, *, task: str, missing_dependency: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        object.__setattr__(self, "task", task)
        object.__setattr__(self, "missing_dependency", missing_dependency)


class CircularDependency(InvalidSchedule):
    def __init__(self, *, cycle: tuple[str, ...], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        object.__setattr__(self, "cycle", cycle)


class ConfigError(ValueError):
    pass
