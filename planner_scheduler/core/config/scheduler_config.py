from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from planner_scheduler.core.errors import ConfigError


@dataclass(frozen=True)
class SchedulerConfig:
    work_hours_per_day: float = 8.0
    slack_epsilon: float = 0.01
    # Input bounds enforced when a payload is parsed.
    max_tasks: int = 1000
    max_dependencies_per_task: int = 100


DEFAULT_CONFIG = SchedulerConfig()

_INT_KEYS = {"max_tasks", "max_dependencies_per_task"}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load scheduler settings from a YAML file.

    Format:
      work_hours_per_day: 8
      slack_epsilon: 0.01
      max_tasks: 1000
      max_dependencies_per_task: 100

    Every key is optional. Returns only the keys present in the file.
    """
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"config file is not valid YAML: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("config file must be a mapping of setting -> value")

    known = {f.name for f in fields(SchedulerConfig)}
    out: dict[str, Any] = {}
    for k, v in raw.items():
        if k not in known:
            raise ConfigError(f"unknown setting '{k}' (choose from: {', '.join(sorted(known))})")
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ConfigError(f"setting '{k}' must be a number")
        if k in _INT_KEYS and not isinstance(v, int):
            raise ConfigError(f"setting '{k}' must be an integer")
        if not math.isfinite(v) or v <= 0:
            raise ConfigError(f"setting '{k}' must be a positive finite number")
        out[k] = v if k in _INT_KEYS else float(v)
    return out


def load_and_merge(config_file: str | None) -> SchedulerConfig:
    if not config_file:
        return DEFAULT_CONFIG
    return replace(DEFAULT_CONFIG, **load_config_file(config_file))
