from pathlib import Path

import pytest

from planner_scheduler.core.config.scheduler_config import (
    DEFAULT_CONFIG,
    load_and_merge,
    load_config_file,
)
from planner_scheduler.core.errors import ConfigError


def test_defaults_without_file():
    cfg = load_and_merge(None)
    assert cfg == DEFAULT_CONFIG
    assert cfg.work_hours_per_day == 8
    assert cfg.slack_epsilon == 0.01


def test_file_overrides_defaults():
    cfg = load_and_merge("examples/scheduler-config.yaml")
    assert cfg.work_hours_per_day == 4.0
    assert cfg.max_tasks == 50
    assert cfg.max_dependencies_per_task == DEFAULT_CONFIG.max_dependencies_per_task


def test_empty_file_is_defaults(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config_file(p) == {}


@pytest.mark.parametrize(
    "text",
    [
        "- 1\n- 2\n",
        "work_days: 5\n",
        "work_hours_per_day: eight\n",
        "max_tasks: 2.5\n",
        "slack_epsilon: 0\n",
        "work_hours_per_day: [\n",
        "work_hours_per_day: .nan\n",
        "work_hours_per_day: .inf\n",
        "slack_epsilon: .inf\n",
    ],
)
def test_invalid_files_rejected(tmp_path: Path, text: str):
    p = tmp_path / "bad.yaml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(p)


def test_missing_file_raises_file_not_found():
    with pytest.raises(FileNotFoundError):
        load_and_merge("examples/nope.yaml")
