"""
SIMPLERUN Tests — Task Types
=============================
"""

from __future__ import annotations

import pytest

from simplerun.core.task_types import (
    TERMINAL_STATUSES,
    Task,
    TaskResult,
    TaskStatus,
    TaskTarget,
)


class TestTaskStatus:
    def test_result_values(self):
        assert {s.value for s in TERMINAL_STATUSES} == {"success", "failure", "skipped"}

    def test_running_is_not_terminal(self):
        assert TaskStatus.RUNNING not in TERMINAL_STATUSES
        assert TaskStatus.NOT_STARTED not in TERMINAL_STATUSES


class TestTaskTarget:
    def test_str_without_configuration(self):
        assert str(TaskTarget("app", "build")) == "app:build"

    def test_str_with_configuration(self):
        assert str(TaskTarget("app", "build", "production")) == "app:build:production"


class TestTask:
    def test_overrides_are_read_only_copies(self):
        source = {"watch": True}
        task = Task("app:build", TaskTarget("app", "build"), source)
        source["watch"] = False

        assert task.overrides == {"watch": True}
        with pytest.raises(TypeError):
            task.overrides["watch"] = False  # type: ignore[index]

    def test_task_is_frozen(self):
        task = Task("app:build", TaskTarget("app", "build"))
        with pytest.raises(AttributeError):
            task.id = "other"  # type: ignore[misc]


class TestTaskResult:
    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (TaskStatus.SUCCESS, 0),
            (TaskStatus.FAILURE, 1),
            (TaskStatus.SKIPPED, 1),
        ],
    )
    def test_exit_code(self, status, code):
        task = Task("app:build", TaskTarget("app", "build"))
        assert TaskResult.from_status(task, status).code == code
