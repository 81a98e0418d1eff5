"""
SIMPLERUN — Test Fixtures
==========================
Shared pytest fixtures: settings isolation, a recording lifecycle observer
and a scripted executor.
"""

from __future__ import annotations

from typing import Any, Mapping

import pytest

from simplerun.core.task_types import TaskResult
from simplerun.orchestrator.executor import TaskExecutor
from simplerun.orchestrator.lifecycle import LifeCycle


# ── Settings isolation ───────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Ensure a fresh Settings instance for each test."""
    from simplerun.core.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(monkeypatch, tmp_path):
    """Return a settings instance with test defaults."""
    monkeypatch.delenv("NX_VERBOSE_LOGGING", raising=False)
    monkeypatch.delenv("SIMPLERUN_FAILURE_POLICY", raising=False)
    monkeypatch.setenv("SIMPLERUN_WORKSPACE_ROOT", str(tmp_path))
    monkeypatch.setenv("SIMPLERUN_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SIMPLERUN_LOG_FORMAT", "console")
    from simplerun.core.config import get_settings
    return get_settings()


# ── Lifecycle ────────────────────────────────────────────────────────────
class RecordingLifeCycle(LifeCycle):
    """Records every notification as a tuple, in call order."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def start_command(self) -> None:
        self.events.append(("start_command",))

    def end_command(self) -> None:
        self.events.append(("end_command",))

    def start_tasks(self, tasks, group_id) -> None:
        self.events.append(("start_tasks", tuple(t.id for t in tasks), group_id))

    def schedule_task(self, task) -> None:
        self.events.append(("schedule_task", task.id))

    def end_tasks(self, results: list[TaskResult], group_id) -> None:
        for result in results:
            self.events.append(
                ("end_tasks", result.task.id, result.status.value, result.code, group_id)
            )

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture
def lifecycle() -> RecordingLifeCycle:
    return RecordingLifeCycle()


# ── Executor ─────────────────────────────────────────────────────────────
class ScriptedExecutor(TaskExecutor):
    """
    Replays scripted outcomes keyed by ``str(target)``.

    An outcome is either a list of events to yield or an exception to raise
    when the executor is invoked.  Unscripted targets yield one success.
    """

    def __init__(self, outcomes: Mapping[str, Any] | None = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: list[str] = []
        self.contexts: list[Any] = []
        self.overrides: dict[str, Mapping[str, Any]] = {}

    def run(self, target, overrides, context):
        key = str(target)
        self.calls.append(key)
        self.contexts.append(context)
        self.overrides[key] = overrides
        outcome = self.outcomes.get(key, [{"success": True}])
        if isinstance(outcome, Exception):
            raise outcome
        return self._stream(list(outcome))

    async def _stream(self, events):
        for event in events:
            yield event


@pytest.fixture
def executor() -> ScriptedExecutor:
    return ScriptedExecutor()
