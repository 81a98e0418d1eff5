"""
SIMPLERUN — Task Types and Statuses
====================================
Value objects shared by the graph model, the runner and lifecycle observers.

Statuses:
- NOT_STARTED: Never dispatched
- RUNNING: Dispatched, first event not yet received (never persisted)
- SUCCESS / FAILURE: Resolved from the executor's first event
- SKIPPED: Never dispatched because the run could not reach the task
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping


class TaskStatus(StrEnum):
    """Lifecycle status of a submitted task."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.SUCCESS, TaskStatus.FAILURE, TaskStatus.SKIPPED}
)


@dataclass(frozen=True, slots=True)
class TaskTarget:
    """Identifies the work a task performs: ``project:target[:configuration]``."""

    project: str
    target: str
    configuration: str | None = None

    def __str__(self) -> str:
        parts = [self.project, self.target]
        if self.configuration:
            parts.append(self.configuration)
        return ":".join(parts)


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single unit of work.

    ``target`` and ``overrides`` are opaque to the scheduler and are passed
    through to the executor unchanged.
    """

    id: str
    target: TaskTarget
    overrides: Mapping[str, Any] = field(
        default_factory=dict, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "overrides", MappingProxyType(dict(self.overrides))
        )


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome of one dispatched task, as reported to lifecycle observers."""

    task: Task
    status: TaskStatus
    code: int

    @classmethod
    def from_status(cls, task: Task, status: TaskStatus) -> TaskResult:
        """Exit code is 0 for success and 1 for anything else."""
        return cls(task=task, status=status, code=0 if status == TaskStatus.SUCCESS else 1)


# One terminal status per submitted task id.
RunResult = dict[str, TaskStatus]
