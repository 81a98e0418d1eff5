"""
SIMPLERUN — Lifecycle Observers
================================
Sinks notified at coarse scheduling milestones.

Notification points:
- start_command / end_command: once per run
- start_tasks / end_tasks: around every dispatched batch (one task each)
- schedule_task: when a task is about to be handed to its executor

Observers never influence scheduling.  Exceptions raised by an observer
propagate to the caller of the runner.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from simplerun.core.logging import get_logger
from simplerun.core.task_types import Task, TaskResult

logger = get_logger(__name__)


class LifeCycle:
    """Base observer.  Every hook is a no-op; override the ones you need."""

    def start_command(self) -> None:
        pass

    def end_command(self) -> None:
        pass

    def start_tasks(self, tasks: Sequence[Task], group_id: int) -> None:
        pass

    def schedule_task(self, task: Task) -> None:
        pass

    def end_tasks(self, results: Sequence[TaskResult], group_id: int) -> None:
        pass


class NullLifeCycle(LifeCycle):
    """Observer that ignores every notification."""


class LoggingLifeCycle(LifeCycle):
    """Emits one structured log event per notification."""

    def start_command(self) -> None:
        logger.info("lifecycle.command_start")

    def end_command(self) -> None:
        logger.info("lifecycle.command_end")

    def start_tasks(self, tasks: Sequence[Task], group_id: int) -> None:
        logger.info(
            "lifecycle.tasks_start",
            task_ids=[task.id for task in tasks],
            group_id=group_id,
        )

    def schedule_task(self, task: Task) -> None:
        logger.info(
            "lifecycle.task_scheduled", task_id=task.id, target=str(task.target)
        )

    def end_tasks(self, results: Sequence[TaskResult], group_id: int) -> None:
        for result in results:
            logger.info(
                "lifecycle.task_end",
                task_id=result.task.id,
                status=result.status.value,
                code=result.code,
                group_id=group_id,
            )


class CompositeLifeCycle(LifeCycle):
    """Forwards every notification to each observer, in order."""

    def __init__(self, observers: Iterable[LifeCycle]) -> None:
        self._observers = list(observers)

    @property
    def observers(self) -> list[LifeCycle]:
        return list(self._observers)

    def start_command(self) -> None:
        for observer in self._observers:
            observer.start_command()

    def end_command(self) -> None:
        for observer in self._observers:
            observer.end_command()

    def start_tasks(self, tasks: Sequence[Task], group_id: int) -> None:
        for observer in self._observers:
            observer.start_tasks(tasks, group_id)

    def schedule_task(self, task: Task) -> None:
        for observer in self._observers:
            observer.schedule_task(task)

    def end_tasks(self, results: Sequence[TaskResult], group_id: int) -> None:
        for observer in self._observers:
            observer.end_tasks(results, group_id)
