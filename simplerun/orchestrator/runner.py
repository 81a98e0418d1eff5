"""
SIMPLERUN — Simple Tasks Runner
================================
Round-based scheduling loop for debugging task executors.

No caching, no parallelism inside a round.  Every round takes a snapshot of
the current roots, dispatches them one after another, waits for each task's
first event only, then reduces the graph for the next round.  Leftover
events are drained in the background and joined before the run returns.

The loop stops when every submitted task is resolved, or when a round makes
no progress (a cycle, or a dependency that never appears).  Unreached tasks
keep the ``skipped`` status.

Usage:
    runner = SimpleTasksRunner(executor, RunnerOptions(LoggingLifeCycle()))
    results = await runner.run(tasks, task_graph)
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from simplerun.core.config import FailurePolicy, Settings, get_settings
from simplerun.core.logging import get_logger
from simplerun.core.task_types import RunResult, Task, TaskResult, TaskStatus
from simplerun.core.workspace import (
    ContextFactory,
    ExecutorContext,
    default_context_factory,
)
from simplerun.orchestrator.executor import (
    TaskExecutor,
    drain,
    event_succeeded,
    first_event,
    open_stream,
)
from simplerun.orchestrator.graph import TaskGraph, reduce_graph
from simplerun.orchestrator.lifecycle import LifeCycle, NullLifeCycle

logger = get_logger(__name__)

# Every batch holds a single task, so all batches share one group.
GROUP_ID = 0

_BLOCKING_STATUSES = frozenset({TaskStatus.FAILURE, TaskStatus.SKIPPED})


@dataclass
class RunnerOptions:
    """Per-run collaborators for ``SimpleTasksRunner``."""

    lifecycle: LifeCycle = field(default_factory=NullLifeCycle)
    context_factory: ContextFactory | None = None
    failure_policy: FailurePolicy | None = None


class SimpleTasksRunner:
    """
    Runs a task graph one task at a time, each task at most once.

    Parameters
    ----------
    executor
        Performs the work behind each task target.
    options
        Lifecycle observer, context factory and failure policy.
    settings
        Defaults for anything ``options`` leaves unset.
    """

    def __init__(
        self,
        executor: TaskExecutor,
        options: RunnerOptions | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._executor = executor
        self._options = options or RunnerOptions()
        self._settings = settings or get_settings()

    @property
    def lifecycle(self) -> LifeCycle:
        return self._options.lifecycle

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._options.failure_policy or self._settings.failure_policy

    async def run(self, tasks: Sequence[Task], task_graph: TaskGraph) -> RunResult:
        """
        Run ``tasks`` in the dependency order given by ``task_graph``.

        ``task_graph`` must contain every submitted task.  Returns one
        terminal status per submitted task id.
        """
        self.lifecycle.start_command()
        try:
            with structlog.contextvars.bound_contextvars(run_id=uuid.uuid4().hex[:12]):
                return await self._run_all(tasks, task_graph)
        finally:
            self.lifecycle.end_command()

    async def _run_all(self, tasks: Sequence[Task], task_graph: TaskGraph) -> RunResult:
        context = await self._build_context()

        results: RunResult = {task.id: TaskStatus.SKIPPED for task in tasks}
        todo = set(results)
        # Statuses of every dispatched task, submitted or not.
        resolved: dict[str, TaskStatus] = {}
        drains: list[asyncio.Task[int]] = []

        logger.info(
            "runner.start",
            submitted=len(results),
            graph_size=len(task_graph),
            failure_policy=self.failure_policy.value,
        )

        graph = task_graph
        round_num = 0
        prev_size = len(todo) + 1
        try:
            while todo and prev_size > len(todo):
                prev_size = len(todo)
                round_num += 1
                roots = graph.roots
                logger.debug("runner.round_start", round=round_num, roots=list(roots))

                completed: list[str] = []
                for root_id in roots:
                    task = graph.tasks[root_id]
                    if self._blocked_by_dependency(task_graph, root_id, resolved):
                        status = TaskStatus.SKIPPED
                        logger.info("runner.task_skipped", task_id=root_id)
                    else:
                        status = await self._dispatch(task, context, drains)
                    resolved[root_id] = status
                    if root_id in results:
                        results[root_id] = status
                    completed.append(root_id)
                    todo.discard(root_id)

                graph = reduce_graph(graph, completed)
                logger.debug(
                    "runner.round_end",
                    round=round_num,
                    completed=len(completed),
                    remaining=len(todo),
                )

            if todo:
                logger.warning(
                    "runner.stalled",
                    rounds=round_num,
                    remaining=sorted(todo),
                )
        finally:
            await self._join_drains(drains)

        logger.info(
            "runner.complete",
            rounds=round_num,
            success=sum(1 for s in results.values() if s == TaskStatus.SUCCESS),
            failure=sum(1 for s in results.values() if s == TaskStatus.FAILURE),
            skipped=sum(1 for s in results.values() if s == TaskStatus.SKIPPED),
        )
        return results

    async def _build_context(self) -> ExecutorContext:
        factory = self._options.context_factory or default_context_factory(
            self._settings
        )
        context = factory()
        if inspect.isawaitable(context):
            context = await context
        return context

    def _blocked_by_dependency(
        self,
        task_graph: TaskGraph,
        task_id: str,
        resolved: dict[str, TaskStatus],
    ) -> bool:
        if self.failure_policy != FailurePolicy.SKIP_DEPENDENTS:
            return False
        return any(
            resolved.get(dep) in _BLOCKING_STATUSES
            for dep in task_graph.dependencies.get(task_id, ())
        )

    async def _dispatch(
        self,
        task: Task,
        context: ExecutorContext,
        drains: list[asyncio.Task[int]],
    ) -> TaskStatus:
        """Run one task up to its first event and report it to the lifecycle."""
        self.lifecycle.start_tasks([task], GROUP_ID)
        self.lifecycle.schedule_task(task)

        status = TaskStatus.FAILURE
        try:
            stream = await open_stream(self._executor, task, context)
            event = await first_event(stream, task.id)
            drains.append(
                asyncio.create_task(drain(stream, task.id), name=f"drain:{task.id}")
            )
            status = TaskStatus.SUCCESS if event_succeeded(event) else TaskStatus.FAILURE
        except Exception as exc:
            logger.error(
                "runner.task_error",
                task_id=task.id,
                target=str(task.target),
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )

        self.lifecycle.end_tasks([TaskResult.from_status(task, status)], GROUP_ID)
        return status

    async def _join_drains(self, drains: list[asyncio.Task[int]]) -> None:
        if not drains:
            return
        outcomes: list[Any] = await asyncio.gather(*drains, return_exceptions=True)
        for drain_task, outcome in zip(drains, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "runner.drain_failed",
                    drain=drain_task.get_name(),
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )


async def run_tasks(
    tasks: Sequence[Task],
    task_graph: TaskGraph,
    executor: TaskExecutor,
    options: RunnerOptions | None = None,
) -> RunResult:
    """Run ``tasks`` once with a fresh ``SimpleTasksRunner``."""
    return await SimpleTasksRunner(executor, options).run(tasks, task_graph)
