"""
SIMPLERUN — Executor Invocation Adapter
========================================
Abstract boundary between the runner and the work a task performs.

An executor is invoked with a task's target, its overrides and the run's
``ExecutorContext`` and produces an async stream of events.  Every event
carries at least a ``success`` flag.  The runner reads exactly one event to
decide the task's status and hands the rest of the stream to ``drain``.

Usage:
    async def build(target, overrides, context):
        yield {"success": True}

    registry = ExecutorRegistry({"build": CallableExecutor(build)})
"""

from __future__ import annotations

import abc
import inspect
from typing import Any, AsyncIterator, Callable, Mapping

from pydantic import BaseModel, ConfigDict

from simplerun.core.exceptions import ExecutorNotFoundError, ExecutorProtocolError
from simplerun.core.logging import get_logger
from simplerun.core.task_types import Task, TaskTarget
from simplerun.core.workspace import ExecutorContext

logger = get_logger(__name__)


class ExecutorEvent(BaseModel):
    """Open event record: ``success`` plus any executor-specific payload."""

    model_config = ConfigDict(extra="allow", frozen=True)

    success: bool


def event_succeeded(event: Any) -> bool:
    """Read the ``success`` flag from a mapping or an object."""
    if isinstance(event, Mapping):
        if "success" not in event:
            raise ExecutorProtocolError("Executor event has no 'success' field")
        return bool(event["success"])
    if hasattr(event, "success"):
        return bool(event.success)
    raise ExecutorProtocolError(
        f"Executor event of type {type(event).__name__} has no 'success' field"
    )


class TaskExecutor(abc.ABC):
    """Runs the work behind a task target and streams its events."""

    @abc.abstractmethod
    def run(
        self,
        target: TaskTarget,
        overrides: Mapping[str, Any],
        context: ExecutorContext,
    ) -> Any:
        """
        Start the work for ``target``.

        Returns an async iterator of events, or an awaitable resolving to one.
        """
        ...


class CallableExecutor(TaskExecutor):
    """Adapts a plain async generator function to ``TaskExecutor``."""

    def __init__(self, fn: Callable[..., Any]) -> None:
        self._fn = fn

    def run(self, target, overrides, context):
        return self._fn(target, overrides, context)


class ExecutorRegistry(TaskExecutor):
    """
    Dispatches to an executor chosen by the target name.

    ``TaskTarget("app", "build")`` runs the executor registered as
    ``"build"``.
    """

    def __init__(self, executors: Mapping[str, TaskExecutor] | None = None) -> None:
        self._executors: dict[str, TaskExecutor] = dict(executors or {})

    def register(self, name: str, executor: TaskExecutor) -> None:
        """Register (or replace) the executor for a target name."""
        self._executors[name] = executor

    def names(self) -> list[str]:
        return sorted(self._executors)

    def run(self, target, overrides, context):
        executor = self._executors.get(target.target)
        if executor is None:
            raise ExecutorNotFoundError(
                f"No executor registered for target {target.target!r}",
                task_id=str(target),
            )
        return executor.run(target, overrides, context)


async def open_stream(
    executor: TaskExecutor,
    task: Task,
    context: ExecutorContext,
) -> AsyncIterator[Any]:
    """Invoke ``executor`` for ``task`` and return its event stream."""
    output = executor.run(task.target, task.overrides, context)
    if inspect.isawaitable(output):
        output = await output
    if not hasattr(output, "__anext__"):
        if hasattr(output, "__aiter__"):
            return output.__aiter__()
        raise ExecutorProtocolError(
            f"Executor returned {type(output).__name__}, expected an async iterator",
            task_id=task.id,
        )
    return output


async def first_event(stream: AsyncIterator[Any], task_id: str | None = None) -> Any:
    """Await exactly one event from ``stream``."""
    try:
        return await anext(stream)
    except StopAsyncIteration:
        raise ExecutorProtocolError(
            "Executor finished without yielding an event", task_id=task_id
        ) from None


async def drain(stream: AsyncIterator[Any], task_id: str) -> int:
    """Consume the rest of ``stream``; return how many events were discarded."""
    count = 0
    while True:
        try:
            await anext(stream)
        except StopAsyncIteration:
            break
        count += 1
    logger.debug("executor.drained", task_id=task_id, events=count)
    return count
