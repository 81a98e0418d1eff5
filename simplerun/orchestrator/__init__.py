"""
SIMPLERUN — Orchestration
==========================
Task graph snapshots, executor boundary, lifecycle observers and the
round-based scheduling loop.

Public API:
    TaskGraph, reduce_graph - Immutable graph snapshots
    TaskExecutor, ExecutorRegistry, CallableExecutor - Executor boundary
    LifeCycle, LoggingLifeCycle, CompositeLifeCycle - Observers
    SimpleTasksRunner, RunnerOptions, run_tasks - Scheduling loop
"""

from simplerun.orchestrator.executor import (
    CallableExecutor,
    ExecutorEvent,
    ExecutorRegistry,
    TaskExecutor,
)
from simplerun.orchestrator.graph import TaskGraph, reduce_graph
from simplerun.orchestrator.lifecycle import (
    CompositeLifeCycle,
    LifeCycle,
    LoggingLifeCycle,
    NullLifeCycle,
)
from simplerun.orchestrator.runner import RunnerOptions, SimpleTasksRunner, run_tasks

__all__ = [
    "TaskGraph",
    "reduce_graph",
    "TaskExecutor",
    "ExecutorEvent",
    "ExecutorRegistry",
    "CallableExecutor",
    "LifeCycle",
    "NullLifeCycle",
    "LoggingLifeCycle",
    "CompositeLifeCycle",
    "SimpleTasksRunner",
    "RunnerOptions",
    "run_tasks",
]
