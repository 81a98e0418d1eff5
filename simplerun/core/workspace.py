"""
SIMPLERUN — Executor Context
=============================
The context handed to every executor invocation, and the injectable factory
that builds it.

Workspace discovery is not performed here.  Callers that have a real
project graph or workspace configuration supply their own factory; the
default one only reflects ``Settings``.

Usage:
    runner = SimpleTasksRunner(
        executor,
        RunnerOptions(lifecycle, context_factory=my_factory),
    )
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

from simplerun.core.config import Settings, get_settings


@dataclass(frozen=True)
class ExecutorContext:
    """
    Immutable context passed from the runner to every executor.

    ``project_graph`` and ``configuration`` are opaque to the runner.
    """

    root: str
    cwd: str
    is_verbose: bool = False
    project_graph: Mapping[str, Any] = field(default_factory=dict)
    configuration: Mapping[str, Any] = field(default_factory=dict)


ContextFactory = Callable[[], "ExecutorContext | Awaitable[ExecutorContext]"]


def default_context_factory(settings: Settings | None = None) -> ContextFactory:
    """Return a factory building a context from settings and the process cwd."""

    def factory() -> ExecutorContext:
        current = settings or get_settings()
        return ExecutorContext(
            root=current.workspace_root,
            cwd=os.getcwd(),
            is_verbose=current.verbose,
        )

    return factory
