"""
SIMPLERUN — Task Graph Snapshots
=================================
Immutable task graph and the pure reducer that shrinks it between rounds.

Each scheduling round works on one ``TaskGraph`` snapshot.  When the round
finishes, ``reduce_graph`` derives the next snapshot: completed tasks are
removed, dependency lists are pruned, and roots are recomputed.  A snapshot
is never mutated in place.

Usage:
    graph = TaskGraph.from_tasks(tasks, {"app:test": ["app:build"]})
    graph = reduce_graph(graph, {"app:build"})
    assert graph.roots == ("app:test",)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from simplerun.core.exceptions import GraphValidationError
from simplerun.core.task_types import Task


@dataclass(frozen=True)
class TaskGraph:
    """
    One snapshot of the task graph.

    Attributes
    ----------
    tasks
        Task id → Task.
    dependencies
        Task id → ordered ids it still waits on.
    roots
        Ids whose dependency list is empty, in ``tasks`` order.
    """

    tasks: Mapping[str, Task]
    dependencies: Mapping[str, tuple[str, ...]]
    roots: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", MappingProxyType(dict(self.tasks)))
        object.__setattr__(
            self,
            "dependencies",
            MappingProxyType(
                {tid: tuple(deps) for tid, deps in self.dependencies.items()}
            ),
        )
        object.__setattr__(self, "roots", tuple(self.roots))

    @classmethod
    def from_tasks(
        cls,
        tasks: Iterable[Task],
        dependencies: Mapping[str, Sequence[str]] | None = None,
    ) -> TaskGraph:
        """Build a graph from tasks and edges, computing the roots."""
        dependencies = dependencies or {}
        task_map = {task.id: task for task in tasks}
        deps = {tid: tuple(dependencies.get(tid, ())) for tid in task_map}
        roots = tuple(tid for tid in task_map if not deps[tid])
        return cls(tasks=task_map, dependencies=deps, roots=roots)

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.tasks

    def validate(self) -> None:
        """
        Check the structural invariants of this snapshot.

        Raises ``GraphValidationError`` on the first violation found.
        """
        if set(self.dependencies) != set(self.tasks):
            raise GraphValidationError(
                "Dependency keys do not match task ids: "
                f"{sorted(set(self.dependencies) ^ set(self.tasks))}"
            )
        for root in self.roots:
            if root not in self.tasks:
                raise GraphValidationError(
                    f"Root {root!r} is not a task", task_id=root
                )
            if self.dependencies[root]:
                raise GraphValidationError(
                    f"Root {root!r} still has dependencies "
                    f"{list(self.dependencies[root])}",
                    task_id=root,
                )
        for task_id, deps in self.dependencies.items():
            missing = [dep for dep in deps if dep not in self.tasks]
            if missing:
                raise GraphValidationError(
                    f"Task {task_id!r} depends on unknown task(s) {missing}",
                    task_id=task_id,
                )


def reduce_graph(graph: TaskGraph, completed_ids: Iterable[str]) -> TaskGraph:
    """
    Return the next snapshot with ``completed_ids`` removed.

    Completed ids that are not in the graph are ignored.  Remaining tasks
    and their dependency entries keep their relative order.
    """
    completed = frozenset(completed_ids)
    tasks = {
        tid: task for tid, task in graph.tasks.items() if tid not in completed
    }
    dependencies = {
        tid: tuple(
            dep for dep in graph.dependencies.get(tid, ()) if dep not in completed
        )
        for tid in tasks
    }
    roots = tuple(tid for tid in tasks if not dependencies[tid])
    return TaskGraph(tasks=tasks, dependencies=dependencies, roots=roots)
