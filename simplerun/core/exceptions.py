"""
SIMPLERUN — Centralized Exception Taxonomy
===========================================
Category-based exception hierarchy with a severity property.

Recovery rules:
- ExecutorError is recovered by the runner (the task is marked ``failure``)
- GraphError is raised only by explicit validation; the runner itself
  treats an inconsistent graph as a stall
- ConfigurationError is raised while loading settings

Usage:
    from simplerun.core.exceptions import ExecutorNotFoundError

    raise ExecutorNotFoundError("No executor for 'build'", task_id="app:build")
"""

from __future__ import annotations

from enum import StrEnum


class ErrorSeverity(StrEnum):
    """Error severity levels. LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SimpleRunError(Exception):
    """
    Base exception for all SIMPLERUN-specific errors.

    Carries a ``severity``, a stable ``error_code`` and, where known, the
    ``task_id`` the error relates to.
    """

    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    error_code: str = "SIMPLERUN_ERROR"

    def __init__(self, message: str, *, task_id: str | None = None) -> None:
        self.task_id = task_id
        super().__init__(message)

    def __repr__(self) -> str:
        parts = [
            f"{self.__class__.__name__}(",
            f"error_code={self.error_code!r}, ",
            f"severity={self.severity.value!r}",
        ]
        if self.task_id:
            parts.append(f", task_id={self.task_id!r}")
        parts.append(")")
        return "".join(parts)


# ── Graph Exceptions ──────────────────────────────────────────────────────


class GraphError(SimpleRunError):
    """Errors in the task graph model."""

    error_code = "GRAPH_ERROR"


class GraphValidationError(GraphError):
    """Raised when a task graph violates its structural invariants."""

    severity = ErrorSeverity.HIGH
    error_code = "GRAPH_VALIDATION_ERROR"


# ── Executor Exceptions ───────────────────────────────────────────────────


class ExecutorError(SimpleRunError):
    """Errors raised while invoking a task executor."""

    error_code = "EXECUTOR_ERROR"


class ExecutorNotFoundError(ExecutorError):
    """Raised when no executor is registered for a task's target."""

    error_code = "EXECUTOR_NOT_FOUND_ERROR"


class ExecutorProtocolError(ExecutorError):
    """Raised when an executor breaks the event stream contract."""

    severity = ErrorSeverity.HIGH
    error_code = "EXECUTOR_PROTOCOL_ERROR"


# ── Configuration Exceptions ──────────────────────────────────────────────


class ConfigurationError(SimpleRunError):
    """Errors in configuration (missing settings, invalid values)."""

    severity = ErrorSeverity.HIGH
    error_code = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    error_code = "INVALID_CONFIGURATION_ERROR"
