"""
SIMPLERUN — Configuration Management
=====================================
Validated configuration with environment-based overrides.
All settings are loaded from environment variables with sensible defaults.

Usage:
    from simplerun.core.config import get_settings
    settings = get_settings()
"""

from __future__ import annotations

import os
from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from simplerun.core.exceptions import InvalidConfigurationError


class FailurePolicy(StrEnum):
    """What happens to the dependents of a task that did not succeed."""

    RUN_DEPENDENTS = "run_dependents"
    SKIP_DEPENDENTS = "skip_dependents"


class Settings(BaseSettings):
    """
    Root configuration object.

    All values can be overridden via environment variables prefixed with
    ``SIMPLERUN_``.  Example: ``SIMPLERUN_LOG_FORMAT=console``
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMPLERUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────────────────
    app_name: str = "simplerun"
    workspace_root: str = Field(default_factory=os.getcwd)
    verbose: bool = False

    # ── Scheduling ───────────────────────────────────────────────────────
    failure_policy: FailurePolicy = FailurePolicy.RUN_DEPENDENTS

    # ── Logging ──────────────────────────────────────────────────────────
    log_level: str = Field(
        default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="json", pattern=r"^(json|console)$")

    def model_post_init(self, __context: Any) -> None:
        """Honour the ``NX_VERBOSE_LOGGING=true`` convention."""
        super().model_post_init(__context)
        if os.environ.get("NX_VERBOSE_LOGGING") == "true":
            self.verbose = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the singleton Settings instance.

    Cached so environment is read exactly once per process lifetime.
    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise InvalidConfigurationError(str(exc)) from exc
