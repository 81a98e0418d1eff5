"""
SIMPLERUN — Logging Tests
==========================
Structured logs are emitted through stdlib with the configured renderer.
"""

from __future__ import annotations

import json
import logging

import pytest
import structlog


@pytest.fixture
def restore_logging():
    """Undo configure_logging() so other tests see default structlog."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_log_output(settings, monkeypatch, capsys, restore_logging):
    """JSON format renders one object per line with app and logger name."""
    monkeypatch.setenv("SIMPLERUN_LOG_FORMAT", "json")
    from simplerun.core.config import get_settings
    from simplerun.core.logging import configure_logging, get_logger

    get_settings.cache_clear()
    configure_logging()
    get_logger("simplerun.test.json").info("runner.start", submitted=3)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "runner.start"
    assert payload["submitted"] == 3
    assert payload["app"] == "simplerun"
    assert payload["logger"] == "simplerun.test.json"
    assert payload["level"] == "info"
    assert "timestamp" in payload


def test_run_context_is_merged(settings, monkeypatch, capsys, restore_logging):
    """Values bound with structlog.contextvars appear on every entry."""
    monkeypatch.setenv("SIMPLERUN_LOG_FORMAT", "json")
    from simplerun.core.config import get_settings
    from simplerun.core.logging import configure_logging, get_logger

    get_settings.cache_clear()
    configure_logging()
    with structlog.contextvars.bound_contextvars(run_id="abc123"):
        get_logger("simplerun.test.ctx").info("runner.round_start", round=1)

    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["run_id"] == "abc123"


def test_log_level_applied(settings, restore_logging):
    """The root logger level follows settings."""
    from simplerun.core.logging import configure_logging

    configure_logging()
    assert logging.getLogger().level == logging.DEBUG


def test_console_format(settings, capsys, restore_logging):
    """Console renderer is selected when configured."""
    from simplerun.core.logging import configure_logging, get_logger

    configure_logging()
    get_logger("simplerun.test.console").warning("runner.stalled", remaining=["a:build"])

    out = capsys.readouterr().out
    assert "runner.stalled" in out
    assert "a:build" in out
