"""Tests for logging helpers."""

from unittest.mock import MagicMock

from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from taskboard import logger as logger_module


def test_select_renderer_uses_console_in_debug(test_settings) -> None:
    settings = test_settings.model_copy(update={"debug": True})
    assert isinstance(logger_module._select_renderer(settings), ConsoleRenderer)


def test_select_renderer_uses_json_in_production(test_settings) -> None:
    assert isinstance(logger_module._select_renderer(test_settings), JSONRenderer)


def test_log_exception_includes_error_context() -> None:
    log = MagicMock()
    exc = ValueError("bad value")

    logger_module.log_exception(log, exc, "Parsing failed", task_id="t1")

    log.error.assert_called_once_with(
        "Parsing failed",
        exc_info=exc,
        error="bad value",
        error_type="ValueError",
        error_module="builtins",
        task_id="t1",
    )


def test_log_exception_without_traceback_uses_level() -> None:
    log = MagicMock()

    logger_module.log_exception(log, RuntimeError("boom"), "Retry skipped", level="warning", include_traceback=False)

    log.warning.assert_called_once()
    assert "exc_info" not in log.warning.call_args.kwargs
