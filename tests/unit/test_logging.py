"""Unit tests for structured logging setup."""

import structlog

from accessgraph.logging import configure_logging, get_logger


def test_json_renderer_by_default() -> None:
    configure_logging("INFO")
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_console_renderer() -> None:
    configure_logging("DEBUG", json_output=False)
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_get_logger_returns_bindable_logger() -> None:
    configure_logging("INFO")
    logger = get_logger("accessgraph.test").bind(actor="User#1")
    assert hasattr(logger, "info")
