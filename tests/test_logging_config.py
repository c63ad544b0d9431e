"""Tests for structlog configuration and the console renderer."""

import io
import json
import logging

import pytest
import structlog

from askwiki.config import settings
from askwiki.logging_config import build_console_renderer, configure_logging, guess_stage


@pytest.fixture
def json_log_stream(monkeypatch):
    monkeypatch.setattr(settings, "LOG_FORMAT", "json")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    configure_logging()
    stream = io.StringIO()
    logging.getLogger("askwiki").handlers[0].setStream(stream)
    yield stream
    monkeypatch.undo()
    configure_logging()


def test_json_mode_emits_one_json_object_per_line(json_log_stream: io.StringIO) -> None:
    structlog.get_logger("askwiki.logging_test").info("pipeline.completed", topic="Rome", duration_ms=12.34567)

    line = json_log_stream.getvalue().strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "pipeline.completed"
    assert record["level"] == "info"
    assert record["logger"] == "askwiki.logging_test"
    assert record["topic"] == "Rome"
    assert record["duration_ms"] == 12.35
    assert "timestamp" in record


@pytest.mark.parametrize(
    ("event", "logger_name", "stage"),
    [
        ("wiki.fetch.completed", "askwiki.utils.wiki_client", "web"),
        ("request.completed", "httpx", "web"),
        ("pipeline.start", "askwiki.core.orchestrator", "pipeline"),
        ("analysis.completed", None, "pipeline"),
        ("request.completed", "askwiki.api", "app"),
    ],
)
def test_guess_stage(event: str, logger_name: str | None, stage: str) -> None:
    assert guess_stage(event, logger_name) == stage


def test_console_renderer_line() -> None:
    renderer = build_console_renderer(show_request_id=False, colorize=False)
    line = renderer(
        None,
        "info",
        {
            "timestamp": "12:00:00",
            "level": "info",
            "event": "wiki.fetch.completed",
            "logger": "askwiki.utils.wiki_client",
            "topic": "Rome",
            "status_code": 200,
            "latency_ms": 1.5,
        },
    )
    assert line == "12:00:00 [WEB] [INFO] wiki.fetch.completed | topic='Rome' status=200 t_ms=1.5"


def test_console_renderer_puts_request_id_first_in_debug() -> None:
    renderer = build_console_renderer(show_request_id=True, colorize=False)
    line = renderer(None, "info", {"event": "request.completed", "path": "/api/query", "request_id": "abc"})
    assert line.endswith("request.completed | request_id='abc' path='/api/query'")
