"""Tests for JSON and text log formatters."""

from __future__ import annotations

import json
import logging

import pytest

from discogs.config import ClientSettings
from discogs.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    setup_logging,
)
from discogs.services.request_context import (
    get_request_id,
    request_id_var,
    request_scope,
)


def _make_record(
    msg: str = "hello", level: int = logging.INFO, **extra
) -> logging.LogRecord:
    record = logging.LogRecord(
        name="discogs.sdk.client",
        level=level,
        pathname="client.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_discogs_logger():
    logger = logging.getLogger("discogs")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_json_output_structure():
    data = json.loads(JSONFormatter().format(_make_record("test message")))
    assert data["level"] == "INFO"
    assert data["logger"] == "discogs.sdk.client"
    assert data["message"] == "test message"
    assert "timestamp" in data


def test_json_includes_request_id():
    with request_scope("abc123def456"):
        data = json.loads(JSONFormatter().format(_make_record("with id")))
    assert data["request_id"] == "abc123def456"


def test_json_excludes_empty_request_id():
    token = request_id_var.set("")
    try:
        data = json.loads(JSONFormatter().format(_make_record("no id")))
        assert "request_id" not in data
    finally:
        request_id_var.reset(token)


def test_json_flattens_extra_fields():
    record = _make_record("GET x -> 200", method="GET", status=200, ratelimit_remaining=24)
    data = json.loads(JSONFormatter().format(record))
    assert data["method"] == "GET"
    assert data["status"] == 200
    assert data["ratelimit_remaining"] == 24


def test_json_exception_formatting():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        record = _make_record("error")
        record.exc_info = sys.exc_info()
    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exception"]


def test_text_format_with_request_id():
    with request_scope("aabbccdd1122eeff"):
        output = TextFormatter().format(_make_record("hello text"))
    assert "[aabbccdd1122]" in output
    assert "hello text" in output


def test_text_format_without_request_id():
    output = TextFormatter().format(_make_record("no rid"))
    assert "[" not in output
    assert "discogs.sdk.client - no rid" in output


def test_text_format_appends_sorted_extras():
    record = _make_record("dispatch", status=404, method="GET")
    assert TextFormatter().format(record).endswith("dispatch method=GET status=404")


def test_request_scope_restores_previous_id():
    assert get_request_id() == ""
    with request_scope("outer") as outer:
        with request_scope() as inner:
            assert get_request_id() == inner
            assert inner != outer
        assert get_request_id() == "outer"
    assert get_request_id() == ""


def test_setup_logging_json(restore_discogs_logger):
    setup_logging("debug", "json")
    logger = restore_discogs_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)


def test_setup_logging_replaces_handler(restore_discogs_logger):
    setup_logging()
    setup_logging("warning", "text")
    logger = restore_discogs_logger
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, TextFormatter)


def test_setup_logging_leaves_root_alone(restore_discogs_logger):
    root_handlers = list(logging.getLogger().handlers)
    setup_logging("info", "json")
    assert logging.getLogger().handlers == root_handlers


def test_configure_logging_from_settings(restore_discogs_logger):
    configure_logging(ClientSettings(_env_file=None, log_level="ERROR", log_format="json"))
    logger = restore_discogs_logger
    assert logger.level == logging.ERROR
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)


def test_sdk_exports_logging_setup():
    from discogs import sdk

    assert sdk.configure_logging is configure_logging
    assert sdk.setup_logging is setup_logging


def test_dispatch_log_carries_request_id(restore_discogs_logger, capsys):
    import httpx

    from discogs.sdk import DiscogsClient

    configure_logging(ClientSettings(_env_file=None, log_level="DEBUG", log_format="json"))
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    with DiscogsClient(ClientSettings(_env_file=None), transport=transport) as c:
        c.request("GET", "users/rick")

    lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]
    dispatch = [entry for entry in lines if entry.get("status") == 200]
    assert len(dispatch) == 1
    assert len(dispatch[0]["request_id"]) == 32
    assert dispatch[0]["method"] == "GET"
