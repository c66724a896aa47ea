"""Tests for logging utilities"""

import json
import logging

import structlog

from wine_recommender.utils.logging import (
    ServiceJsonFormatter,
    bind_request_context,
    clear_request_context,
)


def test_service_json_formatter():
    """Test that stdlib records are rendered as tagged JSON"""

    formatter = ServiceJsonFormatter('%(name)s %(message)s', version="1.2.3")
    record = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, "GET /health", None, None)

    data = json.loads(formatter.format(record))

    assert data["message"] == "GET /health"
    assert data["service"] == "wine-recommender"
    assert data["version"] == "1.2.3"
    assert data["level"] == "info"


def test_request_context_binding():
    """Test binding and clearing request-scoped values"""

    clear_request_context()
    bind_request_context(session_id="tab-1")

    assert structlog.contextvars.get_contextvars() == {"session_id": "tab-1"}

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}
