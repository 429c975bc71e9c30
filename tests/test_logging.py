"""Tests for structured logging helpers."""

import pytest
import structlog

from shared.logging import REDACTED, redact_sensitive, request_context


class TestRedaction:
    """Tests for the credential redaction processor."""

    def test_sensitive_keys_are_masked(self):
        """Test credential fields are replaced before rendering."""
        event = {
            "event": "Azure clients created",
            "client_id": "app-id",
            "client_secret": "s3cr3t",
            "Authorization": "Bearer abc",
        }

        redacted = redact_sensitive(None, "info", event)

        assert redacted["client_id"] == "app-id"
        assert redacted["client_secret"] == REDACTED
        assert redacted["Authorization"] == REDACTED
        assert redacted["event"] == "Azure clients created"

    def test_nested_mappings_are_masked(self):
        """Test redaction reaches into nested arguments."""
        event = {"event": "call", "arguments": {"resourceGroup": "rg1", "token": "t"}}

        redacted = redact_sensitive(None, "debug", event)

        assert redacted["arguments"] == {"resourceGroup": "rg1", "token": REDACTED}
        assert event["arguments"]["token"] == "t"


class TestRequestContext:
    """Tests for per-request context binding."""

    def test_binds_request_id_and_clears(self):
        """Test a request id and extra context are bound only inside the block."""
        structlog.contextvars.clear_contextvars()

        with request_context(http_method="POST") as request_id:
            bound = structlog.contextvars.get_contextvars()
            assert bound["request_id"] == request_id
            assert bound["http_method"] == "POST"

        assert "request_id" not in structlog.contextvars.get_contextvars()

    def test_cleared_when_body_raises(self):
        """Test bound values do not leak after an exception."""
        structlog.contextvars.clear_contextvars()

        with pytest.raises(RuntimeError):
            with request_context(http_method="GET"):
                raise RuntimeError("boom")

        assert structlog.contextvars.get_contextvars() == {}

    def test_each_request_gets_a_new_id(self):
        """Test request ids are unique per request."""
        with request_context() as first:
            pass
        with request_context() as second:
            pass

        assert first != second
