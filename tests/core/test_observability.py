"""Tests for redaction, audit logging, context and the tool decorator."""

import logging

import pytest

from dwz_mcp.core.context import generate_correlation_id, get_correlation_id, request_context
from dwz_mcp.core.observability import AuditEventType, audit_log, mcp_tool, redact_headers, redact_secrets

AUDIT_LOGGER = "dwz_mcp.core.observability.audit.audit"


class TestRedaction:
    """Tests for secret redaction."""

    def test_bearer_token(self):
        assert redact_secrets("Authorization: Bearer abcdef123456") == "Authorization: Bearer ****"

    def test_api_key_assignment(self):
        assert "topsecret99" not in redact_secrets("api_key=topsecret99")

    def test_plain_text_untouched(self):
        assert redact_secrets("short link not found") == "short link not found"

    def test_empty(self):
        assert redact_secrets("") == ""

    def test_headers(self):
        headers = {"Authorization": "Bearer x", "User-Agent": "dwz-mcp/0.3.0"}
        assert redact_headers(headers) == {"Authorization": "****", "User-Agent": "dwz-mcp/0.3.0"}


class TestContext:
    """Tests for correlation id propagation."""

    def test_outside_request(self):
        assert get_correlation_id() == ""

    def test_request_context_binds_and_resets(self):
        with request_context("req_1") as corr_id:
            assert corr_id == "req_1"
            assert get_correlation_id() == "req_1"
        assert get_correlation_id() == ""

    def test_generated_ids_use_prefix(self):
        assert generate_correlation_id(prefix="tool").startswith("tool_")


class TestAuditLog:
    """Tests for audit_log."""

    def test_known_event(self, caplog):
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER):
            audit_log("request_retry", operation="list_domains", attempt=1)
        record = caplog.records[-1]
        assert record.getMessage() == "AUDIT: request_retry"
        assert record.audit["details"]["operation"] == "list_domains"

    def test_unknown_event_falls_back(self, caplog):
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER):
            audit_log("something_else", x=1)
        record = caplog.records[-1]
        assert record.audit["event_type"] == AuditEventType.TOOL_INVOCATION.value
        assert record.audit["details"]["original_event_type"] == "something_else"

    def test_correlation_id_attached(self, caplog):
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER):
            with request_context("req_corr"):
                audit_log("config_loaded")
        assert caplog.records[-1].audit["correlation_id"] == "req_corr"


class TestMcpToolDecorator:
    """Tests for the mcp_tool decorator."""

    @pytest.mark.asyncio
    async def test_establishes_correlation_id(self):
        seen = []

        @mcp_tool(tool_name="probe")
        async def probe():
            seen.append(get_correlation_id())
            return {"success": True, "data": None}

        await probe()
        assert seen[0].startswith("tool_")
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_failed_envelope_audited_as_failure(self, caplog):
        @mcp_tool(tool_name="failing")
        async def failing():
            return {"success": False, "error": {"message": "nope"}}

        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER):
            result = await failing()

        assert result["success"] is False
        details = caplog.records[-1].audit["details"]
        assert details["tool"] == "failing"
        assert details["success"] is False
        assert details["error"] == "nope"

    @pytest.mark.asyncio
    async def test_preserves_signature_metadata(self):
        @mcp_tool()
        async def named_tool(x: int) -> dict:
            """Doc."""
            return {"success": True, "data": x}

        assert named_tool.__name__ == "named_tool"
        assert named_tool.__doc__ == "Doc."
        assert (await named_tool(3))["data"] == 3
