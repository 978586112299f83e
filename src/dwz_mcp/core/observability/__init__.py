"""Observability helpers: audit events, redaction and tool decorators."""

from dwz_mcp.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)
from dwz_mcp.core.observability.decorators import mcp_tool
from dwz_mcp.core.observability.redaction import redact_headers, redact_secrets

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
    "mcp_tool",
    "redact_headers",
    "redact_secrets",
]
