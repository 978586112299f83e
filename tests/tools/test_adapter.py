"""Tests for the tool adapter."""

import httpx
import pytest

from dwz_mcp.core.errors import ClassifiedError, ErrorKind
from dwz_mcp.tools import invoke


def assert_envelope(payload):
    """Exactly one of data/error is present, matching success."""
    assert set(payload) in ({"success", "data", "meta"}, {"success", "error", "meta"})
    if payload["success"]:
        assert "data" in payload and "error" not in payload
    else:
        assert "error" in payload and "data" not in payload
        assert set(payload["error"]) == {"kind", "code", "message", "details"}


class TestInvoke:
    """Tests for invoke."""

    @pytest.mark.asyncio
    async def test_success(self):
        async def op(args):
            return {"echo": args["x"]}

        payload = await invoke(op, {"x": 1}, operation="echo")
        assert_envelope(payload)
        assert payload == {
            "success": True,
            "data": {"echo": 1},
            "meta": payload["meta"],
        }
        assert payload["meta"]["operation"] == "echo"

    @pytest.mark.asyncio
    async def test_none_data_is_success(self):
        async def op(args):
            return None

        payload = await invoke(op, {})
        assert_envelope(payload)
        assert payload["success"] is True
        assert payload["data"] is None

    @pytest.mark.asyncio
    async def test_classified_error(self):
        async def op(args):
            raise ClassifiedError(ErrorKind.NOT_FOUND, "missing", details={"id": 5})

        payload = await invoke(op, {}, operation="get_url_info")
        assert_envelope(payload)
        assert payload["error"] == {
            "kind": "NotFoundError",
            "code": "RESOURCE_NOT_FOUND",
            "message": "missing",
            "details": {"id": 5},
        }

    @pytest.mark.parametrize(
        "exc,kind",
        [
            (RuntimeError("boom"), "UnknownError"),
            (httpx.ReadTimeout("slow"), "TimeoutError"),
            (AttributeError("'list' object has no attribute 'get'"), "UnknownError"),
        ],
    )
    @pytest.mark.asyncio
    async def test_unclassified_errors_classified(self, exc, kind):
        async def op(args):
            raise exc

        payload = await invoke(op, {})
        assert_envelope(payload)
        assert payload["success"] is False
        assert payload["error"]["kind"] == kind

    @pytest.mark.asyncio
    async def test_function_name_used_as_default_operation(self):
        async def list_things(args):
            return []

        payload = await invoke(list_things)
        assert payload["meta"]["operation"] == "list_things"
