"""Shared fixtures for dwz-mcp tests.

The remote short-link API is replaced by ``FakeRemote``, an in-memory
handler mounted on ``httpx.MockTransport``. Backoff sleeps are recorded
instead of awaited, and jitter uses a seeded RNG, so retry tests are
instant and deterministic.
"""

import json
import random
import re
from typing import Any, Dict, List, Optional

import httpx
import pytest

from dwz_mcp.config import ServerConfig
from dwz_mcp.core.http_client import HttpClient
from dwz_mcp.core.shortlinks import ShortLinkService

BASE_URL = "https://api.dwz.test"
API_KEY = "sk-test-0123456789abcdef"


def envelope(data: Any = None, *, code: int = 0, message: str = "ok") -> Dict[str, Any]:
    """Build a remote ``{code, message, data}`` body."""
    return {"code": code, "message": message, "data": data}


class FakeRemote:
    """In-memory stand-in for the remote short-link API.

    Responses queued in ``scripted`` are returned first, in order; after
    that requests are routed to a tiny in-memory implementation of the API.
    Every request received is appended to ``requests``.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.scripted: List[Any] = []
        self.links: Dict[int, Dict[str, Any]] = {}
        self.domains: List[Dict[str, Any]] = [
            {"id": 1, "domain": "dwz.test", "is_active": True},
            {"id": 2, "domain": "old.test", "is_active": False},
        ]
        self._next_id = 1

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.scripted:
            scripted = self.scripted.pop(0)
            if isinstance(scripted, Exception):
                raise scripted
            return scripted
        return self.route(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        method = request.method

        if method == "POST" and path == "/api/v1/shortlinks":
            return httpx.Response(200, json=envelope(self._create(json.loads(request.content))))

        if method == "POST" and path == "/api/v1/shortlinks/batch":
            body = json.loads(request.content)
            created = [self._create({"original_url": url, "domain": body["domain"], "title": url}) for url in body["urls"]]
            return httpx.Response(200, json=envelope({"success": created, "failed": []}))

        match = re.fullmatch(r"/api/v1/shortlinks/(\d+)", path)
        if match:
            link_id = int(match.group(1))
            if link_id not in self.links:
                return httpx.Response(404, json={"code": 404, "message": f"short link {link_id} not found"})
            if method == "GET":
                return httpx.Response(200, json=envelope(self.links[link_id]))
            if method == "PUT":
                self.links[link_id].update(
                    {k: v for k, v in json.loads(request.content).items() if k != "id"}
                )
                return httpx.Response(200, json=envelope(self.links[link_id]))
            if method == "DELETE":
                del self.links[link_id]
                return httpx.Response(200, json=envelope(None))

        if method == "GET" and path == "/api/v1/short_links":
            page = int(request.url.params.get("page", "1"))
            size = int(request.url.params.get("page_size", "10"))
            items = list(self.links.values())
            start = (page - 1) * size
            return httpx.Response(
                200,
                json=envelope({"list": items[start : start + size], "total": len(items), "page": page, "size": size}),
            )

        match = re.fullmatch(r"/api/v1/preview/([^/]+)", path)
        if match and method == "GET":
            for record in self.links.values():
                if record["short_code"] == match.group(1):
                    return httpx.Response(200, json=envelope(record))
            return httpx.Response(404, json={"code": 404, "message": f"short code {match.group(1)} not found"})

        if method == "GET" and path == "/api/v1/domains":
            return httpx.Response(200, json=envelope({"list": self.domains}))

        return httpx.Response(404, json={"code": 404, "message": "no such route"})

    def _create(self, body: Dict[str, Any]) -> Dict[str, Any]:
        link_id = self._next_id
        self._next_id += 1
        code = body.get("custom_code") or f"c{link_id:05d}"
        record = {
            "id": link_id,
            "short_code": code,
            "short_url": f"https://{body['domain']}/{code}",
            "original_url": body["original_url"],
            "title": body.get("title"),
            "description": body.get("description"),
            "domain": body["domain"],
            "expire_at": body.get("expire_at"),
            "is_active": True,
            "click_count": 0,
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-01T00:00:00Z",
        }
        self.links[link_id] = record
        return record


def make_config(**overrides: Any) -> ServerConfig:
    values: Dict[str, Any] = {
        "base_url": BASE_URL,
        "api_key": API_KEY,
        "server_name": "dwz-mcp",
        "server_version": "0.3.0",
    }
    values.update(overrides)
    return ServerConfig(**values)


def make_service(
    remote: FakeRemote,
    *,
    config: Optional[ServerConfig] = None,
    sleep_times: Optional[List[float]] = None,
    observer: Any = None,
) -> ShortLinkService:
    """Build a ShortLinkService whose HTTP client talks to *remote*."""
    recorded = sleep_times if sleep_times is not None else []

    async def fake_sleep(seconds: float) -> None:
        recorded.append(seconds)

    cfg = config or make_config()
    client = HttpClient(
        cfg,
        transport=httpx.MockTransport(remote),
        sleep_func=fake_sleep,
        rng=random.Random(42),
        observer=observer,
    )
    return ShortLinkService(cfg, http_client=client)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def sleep_times():
    return []


@pytest.fixture
def service(config, remote, sleep_times):
    return make_service(remote, config=config, sleep_times=sleep_times)
