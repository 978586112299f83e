"""Pooled HTTP client for the remote short-link service.

``HttpClient`` owns one ``httpx.AsyncClient`` (connection pool, timeout and
default headers) shared by every operation of a service instance. Each call
runs through :func:`execute_with_retry`, so callers only ever see a decoded
body or a ``ClassifiedError``.
"""

from __future__ import annotations

import functools
import logging
import random
from typing import Any, Dict, Optional

import httpx

from dwz_mcp.config.server import ServerConfig
from dwz_mcp.core.errors.classifier import classify
from dwz_mcp.core.observability.redaction import redact_headers
from dwz_mcp.core.resilience import AttemptObserver, SleepFunc, execute_with_retry

logger = logging.getLogger(__name__)


class HttpClient:
    """Authenticated JSON client with bounded retry.

    Args:
        config: Server configuration (timeout, retry limits, headers).
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        sleep_func: Injectable sleep used between retries.
        rng: Injectable Random instance for backoff jitter.
        observer: Callback receiving an ``AttemptRecord`` for every attempt.
    """

    def __init__(
        self,
        config: ServerConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep_func: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
        observer: Optional[AttemptObserver] = None,
    ):
        self._config = config
        self._sleep_func = sleep_func
        self._rng = rng
        self._observer = observer
        self._client = httpx.AsyncClient(
            timeout=config.request_timeout_seconds,
            headers=config.default_headers(),
            transport=transport,
            follow_redirects=True,
        )
        logger.debug(
            "HTTP client ready: timeout=%sms headers=%s",
            config.request_timeout_ms,
            redact_headers(config.default_headers()),
        )

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        resource_id: Optional[Any] = None,
        operation: Optional[str] = None,
    ) -> Any:
        """Issue a request with retry and return the decoded body.

        Redirects are followed; a final status of 200-399 is success. The body is decoded as JSON,
        falling back to raw text when it is not JSON.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            params: Query parameters.
            json: JSON request body.
            resource_id: Id of the targeted resource, used to enrich
                NotFoundError details.
            operation: Label for logs and audit events.

        Raises:
            ClassifiedError: When the request ultimately fails.
        """
        label = operation or f"{method} {url}"

        async def make_request() -> Any:
            """Inner function that makes one HTTP attempt."""
            response = await self._client.request(method, url, params=params, json=json)
            logger.debug("%s %s -> %d", method, response.request.url, response.status_code)

            if not 200 <= response.status_code < 400:
                raise httpx.HTTPStatusError(
                    f"{method} {url} returned HTTP {response.status_code}",
                    request=response.request,
                    response=response,
                )

            return _decode_body(response)

        return await execute_with_retry(
            make_request,
            max_retries=self._config.max_retries,
            retry_delay_ms=self._config.retry_delay_ms,
            classify_error=functools.partial(classify, resource_id=resource_id),
            sleep_func=self._sleep_func,
            rng=self._rng,
            observer=self._observer,
            operation=label,
        )

    async def get(self, url: str, *, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return await self.request("GET", url, params=params, **kwargs)

    async def post(self, url: str, *, json: Optional[Any] = None, **kwargs: Any) -> Any:
        return await self.request("POST", url, json=json, **kwargs)

    async def put(self, url: str, *, json: Optional[Any] = None, **kwargs: Any) -> Any:
        return await self.request("PUT", url, json=json, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        """Release the connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
