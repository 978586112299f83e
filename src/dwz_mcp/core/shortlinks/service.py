"""Short-link operations against the remote service.

``ShortLinkService`` exposes one coroutine per management capability. Each
operation validates and normalizes its input, issues the request through the
shared :class:`HttpClient`, and unwraps the remote ``{code, message, data}``
envelope. Every failure surfaces as a ``ClassifiedError``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from dwz_mcp.config.server import ServerConfig
from dwz_mcp.core.errors import (
    ClassifiedError,
    ErrorCode,
    ErrorKind,
    business_error,
    validation_error,
)
from dwz_mcp.core.http_client import HttpClient
from dwz_mcp.core.observability import audit_log
from dwz_mcp.core.shortlinks import endpoints
from dwz_mcp.core.shortlinks.validation import (
    BatchCreateShortUrlsParams,
    CreateShortUrlParams,
    ListShortUrlsParams,
    ModelT,
    ShortCode,
    ShortLinkId,
    UpdateShortUrlParams,
    validate_params,
)

logger = logging.getLogger(__name__)


class ShortLinkService:
    """Facade over the remote short-link API.

    Args:
        config: Server configuration.
        http_client: Optional pre-built client (tests inject one backed by
            ``httpx.MockTransport``). Built from *config* when omitted.
    """

    def __init__(self, config: ServerConfig, http_client: Optional[HttpClient] = None):
        self._config = config
        self._http = http_client or HttpClient(config)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def http_client(self) -> HttpClient:
        return self._http

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_short_url(self, params: Mapping[str, Any]) -> Any:
        """Create a short link (POST /shortlinks)."""
        validated = self._validate(CreateShortUrlParams, params)
        logger.info(
            "Creating short link: original_url=%s domain=%s custom_code=%s",
            validated.original_url,
            validated.domain,
            validated.custom_code,
        )
        body = await self._http.post(
            self._config.api_url(endpoints.SHORTLINKS),
            json=validated.model_dump(mode="json", exclude_none=True),
            operation="create_short_url",
        )
        result = self._unwrap(body, "create_short_url")
        if isinstance(result, dict):
            logger.info("Short link created: id=%s short_url=%s", result.get("id"), result.get("short_url"))
        return result

    async def get_url_info(self, link_id: Any) -> Any:
        """Fetch one short link (GET /shortlinks/{id})."""
        validated = self._validate(ShortLinkId, {"id": link_id})
        logger.info("Fetching short link %s", validated.id)
        body = await self._http.get(
            self._config.api_url(endpoints.shortlink(validated.id)),
            resource_id=validated.id,
            operation="get_url_info",
        )
        return self._unwrap(body, "get_url_info")

    async def update_short_url(self, params: Mapping[str, Any]) -> Any:
        """Update fields of a short link (PUT /shortlinks/{id})."""
        validated = self._validate(UpdateShortUrlParams, params)
        payload = validated.model_dump(mode="json", exclude_unset=True)
        logger.info(
            "Updating short link %s: fields=%s",
            validated.id,
            sorted(key for key in payload if key != "id"),
        )
        body = await self._http.put(
            self._config.api_url(endpoints.shortlink(validated.id)),
            json=payload,
            resource_id=validated.id,
            operation="update_short_url",
        )
        return self._unwrap(body, "update_short_url")

    async def delete_short_url(self, link_id: Any) -> Any:
        """Delete a short link (DELETE /shortlinks/{id})."""
        validated = self._validate(ShortLinkId, {"id": link_id})
        logger.info("Deleting short link %s", validated.id)
        body = await self._http.delete(
            self._config.api_url(endpoints.shortlink(validated.id)),
            resource_id=validated.id,
            operation="delete_short_url",
        )
        return self._unwrap(body, "delete_short_url")

    async def batch_create_short_urls(self, params: Mapping[str, Any]) -> Any:
        """Create up to 50 short links in one request (POST /shortlinks/batch).

        Per-item failures are reported by the remote service inside a
        successful envelope and are returned as data, not raised.
        """
        validated = self._validate(BatchCreateShortUrlsParams, params)
        logger.info("Batch creating %d short links on %s", len(validated.urls), validated.domain)
        body = await self._http.post(
            self._config.api_url(endpoints.SHORTLINKS_BATCH),
            json=validated.model_dump(mode="json"),
            operation="batch_create_short_urls",
        )
        result = self._unwrap(body, "batch_create_short_urls")
        if isinstance(result, dict):
            logger.info(
                "Batch create finished: success=%d failed=%d",
                len(result.get("success") or []),
                len(result.get("failed") or []),
            )
        return result

    async def list_short_urls(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List short links (GET /short_links), page 1 / size 10 by default."""
        validated = self._validate(ListShortUrlsParams, params)
        query = validated.query_params()
        logger.info("Listing short links: %s", query)
        body = await self._http.get(
            self._config.api_url(endpoints.SHORTLINKS_LIST),
            params=query,
            operation="list_short_urls",
        )
        return self._unwrap(body, "list_short_urls")

    async def list_domains(self) -> Any:
        """List the domains available for short links (GET /domains)."""
        logger.info("Listing domains")
        body = await self._http.get(
            self._config.api_url(endpoints.DOMAINS),
            operation="list_domains",
        )
        return self._unwrap(body, "list_domains")

    async def preview_short_url(self, code: Any) -> Any:
        """Resolve a short code to its link details (GET /preview/{code})."""
        validated = self._validate(ShortCode, {"code": code})
        logger.info("Previewing short link %s", validated.code)
        body = await self._http.get(
            self._config.api_url(endpoints.preview(validated.code)),
            resource_id=validated.code,
            operation="preview_short_url",
        )
        result = self._unwrap(body, "preview_short_url")
        if isinstance(result, dict):
            logger.info("Preview resolved: %s -> %s", result.get("short_code"), result.get("original_url"))
        return result

    async def check_short_url_exists(self, link_id: Any) -> bool:
        """Return whether a short link exists.

        Raises:
            ClassifiedError: For any failure other than "not found".
        """
        try:
            await self.get_url_info(link_id)
        except ClassifiedError as e:
            if e.code is ErrorCode.RESOURCE_NOT_FOUND:
                return False
            raise
        return True

    async def get_service_status(self) -> Dict[str, Any]:
        """Probe the remote service with a one-item list request.

        Never raises: failures are reported as ``status: "unhealthy"``.
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            await self.list_short_urls({"page": 1, "page_size": 1})
        except ClassifiedError as e:
            logger.warning("Remote service health check failed: %s", e.message)
            return {
                "status": "unhealthy",
                "message": e.message,
                "timestamp": timestamp,
                "error_code": e.code.value,
            }
        return {
            "status": "healthy",
            "message": "Remote short-link service is reachable",
            "timestamp": timestamp,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(model: Type[ModelT], params: Optional[Mapping[str, Any]]) -> ModelT:
        """Validate operation input, raising a classified ValidationError."""
        if params is not None and not isinstance(params, Mapping):
            raise ClassifiedError(
                ErrorKind.VALIDATION,
                "Parameter validation failed: arguments must be an object",
                details=[{"field": "__root__", "message": "must be an object", "value": None}],
            )
        try:
            return validate_params(model, params)
        except PydanticValidationError as e:
            error = validation_error(e)
            logger.info("Rejected %s input: %s", model.__name__, error.message)
            raise error from e

    @staticmethod
    def _unwrap(body: Any, operation: str) -> Any:
        """Unwrap a remote ``{code, message, data}`` envelope.

        Returns ``data`` (possibly None) when ``code == 0``.

        Raises:
            ClassifiedError: BusinessError for a malformed body or non-zero code.
        """
        if not isinstance(body, Mapping):
            raise ClassifiedError(
                ErrorKind.BUSINESS,
                f"{operation}: malformed response from remote service",
                code=ErrorCode.UNKNOWN_ERROR,
                details={"body_type": type(body).__name__},
            )

        code = body.get("code")
        if code != 0:
            error = business_error(code, body.get("message") or f"{operation} failed")
            audit_log(
                "remote_business_error",
                operation=operation,
                remote_code=code,
                code=error.code.value,
            )
            logger.warning("%s rejected by remote service: %s (code=%s)", operation, error.message, code)
            raise error

        data = body.get("data")
        if data is None:
            logger.warning("%s: response carried no data", operation)
            return None
        return data
