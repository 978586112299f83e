"""Input models for short-link operations.

Each operation validates its raw arguments against one of these pydantic
models before any request is built. Unknown fields are ignored. URLs are
normalized (``https://`` defaulted) before they are checked for being
absolute, so ``"example.com"`` is accepted as ``"https://example.com"``.

A failed validation raises ``pydantic.ValidationError``, which the error
classifier turns into a ValidationError with one entry per invalid field.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dwz_mcp.core.shortlinks.endpoints import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_BATCH_URLS,
    MAX_PAGE_SIZE,
)

DOMAIN_PATTERN = r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
CUSTOM_CODE_PATTERN = r"^[a-zA-Z0-9]+$"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalize_url(url: Any) -> Any:
    """Default a missing scheme to ``https://``.

    Non-strings and empty strings are returned unchanged. Otherwise the value
    is stripped and ``https://`` is prepended unless it already starts with
    ``http://`` or ``https://`` (case-insensitive). Idempotent.

    Example:
        >>> normalize_url("example.com")
        'https://example.com'
        >>> normalize_url("http://x.com")
        'http://x.com'
    """
    if not isinstance(url, str) or not url:
        return url
    trimmed = url.strip()
    if _SCHEME_RE.match(trimmed):
        return trimmed
    return f"https://{trimmed}"


def _check_absolute_url(url: str) -> str:
    if any(ch.isspace() for ch in url):
        raise ValueError("must be a valid URL without whitespace")
    parts = urlsplit(url)
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        raise ValueError("must be a valid absolute http(s) URL")
    return url


def _reject_bool_id(value: Any) -> Any:
    # bool is an int subclass; True must not address link 1
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    return value


def _check_iso_datetime(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ValueError("must be an ISO 8601 date-time") from None
    return value


class _OperationParams(BaseModel):
    """Base for operation inputs: unknown fields are dropped."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class ShortLinkId(_OperationParams):
    id: int = Field(gt=0)

    @field_validator("id", mode="before")
    @classmethod
    def _id_not_bool(cls, value: Any) -> Any:
        return _reject_bool_id(value)


class ShortCode(_OperationParams):
    """Code segment of a short URL, as used by the preview endpoint."""

    code: str = Field(min_length=1)

    @field_validator("code")
    @classmethod
    def _code_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class CreateShortUrlParams(_OperationParams):
    original_url: str
    domain: str = Field(pattern=DOMAIN_PATTERN)
    title: str = Field(min_length=1, max_length=200)
    custom_code: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=CUSTOM_CODE_PATTERN)
    description: Optional[str] = Field(default=None, max_length=500)
    expire_at: Optional[str] = None

    @field_validator("custom_code", "description", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return _reject_null(value)

    @field_validator("original_url", mode="before")
    @classmethod
    def _normalize_original_url(cls, value: Any) -> Any:
        return normalize_url(value)

    @field_validator("original_url")
    @classmethod
    def _absolute_original_url(cls, value: str) -> str:
        return _check_absolute_url(value)

    @field_validator("expire_at")
    @classmethod
    def _iso_expire_at(cls, value: Optional[str]) -> Optional[str]:
        return _check_iso_datetime(value)


class UpdateShortUrlParams(_OperationParams):
    id: int = Field(gt=0)
    original_url: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    expire_at: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_not_bool(cls, value: Any) -> Any:
        return _reject_bool_id(value)

    # Only expire_at may be cleared with an explicit null
    @field_validator("original_url", "title", "description", "is_active", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return _reject_null(value)

    @field_validator("original_url", mode="before")
    @classmethod
    def _normalize_original_url(cls, value: Any) -> Any:
        return normalize_url(value)

    @field_validator("original_url")
    @classmethod
    def _absolute_original_url(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_absolute_url(value)

    @field_validator("expire_at")
    @classmethod
    def _iso_expire_at(cls, value: Optional[str]) -> Optional[str]:
        return _check_iso_datetime(value)

    @model_validator(mode="after")
    def _require_update_field(self) -> "UpdateShortUrlParams":
        if not (self.model_fields_set - {"id"}):
            raise ValueError("at least one field to update is required")
        return self


class ListShortUrlsParams(_OperationParams):
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    domain: Optional[str] = None
    keyword: Optional[str] = Field(default=None, max_length=100)

    @field_validator("domain")
    @classmethod
    def _domain_pattern(cls, value: Optional[str]) -> Optional[str]:
        # Empty means "no filter"
        if value and not re.match(DOMAIN_PATTERN, value):
            raise ValueError(f"must match pattern {DOMAIN_PATTERN}")
        return value

    def query_params(self) -> Dict[str, Any]:
        """Query string for the list request; empty filters are omitted."""
        params: Dict[str, Any] = {"page": self.page, "page_size": self.page_size}
        if self.domain:
            params["domain"] = self.domain
        if self.keyword:
            params["keyword"] = self.keyword
        return params


class BatchCreateShortUrlsParams(_OperationParams):
    urls: List[str] = Field(min_length=1, max_length=MAX_BATCH_URLS)
    domain: str = Field(pattern=DOMAIN_PATTERN)

    @field_validator("urls", mode="before")
    @classmethod
    def _normalize_urls(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [normalize_url(url) for url in value]
        return value

    @field_validator("urls")
    @classmethod
    def _absolute_urls(cls, value: List[str]) -> List[str]:
        for index, url in enumerate(value):
            try:
                _check_absolute_url(url)
            except ValueError as e:
                raise ValueError(f"urls[{index}] {e}") from None
        return value


def validate_params(model: Type[ModelT], data: Optional[Mapping[str, Any]]) -> ModelT:
    """Validate raw operation arguments against *model*.

    Raises:
        pydantic.ValidationError: With one error per invalid field.
    """
    return model.model_validate(dict(data or {}))
