"""Short-link operations: input validation and the service facade."""

from dwz_mcp.core.shortlinks.service import ShortLinkService
from dwz_mcp.core.shortlinks.validation import (
    BatchCreateShortUrlsParams,
    CreateShortUrlParams,
    ListShortUrlsParams,
    ShortCode,
    ShortLinkId,
    UpdateShortUrlParams,
    normalize_url,
    validate_params,
)

__all__ = [
    "BatchCreateShortUrlsParams",
    "CreateShortUrlParams",
    "ListShortUrlsParams",
    "ShortCode",
    "ShortLinkId",
    "ShortLinkService",
    "UpdateShortUrlParams",
    "normalize_url",
    "validate_params",
]
