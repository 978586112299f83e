"""Short-link MCP tools.

``TOOL_OPERATIONS`` is the fixed registry of the six tools this server
exposes. Each entry formats the service result into the payload returned to
the agent. ``dispatch_tool`` resolves a registry name and runs it through the
tool adapter; ``register_shortlink_tools`` publishes typed FastMCP tools that
delegate to it.
"""

import functools
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import StrictInt

from dwz_mcp.core.observability import mcp_tool
from dwz_mcp.core.shortlinks import ShortLinkId, ShortLinkService, validate_params
from dwz_mcp.tools.adapter import invoke

logger = logging.getLogger(__name__)

SHORT_LINK_FIELDS = (
    "id",
    "short_code",
    "short_url",
    "original_url",
    "title",
    "description",
    "domain",
    "expire_at",
    "is_active",
    "click_count",
    "created_at",
    "updated_at",
)


# ---------------------------------------------------------------------------
# Result formatting
# ---------------------------------------------------------------------------


def format_short_link(record: Any) -> Optional[Dict[str, Any]]:
    """Project a remote short-link record onto the published fields."""
    if not isinstance(record, Mapping):
        return None
    return {name: record.get(name) for name in SHORT_LINK_FIELDS}


def _page_count(total: Any, size: Any) -> int:
    try:
        total_count = int(total or 0)
        page_size = int(size or 0)
    except (TypeError, ValueError):
        logger.warning("Unusable pagination from remote service: total=%r size=%r", total, size)
        return 0
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def format_short_link_page(result: Any) -> Dict[str, Any]:
    page = result if isinstance(result, Mapping) else {}
    return {
        "list": list(page.get("list") or []),
        "pagination": {
            "total": page.get("total"),
            "page": page.get("page"),
            "size": page.get("size"),
            "total_pages": _page_count(page.get("total"), page.get("size")),
        },
    }


def format_batch_result(result: Any, requested: int) -> Dict[str, Any]:
    outcome = result if isinstance(result, Mapping) else {}
    succeeded: List[Any] = list(outcome.get("success") or [])
    failed: List[Any] = list(outcome.get("failed") or [])
    return {
        "success": succeeded,
        "failed": failed,
        "summary": {
            "total": requested,
            "success_count": len(succeeded),
            "failed_count": len(failed),
        },
    }


def format_domains(result: Any) -> Dict[str, Any]:
    domains = list(result.get("list") or []) if isinstance(result, Mapping) else []
    active = sum(1 for d in domains if isinstance(d, Mapping) and d.get("is_active"))
    return {
        "domains": domains,
        "summary": {
            "total": len(domains),
            "active": active,
            "inactive": len(domains) - active,
        },
    }


# ---------------------------------------------------------------------------
# Tool operations
# ---------------------------------------------------------------------------


async def _create_short_url(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    return format_short_link(await service.create_short_url(args))


async def _get_url_info(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    return format_short_link(await service.get_url_info(args.get("id")))


async def _list_short_urls(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    return format_short_link_page(await service.list_short_urls(args))


async def _delete_short_url(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    link = validate_params(ShortLinkId, {"id": args.get("id")})
    await service.delete_short_url(link.id)
    return {"id": link.id, "deleted": True}


async def _batch_create_short_urls(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    result = await service.batch_create_short_urls(args)
    return format_batch_result(result, len(args.get("urls") or []))


async def _list_domains(service: ShortLinkService, args: Mapping[str, Any]) -> Any:
    return format_domains(await service.list_domains())


def _list_filters(args: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "filters": {
            "domain": args.get("domain") or None,
            "keyword": args.get("keyword") or None,
        }
    }


@dataclass(frozen=True)
class ToolOperation:
    """One registry entry: a tool name bound to its handler."""

    name: str
    description: str
    handler: Callable[[ShortLinkService, Mapping[str, Any]], Awaitable[Any]]
    meta_builder: Optional[Callable[[Mapping[str, Any]], Dict[str, Any]]] = None


TOOL_OPERATIONS: Dict[str, ToolOperation] = {
    op.name: op
    for op in (
        ToolOperation(
            name="create_short_url",
            description=(
                "Create a new short URL. original_url gets https:// prepended when it has no scheme; "
                "domain and title are required, custom_code/description/expire_at are optional."
            ),
            handler=_create_short_url,
        ),
        ToolOperation(
            name="get_url_info",
            description="Get the details of one short URL by its numeric id.",
            handler=_get_url_info,
        ),
        ToolOperation(
            name="list_short_urls",
            description=(
                "List short URLs with pagination (page defaults to 1, page_size to 10, max 100), "
                "optionally filtered by domain or keyword."
            ),
            handler=_list_short_urls,
            meta_builder=_list_filters,
        ),
        ToolOperation(
            name="delete_short_url",
            description="Delete a short URL by its numeric id. This cannot be undone.",
            handler=_delete_short_url,
        ),
        ToolOperation(
            name="batch_create_short_urls",
            description=(
                "Create short URLs for up to 50 long URLs on one domain. "
                "Per-URL failures are reported in the result, not as an error."
            ),
            handler=_batch_create_short_urls,
        ),
        ToolOperation(
            name="list_domains",
            description="List the domains available for creating short URLs.",
            handler=_list_domains,
        ),
    )
}


async def dispatch_tool(
    service: ShortLinkService,
    name: str,
    args: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Run the registry tool *name* and return its result envelope.

    Raises:
        KeyError: If *name* is not a registered tool. Unknown names are the
            protocol layer's concern and never reach the adapter.
    """
    operation = TOOL_OPERATIONS[name]
    arguments: Mapping[str, Any] = args if args is not None else {}
    logger.info("Tool call: %s", name)
    meta = None
    if operation.meta_builder is not None and isinstance(arguments, Mapping):
        meta = operation.meta_builder(arguments)
    return await invoke(
        functools.partial(operation.handler, service),
        arguments,
        operation=name,
        meta=meta,
    )


def _present(**kwargs: Any) -> Dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


def _publish(mcp: FastMCP, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register a typed tool function under its registry name and description."""
    operation = TOOL_OPERATIONS[name]

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        observed = mcp_tool(tool_name=operation.name)(func)
        return mcp.tool(name=operation.name, description=operation.description)(observed)

    return decorator


def register_shortlink_tools(mcp: FastMCP, service: ShortLinkService) -> None:
    """Register the short-link tools on *mcp*."""

    @_publish(mcp, "create_short_url")
    async def create_short_url(
        original_url: str,
        domain: str,
        title: str,
        custom_code: Optional[str] = None,
        description: Optional[str] = None,
        expire_at: Optional[str] = None,
    ) -> dict:
        return await dispatch_tool(
            service,
            "create_short_url",
            _present(
                original_url=original_url,
                domain=domain,
                title=title,
                custom_code=custom_code,
                description=description,
                expire_at=expire_at,
            ),
        )

    @_publish(mcp, "get_url_info")
    async def get_url_info(id: StrictInt) -> dict:
        return await dispatch_tool(service, "get_url_info", {"id": id})

    @_publish(mcp, "list_short_urls")
    async def list_short_urls(
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        domain: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> dict:
        return await dispatch_tool(
            service,
            "list_short_urls",
            _present(page=page, page_size=page_size, domain=domain, keyword=keyword),
        )

    @_publish(mcp, "delete_short_url")
    async def delete_short_url(id: StrictInt) -> dict:
        return await dispatch_tool(service, "delete_short_url", {"id": id})

    @_publish(mcp, "batch_create_short_urls")
    async def batch_create_short_urls(urls: List[str], domain: str) -> dict:
        return await dispatch_tool(service, "batch_create_short_urls", {"urls": urls, "domain": domain})

    @_publish(mcp, "list_domains")
    async def list_domains() -> dict:
        return await dispatch_tool(service, "list_domains", {})

    logger.debug("Registered short-link tools: %s", ", ".join(TOOL_OPERATIONS))
