"""Resource paths of the remote short-link API, relative to ``/api/{version}``."""

from urllib.parse import quote

SHORTLINKS = "/shortlinks"
SHORTLINKS_BATCH = "/shortlinks/batch"
SHORTLINKS_LIST = "/short_links"
DOMAINS = "/domains"
PREVIEW = "/preview"

# Largest batch the remote service accepts in one request.
MAX_BATCH_URLS = 50

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def shortlink(link_id: int) -> str:
    return f"{SHORTLINKS}/{link_id}"


def preview(code: str) -> str:
    return f"{PREVIEW}/{quote(code, safe='')}"
