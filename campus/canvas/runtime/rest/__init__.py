"""REST runtime abstractions."""

from .http_client import HTTPClient
from .link_header import next_link, parse_link_header
from .paginator import PageFetcher, Paginator, fetch_all_pages
from .transport import CanvasTransport

__all__ = [
    "HTTPClient",
    "CanvasTransport",
    "PageFetcher",
    "Paginator",
    "fetch_all_pages",
    "next_link",
    "parse_link_header",
]
