"""Runtime layer: HTTP transport and pagination."""

from .rest import CanvasTransport, HTTPClient, Paginator, fetch_all_pages, parse_link_header

__all__ = [
    "CanvasTransport",
    "HTTPClient",
    "Paginator",
    "fetch_all_pages",
    "parse_link_header",
]
