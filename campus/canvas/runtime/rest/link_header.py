"""Parser for RFC 5988-style ``Link`` response headers."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from ...core.enums import LinkRel

_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


def parse_link_header(header: str | None) -> Mapping[str, str]:
    """Map pagination relations to URLs.

    Segments that don't look like ``<url>; rel="name"``, or whose relation is
    not one of next/prev/first/last, are skipped. Never raises.

    Args:
        header: Raw ``Link`` header value, or None

    Returns:
        Read-only mapping of relation name to URL
    """
    links: dict[str, str] = {}
    if not header:
        return MappingProxyType(links)

    known = LinkRel.values()
    for part in header.split(","):
        match = _LINK_RE.search(part.strip())
        if match is None:
            continue
        url, rel = match.group(1).strip(), match.group(2)
        if rel in known:
            links[rel] = url
    return MappingProxyType(links)


def next_link(header: str | None) -> str | None:
    """URL of the ``next`` relation, if any."""
    return parse_link_header(header).get(LinkRel.NEXT.value)
