# registry_scout/crawler/link_extractor.py
"""
Anchor extraction and URL helpers for RegistryScout.

Registry pages follow a flat convention: one ``<a href="URL">name</a>`` per
package or file. A single regular expression is enough for that; nested
tags, single-quoted or reordered attributes are not recognised.
"""
from __future__ import annotations

import re
from typing import List, Union
from urllib.parse import urljoin, urlsplit

from registry_scout.crawler.models import AnchorTag
from registry_scout.errors import MalformedURLError, URLResolutionError

_ANCHOR_RE = re.compile(r'<a\s+href="([^"]*)"[^>]*>([^<]*)</a>', re.IGNORECASE)


def extract_anchors(body: Union[bytes, str]) -> List[AnchorTag]:
    """
    Return every anchor of *body* in document order.

    Bytes are decoded as UTF-8; undecodable bytes are replaced rather than
    rejected. Captures are returned verbatim, entities included. A page
    without anchors yields an empty list.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return [
        AnchorTag(href=href, text=label)
        for href, label in _ANCHOR_RE.findall(text)
    ]


def resolve_href(base: str, href: str) -> str:
    """Resolve *href* against *base* using standard relative-reference rules."""
    try:
        return urljoin(base, href)
    except ValueError as exc:
        raise URLResolutionError(base, href, str(exc)) from exc


def validate_url(url: str) -> str:
    """
    Check that *url* is an absolute http(s) URL with a host and return it.

    Raises MalformedURLError otherwise.
    """
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc
    if parts.scheme.lower() not in ("http", "https"):
        raise MalformedURLError(url, f"unsupported scheme {parts.scheme!r}")
    if not parts.netloc:
        raise MalformedURLError(url, "missing host")
    return url
