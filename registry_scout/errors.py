"""Exception types raised while crawling a package registry.

Every failure that can surface from a crawl derives from :class:`CrawlError`,
so callers can catch one type and still inspect the concrete cause:

* :class:`MalformedURLError` - a URL is not an absolute http(s) URL.
* :class:`FetchError` - a GET or HEAD failed at the transport level or
  returned an HTTP error status.
* :class:`URLResolutionError` - a relative href could not be resolved
  against its base URL.
"""
from __future__ import annotations

from typing import Any, Optional


class CrawlError(Exception):
    """Base class for every error raised by the crawler."""

    def __init__(
        self,
        message: str,
        url: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.url = url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message, f"URL: {self.url}"]
        for key, value in self.context.items():
            parts.append(f"  {key}: {value}")
        return "\n".join(parts)


class MalformedURLError(CrawlError):
    """Raised when a URL cannot be parsed into an absolute http(s) URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed URL: {reason}", url)


class FetchError(CrawlError):
    """Raised when a request fails or the server answers with an error status."""

    def __init__(
        self,
        method: str,
        url: str,
        reason: str,
        status: Optional[int] = None,
    ) -> None:
        self.method = method
        self.status = status
        self.reason = reason
        context: dict[str, Any] = {"method": method}
        if status is not None:
            context["status"] = status
        super().__init__(f"Fetch failed: {reason}", url, context)


class URLResolutionError(CrawlError):
    """Raised when an href cannot be resolved against a base URL."""

    def __init__(self, base: str, href: str, reason: str) -> None:
        self.base = base
        self.href = href
        super().__init__(
            f"Cannot resolve href: {reason}", href, {"base": base}
        )


__all__ = ["CrawlError", "MalformedURLError", "FetchError", "URLResolutionError"]
