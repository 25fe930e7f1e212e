# registry_scout/crawler/governor.py
"""
Governor module: the single gate every outbound request passes through.

At most ``max_concurrent_requests`` requests are in flight at once. A slot is
taken before the request is sent and given back when the caller leaves the
response context, so reading the body counts as part of the request.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from aiohttp import ClientError, ClientResponse, ClientSession

from registry_scout.crawler.link_extractor import validate_url
from registry_scout.errors import FetchError
from registry_scout.logger import logger


class RequestGovernor:
    """Bounds concurrent requests and counts issued/completed ones."""

    def __init__(self, session: ClientSession, max_concurrent_requests: int) -> None:
        if max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be >= 1")
        self.session = session
        self.ceiling = max_concurrent_requests
        self._slots = asyncio.Semaphore(max_concurrent_requests)
        self.issued = 0
        self.completed = 0
        self.peak_in_flight = 0

    @property
    def in_flight(self) -> int:
        return self.issued - self.completed

    @asynccontextmanager
    async def request(self, method: str, url: str, **kwargs: Any) -> AsyncIterator[ClientResponse]:
        """
        Send *method* to *url* once a slot is free and yield the response.

        The body is released when the context exits. Transport errors,
        timeouts and HTTP statuses >= 400 raise FetchError. A malformed URL
        raises MalformedURLError before any slot or counter is touched.
        """
        validate_url(url)
        async with self._slots:
            self.issued += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            try:
                async with self.session.request(method, url, **kwargs) as resp:
                    if resp.status >= 400:
                        raise FetchError(method, url, f"HTTP {resp.status}", status=resp.status)
                    yield resp
            except (ClientError, asyncio.TimeoutError) as exc:
                logger.debug("%s %s failed: %r", method, url, exc)
                raise FetchError(method, url, str(exc) or type(exc).__name__) from exc
            finally:
                self.completed += 1

    def get(self, url: str, **kwargs: Any):
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs: Any):
        # aiohttp does not follow redirects for HEAD unless asked to
        kwargs.setdefault("allow_redirects", True)
        return self.request("HEAD", url, **kwargs)


__all__ = ["RequestGovernor"]
