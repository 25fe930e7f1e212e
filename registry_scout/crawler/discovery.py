# registry_scout/crawler/discovery.py
"""
Package discovery, distribution discovery and size probing.

All three go through a :class:`RequestGovernor`; none of them retries.
"""
from __future__ import annotations

from typing import List

from registry_scout.crawler.governor import RequestGovernor
from registry_scout.crawler.link_extractor import extract_anchors, resolve_href
from registry_scout.crawler.models import Distribution, Package
from registry_scout.logger import logger

UNKNOWN_SIZE = -1


async def discover_packages(governor: RequestGovernor, index_url: str) -> List[Package]:
    """
    Fetch the registry index and return one Package per anchor, in page order.

    Hrefs are resolved against the final URL of the response, so a redirected
    index still yields correct package URLs. Any failure aborts discovery.
    """
    async with governor.get(index_url) as resp:
        body = await resp.read()
        base = str(resp.url)

    packages = [
        Package(name=anchor.text, url=resolve_href(base, anchor.href))
        for anchor in extract_anchors(body)
    ]
    logger.info("Discovered %d packages at %s", len(packages), base)
    return packages


async def discover_distributions(
    governor: RequestGovernor, package: Package, *, resolve: bool = False
) -> List[Distribution]:
    """
    Fetch the page of *package* and return its distributions.

    Hrefs are taken as-is unless *resolve* is set, in which case they are
    resolved against the final URL of the package page.
    """
    async with governor.get(package.url) as resp:
        body = await resp.read()
        base = str(resp.url)

    distributions = []
    for anchor in extract_anchors(body):
        url = resolve_href(base, anchor.href) if resolve else anchor.href
        distributions.append(Distribution(package=package, name=anchor.text, url=url))
    logger.debug("%s: %d distributions", package.name, len(distributions))
    return distributions


async def probe_size(governor: RequestGovernor, distribution: Distribution) -> int:
    """Return the Content-Length reported for *distribution*, or -1 when absent."""
    async with governor.head(distribution.url) as resp:
        length = resp.content_length
    return UNKNOWN_SIZE if length is None else length


__all__ = ["UNKNOWN_SIZE", "discover_packages", "discover_distributions", "probe_size"]
