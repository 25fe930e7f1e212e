# registry_scout/crawler/models.py
"""
Data models for the RegistryScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True, slots=True)
class AnchorTag:
    """One ``<a href="...">text</a>`` occurrence found in a page."""

    href: str
    text: str


@dataclass(frozen=True, slots=True)
class Package:
    """A project listed on the registry index. Identity is the page URL."""

    name: str
    url: str


@dataclass(frozen=True, slots=True)
class Distribution:
    """A downloadable file of a package.

    ``package`` is a read-only back-reference; ``size_bytes`` stays ``None``
    until the size probe has run.
    """

    package: Package
    name: str
    url: str
    size_bytes: Optional[int] = None

    def with_size(self, size_bytes: int) -> Distribution:
        return replace(self, size_bytes=size_bytes)
