"""registry_scout.progress: shared crawl counters and the live status line."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import IO, Optional

import click

GIGABYTE = 1_000_000_000

# carriage return + "erase line": the status line overwrites itself
_REWRITE = "\r\x1b[K"


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    packages_scraped: int
    distributions_found: int
    total_size_bytes: int


class ProgressCounters:
    """Increment-only counters shared by every unit of work of one crawl."""

    def __init__(self) -> None:
        self.packages_scraped = 0
        self.distributions_found = 0
        self.total_size_bytes = 0

    def package_done(self) -> None:
        self.packages_scraped += 1

    def distributions_added(self, count: int) -> None:
        self.distributions_found += count

    def size_added(self, size_bytes: int) -> None:
        # unknown sizes are reported as negative and do not count
        if size_bytes > 0:
            self.total_size_bytes += size_bytes

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            packages_scraped=self.packages_scraped,
            distributions_found=self.distributions_found,
            total_size_bytes=self.total_size_bytes,
        )


def format_status(snapshot: ProgressSnapshot, packages_total: int) -> str:
    """Render one status line; the size is in whole gigabytes, rounded down."""
    return (
        f"Scraped {snapshot.packages_scraped}/{packages_total} packages, "
        f"Distributions found: {snapshot.distributions_found}, "
        f"Total size: {snapshot.total_size_bytes // GIGABYTE} GB"
    )


class ProgressReporter:
    """Background task redrawing the status line every *interval* seconds."""

    def __init__(
        self,
        counters: ProgressCounters,
        packages_total: int,
        interval: float = 1.0,
        stream: Optional[IO[str]] = None,
    ) -> None:
        self.counters = counters
        self.packages_total = packages_total
        self.interval = interval
        self.stream = stream
        self._task: Optional[asyncio.Task[None]] = None

    def render(self) -> None:
        line = format_status(self.counters.snapshot(), self.packages_total)
        click.echo(_REWRITE + line, file=self.stream, nl=False, err=self.stream is None)

    async def _run(self) -> None:
        while True:
            self.render()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="progress-reporter")

    async def stop(self) -> None:
        """Cancel the task, draw the final state and end the line."""
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        self.render()
        click.echo(file=self.stream, err=self.stream is None)

    async def __aenter__(self) -> ProgressReporter:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()


__all__ = [
    "GIGABYTE",
    "ProgressCounters",
    "ProgressReporter",
    "ProgressSnapshot",
    "format_status",
]
