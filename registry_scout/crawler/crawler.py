# === FILE: registry_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import IO, List, Optional

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from registry_scout.config import CrawlerConfig
from registry_scout.crawler.discovery import discover_distributions, discover_packages, probe_size
from registry_scout.crawler.governor import RequestGovernor
from registry_scout.crawler.models import Package
from registry_scout.errors import CrawlError
from registry_scout.logger import logger
from registry_scout.progress import ProgressCounters, ProgressReporter
from registry_scout.report.csv_sink import CsvResultSink
from registry_scout.summary import PackageFailure, RunSummary

__all__ = ("CrawlState", "RegistryCrawler")


class CrawlState(str, Enum):
    DISCOVERING = "discovering"
    CRAWLING = "crawling"
    DRAINING = "draining"
    DONE = "done"


class RegistryCrawler:
    """
    Crawls a flat registry index: one task per package, every request through
    a shared RequestGovernor, one CSV row per probed distribution.

    Use as an async context manager; it owns the HTTP session.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        sink: CsvResultSink,
        progress: Optional[ProgressCounters] = None,
        status_stream: Optional[IO[str]] = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.progress = progress if progress is not None else ProgressCounters()
        self.status_stream = status_stream
        self.session: Optional[ClientSession] = None
        self.governor: Optional[RequestGovernor] = None
        self.state: Optional[CrawlState] = None

    async def __aenter__(self) -> RegistryCrawler:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            connector=TCPConnector(limit=self.config.max_concurrent_requests),
            raise_for_status=False,
        )
        self.governor = RequestGovernor(self.session, self.config.max_concurrent_requests)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> RunSummary:
        """
        Discover packages, crawl each of them concurrently, close the sink.

        A failing index fetch is fatal and propagates. Package-level errors
        are collected, or abort the run under the ``fail_fast`` policy.
        """
        if self.governor is None:
            raise RuntimeError("Session not initialized")
        start = time.monotonic()
        summary = RunSummary()
        try:
            self.state = CrawlState.DISCOVERING
            logger.info("Fetching registry index: %s", self.config.registry_url)
            packages = await discover_packages(self.governor, str(self.config.registry_url))
            summary.packages_total = len(packages)

            reporter: Optional[ProgressReporter] = None
            if self.config.show_progress:
                reporter = ProgressReporter(
                    self.progress, len(packages), self.config.status_interval, self.status_stream
                )
                reporter.start()
            try:
                await self._crawl_packages(packages, summary)
            finally:
                if reporter is not None:
                    await reporter.stop()
        finally:
            self.sink.close()
            self.state = CrawlState.DONE
            snapshot = self.progress.snapshot()
            summary.packages_scraped = snapshot.packages_scraped
            summary.distributions_found = snapshot.distributions_found
            summary.total_size_bytes = snapshot.total_size_bytes
            summary.rows_written = self.sink.rows_written
            summary.duration = time.monotonic() - start

        logger.info(
            "Crawl %s: %d/%d packages, %d distributions, %d rows, %d failures in %.2f s",
            summary.outcome.value,
            summary.packages_scraped,
            summary.packages_total,
            summary.distributions_found,
            summary.rows_written,
            len(summary.failures),
            summary.duration,
        )
        return summary

    async def _crawl_packages(self, packages: List[Package], summary: RunSummary) -> None:
        self.state = CrawlState.CRAWLING
        try:
            async with asyncio.TaskGroup() as group:
                for package in packages:
                    group.create_task(self._run_unit(package, summary), name=f"package:{package.name}")
                    await asyncio.sleep(self.config.launch_delay)
                self.state = CrawlState.DRAINING
        except ExceptionGroup as eg:
            _, others = eg.split(CrawlError)
            if others is not None:
                raise others
            summary.aborted = True

    async def _run_unit(self, package: Package, summary: RunSummary) -> None:
        try:
            await self._crawl_package(package)
        except CrawlError as exc:
            summary.failures.append(PackageFailure.from_error(package, exc))
            if self.config.error_policy == "fail_fast":
                logger.error("Aborting crawl, %s failed: %s", package.name, exc.message)
                raise
            logger.warning("Package %s failed: %s (%s)", package.name, exc.message, exc.url)
        self.progress.package_done()

    async def _crawl_package(self, package: Package) -> None:
        governor = self.governor
        distributions = await discover_distributions(
            governor, package, resolve=self.config.resolve_distribution_urls
        )
        self.progress.distributions_added(len(distributions))
        for distribution in distributions:
            size = await probe_size(governor, distribution)
            self.progress.size_added(size)
            self.sink.write(distribution.with_size(size))
