# File: registry_scout/summary.py
"""registry_scout.summary: итог одного обхода реестра (результат, счётчики, ошибки пакетов)."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List

from registry_scout.crawler.models import Package
from registry_scout.errors import CrawlError, FetchError


class RunOutcome(str, Enum):
    """Как завершился обход."""

    COMPLETED = "completed"
    COMPLETED_WITH_FAILURES = "completed_with_failures"
    ABORTED = "aborted"


@dataclass(slots=True)
class PackageFailure:
    """Ошибка, из-за которой пакет обработан не полностью."""

    package: str
    package_url: str
    error_type: str
    message: str
    url: str
    status: int | None = None

    @classmethod
    def from_error(cls, package: Package, error: CrawlError) -> PackageFailure:
        return cls(
            package=package.name,
            package_url=package.url,
            error_type=type(error).__name__,
            message=error.message,
            url=error.url,
            status=error.status if isinstance(error, FetchError) else None,
        )


@dataclass(slots=True)
class RunSummary:
    """Итог обхода: счётчики прогресса, число строк в CSV и список ошибок."""

    packages_total: int = 0
    packages_scraped: int = 0
    distributions_found: int = 0
    total_size_bytes: int = 0
    rows_written: int = 0
    duration: float = 0.0
    aborted: bool = False
    failures: List[PackageFailure] = field(default_factory=list)

    @property
    def outcome(self) -> RunOutcome:
        if self.aborted:
            return RunOutcome.ABORTED
        if self.failures:
            return RunOutcome.COMPLETED_WITH_FAILURES
        return RunOutcome.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("aborted")
        data["outcome"] = self.outcome.value
        return data

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление RunSummary."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


__all__ = ["PackageFailure", "RunOutcome", "RunSummary"]
