"""registry_scout.report: CSV-вывод результатов и JSON-отчёт об итоге обхода."""

from __future__ import annotations

from .csv_sink import CSV_HEADER, CsvResultSink
from .json_report import render_json

__all__ = ["CSV_HEADER", "CsvResultSink", "render_json"]
