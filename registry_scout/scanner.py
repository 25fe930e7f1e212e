# === FILE: registry_scout/scanner.py ===
"""
Модуль-обёртка для функции запуска обхода реестра.
"""
from typing import IO, Optional

from registry_scout.config import CrawlerConfig
from registry_scout.crawler.crawler import RegistryCrawler
from registry_scout.report.csv_sink import CsvResultSink
from registry_scout.summary import RunSummary


async def start_crawl(cfg: CrawlerConfig, status_stream: Optional[IO[str]] = None) -> RunSummary:
    """
    Создаёт CSV-файл заново, запускает RegistryCrawler и возвращает итог обхода.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    status_stream : IO[str], optional
        Куда выводить строку прогресса (по умолчанию stderr).

    Returns
    -------
    RunSummary
        Счётчики, число записанных строк и ошибки пакетов.
    """
    sink = CsvResultSink.create(cfg.output_path)
    try:
        async with RegistryCrawler(cfg, sink, status_stream=status_stream) as crawler:
            return await crawler.crawl()
    finally:
        sink.close()

__all__ = ["start_crawl"]
