# registry_scout/report/csv_sink.py

"""
Append-only CSV output of RegistryScout.

One header row, then one row per probed distribution:
``Package,Distribution,Size``.
"""
from __future__ import annotations

import csv
import threading
from pathlib import Path
from typing import IO, Union

from registry_scout.crawler.models import Distribution

CSV_HEADER = ("Package", "Distribution", "Size")


class CsvResultSink:
    """
    Serialised CSV writer shared by every unit of work.

    The header is written in the constructor, so it always precedes data
    rows. :meth:`write` holds an internal lock; callers need no locking.
    """

    def __init__(self, stream: IO[str], *, owns_stream: bool = False) -> None:
        self._stream = stream
        self._owns_stream = owns_stream
        self._writer = csv.writer(stream)
        self._lock = threading.Lock()
        self._closed = False
        self.rows_written = 0
        self._writer.writerow(CSV_HEADER)

    @classmethod
    def create(cls, path: Union[str, Path]) -> CsvResultSink:
        """Open *path* fresh (truncating old content) and return a sink owning it."""
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        stream = output.open("w", encoding="utf-8", newline="")
        return cls(stream, owns_stream=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, distribution: Distribution) -> None:
        """Append one row for a distribution whose size has been probed."""
        if distribution.size_bytes is None:
            raise ValueError(f"size of {distribution.url} was never probed")
        row = (distribution.package.name, distribution.name, str(distribution.size_bytes))
        with self._lock:
            if self._closed:
                raise ValueError("write to a closed sink")
            self._writer.writerow(row)
            self.rows_written += 1

    def flush(self) -> None:
        with self._lock:
            if not self._closed:
                self._stream.flush()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._stream.flush()
            if self._owns_stream:
                self._stream.close()

    def __enter__(self) -> CsvResultSink:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["CSV_HEADER", "CsvResultSink"]
