from __future__ import annotations

import threading
from typing import Dict, List

from .models import ExtensionStats, FileRecord


class StatsAggregator:
    """
    Owner of the per-raw-extension statistics table.

    observe() is called from every walker thread; all reads and writes of the
    table go through one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: Dict[str, ExtensionStats] = {}
        self._files = 0

    def observe(self, record: FileRecord) -> None:
        with self._lock:
            row = self._stats.get(record.extension)
            if row is None:
                self._stats[record.extension] = ExtensionStats.first(record)
            else:
                row.observe(record)
            self._files += 1

    def snapshot(self) -> List[ExtensionStats]:
        # Copies, so callers can merge/sort while a walk is still running.
        with self._lock:
            return [row.copy() for row in self._stats.values()]

    @property
    def file_count(self) -> int:
        with self._lock:
            return self._files

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)
