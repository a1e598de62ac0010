from __future__ import annotations

import threading

from dirx.aggregator import StatsAggregator
from dirx.models import FileRecord


def _rec(name, size, mtime, ext):
    return FileRecord(name=name, size=size, modified=mtime, extension=ext)


def test_first_observation_initializes_extremes():
    agg = StatsAggregator()
    agg.observe(_rec("a.txt", 10, 500.0, "txt"))
    (row,) = agg.snapshot()
    assert row.count == 1
    assert row.total_bytes == 10
    assert row.min_size == row.max_size == 10
    assert row.oldest == row.newest == 500.0
    assert row.sample_name == "a.txt"


def test_later_observations_widen_extremes():
    agg = StatsAggregator()
    agg.observe(_rec("b.txt", 10, 500.0, "txt"))
    agg.observe(_rec("c.txt", 0, 900.0, "txt"))
    agg.observe(_rec("d.txt", 25, 100.0, "txt"))
    (row,) = agg.snapshot()
    assert row.count == 3
    assert row.total_bytes == 35
    assert (row.min_size, row.max_size) == (0, 25)
    # oldest is the smallest timestamp, newest the largest
    assert (row.oldest, row.newest) == (100.0, 900.0)
    assert row.sample_name == "b.txt"


def test_snapshot_is_detached():
    agg = StatsAggregator()
    agg.observe(_rec("a.md", 1, 1.0, "md"))
    snap = agg.snapshot()
    agg.observe(_rec("b.md", 1, 1.0, "md"))
    assert snap[0].count == 1
    assert agg.snapshot()[0].count == 2


def test_concurrent_observe_loses_nothing():
    agg = StatsAggregator()
    exts = ["a", "b", "c", "d"]
    per_thread = 2000

    def worker(i: int):
        for n in range(per_thread):
            agg.observe(_rec(f"f{n}", n % 7, float(n), exts[(i + n) % len(exts)]))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    rows = agg.snapshot()
    assert agg.file_count == 8 * per_thread
    assert sum(r.count for r in rows) == 8 * per_thread
    assert len(agg) == 4
    assert all(r.min_size == 0 and r.max_size == 6 for r in rows)
