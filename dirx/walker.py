"""
Concurrent directory walker.

Every admitted directory becomes its own task on a thread pool. Because each
task can schedule more tasks there is no fixed amount of work to wait for;
WorkCounter tracks outstanding visits instead:

  - add() runs in the scheduling thread *before* the visit is submitted
    (the root visit included), so a parent is always still counted while
    its children are being registered;
  - done() runs exactly once per visit, in a finally block, after the
    listing, filtering and every emission for that directory;
  - wait() returns when the count drains to zero.
"""

from __future__ import annotations

import concurrent.futures
import logging
import os
import stat as statmod
import threading
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, List, Optional

from .aggregator import StatsAggregator
from .models import DirectoryTask, DirxError, FileRecord

logger = logging.getLogger(__name__)


class RootDirectoryError(DirxError):
    """The root of a walk could not be listed."""


@dataclass(frozen=True)
class WalkOptions:
    skip_hidden: bool = True
    follow_links: bool = False
    recurse: bool = True
    max_depth: int = 0          # 0 = unlimited
    workers: Optional[int] = None

    @property
    def depth_limit(self) -> int:
        """Effective maximum depth; non-recursive walks only see the root."""
        return self.max_depth if self.recurse else 1


def is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def admit_directory(name: str, depth: int, options: WalkOptions) -> bool:
    """Admission filter for a subdirectory found at `depth` (root is 0)."""
    if options.skip_hidden and is_hidden(name):
        return False
    limit = options.depth_limit
    return limit == 0 or depth < limit


class WorkCounter:
    """Count of scheduled-but-unfinished visits, with a drain signal."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending = 0
        self._completed = 0
        self._failure: Optional[BaseException] = None

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._pending += n

    def done(self) -> None:
        with self._cond:
            if self._pending <= 0:
                raise RuntimeError("done() called with no outstanding work")
            self._pending -= 1
            self._completed += 1
            if self._pending == 0:
                self._cond.notify_all()

    def fail(self, exc: BaseException) -> None:
        # Only the first failure is kept.
        with self._cond:
            if self._failure is None:
                self._failure = exc

    def wait(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._pending == 0, timeout)

    @property
    def pending(self) -> int:
        with self._cond:
            return self._pending

    @property
    def completed(self) -> int:
        with self._cond:
            return self._completed

    @property
    def failure(self) -> Optional[BaseException]:
        with self._cond:
            return self._failure


def _list_dir(path: str) -> List[os.DirEntry]:
    with os.scandir(path) as it:
        return list(it)


def _file_record(entry: os.DirEntry, follow_links: bool) -> Optional[FileRecord]:
    try:
        st = entry.stat(follow_symlinks=follow_links)
    except OSError as exc:
        # Dangling link when following, or removed since listing.
        logger.debug("cannot stat %s: %s", entry.path, exc)
        return None
    return FileRecord.from_stat(entry.name, st)


class Walker:
    """Walk a subtree concurrently, feeding every admitted file to an aggregator."""

    def __init__(self, aggregator: StatsAggregator, options: Optional[WalkOptions] = None):
        self.aggregator = aggregator
        self.options = options or WalkOptions()
        self._counter = WorkCounter()
        self._pool: Optional[concurrent.futures.ThreadPoolExecutor] = None

    @property
    def directories_scanned(self) -> int:
        return self._counter.completed

    def traverse(self, root) -> None:
        """
        Visit `root` and everything the admission filter lets through.

        Raises RootDirectoryError if the root cannot be listed. Failures
        below the root only reduce what gets counted.
        """
        path = os.fspath(root)
        try:
            entries = _list_dir(path)
        except OSError as exc:
            raise RootDirectoryError(f"cannot read {path}: {exc.strerror or exc}") from exc

        self._counter = WorkCounter()

        logger.debug("walking %s (%s)", path, self.options)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.options.workers, thread_name_prefix="dirx-walk"
        ) as pool:
            self._pool = pool
            self._schedule(DirectoryTask(path, 0), entries)
            self._counter.wait()
        self._pool = None

        failure = self._counter.failure
        if failure is not None:
            raise failure
        logger.debug("walk of %s done: %d directories", path, self.directories_scanned)

    def _schedule(self, task: DirectoryTask, entries: Optional[List[os.DirEntry]] = None) -> None:
        self._counter.add()
        try:
            self._pool.submit(self._visit, task, entries)
        except BaseException:
            self._counter.done()
            raise

    def _visit(self, task: DirectoryTask, entries: Optional[List[os.DirEntry]]) -> None:
        try:
            if entries is None:
                try:
                    entries = _list_dir(task.path)
                except PermissionError:
                    logger.debug("permission denied: %s", task.path)
                    return
                except OSError as exc:
                    logger.warning("skipping %s: %s", task.path, exc)
                    return
            self._scan(task, entries)
        except Exception as exc:
            self._counter.fail(exc)
        finally:
            self._counter.done()

    def _scan(self, task: DirectoryTask, entries: List[os.DirEntry]) -> None:
        opts = self.options
        child_depth = task.depth + 1
        for entry in entries:
            name = entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=opts.follow_links)
            except OSError:
                continue
            if is_dir:
                if admit_directory(name, child_depth, opts):
                    self._schedule(DirectoryTask(entry.path, child_depth))
                continue
            if opts.skip_hidden and is_hidden(name):
                continue
            record = _file_record(entry, opts.follow_links)
            if record is not None:
                self.aggregator.observe(record)


def scan_listing(
    lines: Iterable[str],
    aggregator: StatsAggregator,
    options: Optional[WalkOptions] = None,
) -> int:
    """
    Fold a list of file paths (one per line, e.g. from `find`) into `aggregator`.

    No directories are walked. Hidden paths, blank lines and directories are
    skipped; unreadable paths are logged. Returns the number of files counted.
    """
    options = options or WalkOptions()
    counted = 0
    for line in lines:
        path = line.rstrip("\r\n")
        if not path.strip():
            continue
        parts = PurePath(path).parts
        if options.skip_hidden and any(is_hidden(p) for p in parts):
            continue
        try:
            st = os.stat(path, follow_symlinks=options.follow_links)
        except OSError as exc:
            logger.warning("skipping %s: %s", path, exc)
            continue
        if statmod.S_ISDIR(st.st_mode):
            continue
        name = parts[-1] if parts else path
        aggregator.observe(FileRecord.from_stat(name, st))
        counted += 1
    return counted
