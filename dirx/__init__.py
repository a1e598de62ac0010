"""dirx: per-extension statistics for a folder tree, gathered concurrently."""

__version__ = "0.3.0"

from .aggregator import StatsAggregator
from .extensions import (
    DEFAULT_GROUPS,
    ExtensionCanonicalizer,
    ExtensionTableError,
    build_canonicalizer,
    merge_stats,
)
from .models import DirectoryTask, DirxError, ExtensionStats, FileRecord, raw_extension
from .sorting import sort_stats
from .walker import RootDirectoryError, WalkOptions, Walker, WorkCounter, scan_listing

__all__ = [
    "__version__",
    "StatsAggregator",
    "DEFAULT_GROUPS",
    "ExtensionCanonicalizer",
    "ExtensionTableError",
    "build_canonicalizer",
    "merge_stats",
    "DirectoryTask",
    "DirxError",
    "ExtensionStats",
    "FileRecord",
    "raw_extension",
    "sort_stats",
    "RootDirectoryError",
    "WalkOptions",
    "Walker",
    "WorkCounter",
    "scan_listing",
]
