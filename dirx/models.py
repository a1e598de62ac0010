from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

NO_EXTENSION = ""
NO_EXTENSION_LABEL = "[no extension]"


class DirxError(Exception):
    """Base class for errors raised by dirx."""


def raw_extension(name: str) -> str:
    """
    Return the text after the final '.' of a filename, verbatim.

    Dotfiles ('.bashrc'), names ending in '.' and names without a dot have
    no extension and return NO_EXTENSION.
    """
    idx = name.rfind(".")
    if idx <= 0 or idx == len(name) - 1:
        return NO_EXTENSION
    return name[idx + 1:]


@dataclass(frozen=True)
class DirectoryTask:
    path: str
    depth: int = 0


@dataclass(frozen=True)
class FileRecord:
    name: str
    size: int
    modified: float
    extension: str = NO_EXTENSION

    @classmethod
    def from_stat(cls, name: str, st) -> "FileRecord":
        return cls(
            name=name,
            size=max(0, int(getattr(st, "st_size", 0) or 0)),
            modified=float(st.st_mtime),
            extension=raw_extension(name),
        )


@dataclass
class ExtensionStats:
    """
    Running statistics for one extension bucket.

    During a walk there is one entry per raw extension. After merging, the
    entry is keyed by its canonical group and `extensions` lists every raw
    extension that was folded in.
    """

    extension: str
    sample_name: str = ""
    count: int = 0
    total_bytes: int = 0
    min_size: Optional[int] = None   # None until the first sample
    max_size: int = 0
    oldest: Optional[float] = None
    newest: Optional[float] = None
    extensions: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def first(cls, record: FileRecord) -> "ExtensionStats":
        return cls(
            extension=record.extension,
            sample_name=record.name,
            count=1,
            total_bytes=record.size,
            min_size=record.size,
            max_size=record.size,
            oldest=record.modified,
            newest=record.modified,
            extensions=frozenset((record.extension,)),
        )

    def observe(self, record: FileRecord) -> None:
        if self.count == 0:
            self.sample_name = record.name
        self.count += 1
        self.total_bytes += record.size
        if self.min_size is None or record.size < self.min_size:
            self.min_size = record.size
        if record.size > self.max_size:
            self.max_size = record.size
        if self.oldest is None or record.modified < self.oldest:
            self.oldest = record.modified
        if self.newest is None or record.modified > self.newest:
            self.newest = record.modified
        self.extensions = self.extensions | {record.extension}

    def absorb(self, other: "ExtensionStats") -> None:
        """Fold another bucket into this one (sums add, extremes widen)."""
        if other.count == 0:
            return
        if not self.sample_name or (other.sample_name and other.sample_name < self.sample_name):
            self.sample_name = other.sample_name
        self.count += other.count
        self.total_bytes += other.total_bytes
        if other.min_size is not None and (self.min_size is None or other.min_size < self.min_size):
            self.min_size = other.min_size
        self.max_size = max(self.max_size, other.max_size)
        if other.oldest is not None and (self.oldest is None or other.oldest < self.oldest):
            self.oldest = other.oldest
        if other.newest is not None and (self.newest is None or other.newest > self.newest):
            self.newest = other.newest
        self.extensions = self.extensions | (other.extensions or frozenset((other.extension,)))

    @property
    def label(self) -> str:
        exts = self.extensions or frozenset((self.extension,))
        return ",".join(sorted(exts))

    @property
    def display_label(self) -> str:
        exts = sorted(self.extensions or {self.extension})
        if exts == [NO_EXTENSION]:
            return NO_EXTENSION_LABEL
        return "." + ",".join(NO_EXTENSION_LABEL if e == NO_EXTENSION else e for e in exts)

    @property
    def single_name(self) -> Optional[str]:
        if self.count == 1 and len(self.extensions) <= 1 and self.sample_name:
            return self.sample_name
        return None

    def copy(self) -> "ExtensionStats":
        return ExtensionStats(
            extension=self.extension,
            sample_name=self.sample_name,
            count=self.count,
            total_bytes=self.total_bytes,
            min_size=self.min_size,
            max_size=self.max_size,
            oldest=self.oldest,
            newest=self.newest,
            extensions=self.extensions,
        )
