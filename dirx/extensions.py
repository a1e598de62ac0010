"""
Extension groups and the merge of per-raw-extension stats into report buckets.

A group maps a key to the raw extensions that are reported together
(jpg/jpeg/jpe all land in 'jpeg'). The table is validated once at startup;
lookups afterwards are pure and never raise.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .models import DirxError, ExtensionStats

logger = logging.getLogger(__name__)


class ExtensionTableError(DirxError, ValueError):
    """The extension group table is not self-consistent."""


DEFAULT_GROUPS: Dict[str, List[str]] = {
    # images
    "jpeg": ["jpg", "jpeg", "jpe", "jif", "jfif", "jfi"],
    "tiff": ["tif", "tiff"],
    "heic": ["heic", "heif"],
    "svg": ["svg", "svgz"],
    # video / audio
    "mpeg": ["mpg", "mpeg", "mpe", "m1v", "m2v"],
    "mp4": ["mp4", "m4v"],
    "mov": ["mov", "qt"],
    "midi": ["mid", "midi"],
    "aiff": ["aif", "aiff", "aifc"],
    "ogg": ["ogg", "oga"],
    # documents / data
    "html": ["htm", "html", "xhtml"],
    "markdown": ["md", "markdown", "mdown", "mkd"],
    "yaml": ["yml", "yaml"],
    "text": ["txt", "text"],
    # source
    "cpp": ["cpp", "cc", "cxx", "c++"],
    "hpp": ["hpp", "hh", "hxx", "h++"],
    "perl": ["perl", "pl", "pm"],
    "shell": ["shell", "sh", "bash"],
    # archives
    "tgz": ["tgz", "taz"],
    "bz2": ["bz2", "bz"],
}


class ExtensionCanonicalizer:
    """
    Total mapping from raw extension to canonical group key.

    canonicalize() tries an exact match, then a lowercased match, and
    otherwise treats the raw extension as its own group.
    """

    def __init__(self, groups: Mapping[str, Iterable[str]]):
        lookup: Dict[str, str] = {}
        for key, members in groups.items():
            members = list(members)
            if not key:
                raise ExtensionTableError("extension group with an empty key")
            if key not in members:
                raise ExtensionTableError(f"group {key!r} does not list itself as a member: {members}")
            for member in members:
                if not member:
                    raise ExtensionTableError(f"group {key!r} has an empty member")
                owner = lookup.get(member)
                if owner is not None and owner != key:
                    raise ExtensionTableError(
                        f"extension {member!r} belongs to both {owner!r} and {key!r}"
                    )
                lookup[member] = key
        self._lookup = lookup
        logger.debug("extension table: %d groups, %d extensions", len(groups), len(lookup))

    def canonicalize(self, raw: str) -> str:
        key = self._lookup.get(raw)
        if key is None:
            key = self._lookup.get(raw.lower())
        return raw if key is None else key

    def __contains__(self, raw: str) -> bool:
        return raw in self._lookup

    def __len__(self) -> int:
        return len(self._lookup)


def build_canonicalizer(extra: Optional[Mapping[str, Iterable[str]]] = None) -> ExtensionCanonicalizer:
    """Defaults plus user groups; a user group with an existing key replaces it."""
    groups: Dict[str, List[str]] = {k: list(v) for k, v in DEFAULT_GROUPS.items()}
    for key, members in (extra or {}).items():
        groups[key] = list(members)
    return ExtensionCanonicalizer(groups)


def merge_stats(
    stats: Iterable[ExtensionStats],
    canonicalizer: ExtensionCanonicalizer,
) -> List[ExtensionStats]:
    """
    Fold per-raw-extension stats into one entry per canonical group.

    Only the raw extensions actually observed end up in each entry's label.
    Running this on already merged output returns equivalent entries.
    """
    groups: Dict[str, ExtensionStats] = {}
    for row in stats:
        key = canonicalizer.canonicalize(row.extension)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = ExtensionStats(extension=key)
        acc.absorb(row)
    return list(groups.values())
