from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from .models import ExtensionStats

SORT_KEYS = ("count", "size")


def sort_stats(
    stats: Iterable[ExtensionStats],
    by: str = "count",
    label: Optional[Callable[[ExtensionStats], str]] = None,
) -> List[ExtensionStats]:
    """
    Order rows by descending count or total size.

    Ties go to the label as displayed, case-insensitively ascending, then to
    the merged extension list so the result never depends on the order rows
    were collected in. `label` defaults to ExtensionStats.display_label.
    """
    if by not in SORT_KEYS:
        raise ValueError(f"unknown sort key {by!r}; expected one of {SORT_KEYS}")
    shown = label or (lambda s: s.display_label)

    def key(s: ExtensionStats):
        primary = -s.total_bytes if by == "size" else -s.count
        text = shown(s)
        return (primary, text.casefold(), text, s.label)

    return sorted(stats, key=key)
