"""
Presentation of sorted extension stats.

Two renderers share format_rows(): a rich table for interactive use and a
plain space-separated column layout (labels left, numbers right) that is
friendly to pipes and diffing.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import ExtensionStats


@dataclass(frozen=True)
class DisplayOptions:
    show_single_name: bool = False
    no_commas: bool = False
    human_sizes: bool = False
    show_extremes: bool = False
    show_times: bool = False
    plain: bool = False


def make_console(stderr: bool = False) -> Console:
    """Wide, colorless console when the stream is not a terminal so no column gets cut."""
    stream = sys.stderr if stderr else sys.stdout
    try:
        if stream.isatty():
            return Console(stderr=stderr)
    except (AttributeError, ValueError):
        pass
    return Console(stderr=stderr, width=200, force_terminal=False, no_color=True,
                   highlight=False, soft_wrap=False)


def format_bytes_binary(num_bytes: int) -> str:
    """
    Format a byte count using binary units with two decimals.

        0 -> "0 B", 1536 -> "1.50 KiB"
    """
    value = float(num_bytes)
    units = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]
    idx = 0
    while value >= 1024.0 and idx < len(units) - 1:
        value /= 1024.0
        idx += 1
    if units[idx] == "B":
        return f"{int(value)} {units[idx]}"
    return f"{value:.2f} {units[idx]}"


def format_number(n: int, no_commas: bool = False) -> str:
    return str(n) if no_commas else f"{n:,}"


def format_size(n: Optional[int], options: DisplayOptions) -> str:
    if n is None:
        return "-"
    if options.human_sizes:
        return format_bytes_binary(n)
    return format_number(n, options.no_commas)


def format_time(stamp: Optional[float]) -> str:
    if stamp is None:
        return "-"
    return datetime.fromtimestamp(stamp).isoformat(timespec="seconds")


def format_label(stats: ExtensionStats, options: DisplayOptions) -> str:
    if options.show_single_name:
        name = stats.single_name
        if name:
            return name
    return stats.display_label


def headers(options: DisplayOptions) -> List[str]:
    cols = ["Extension", "Count", "Size"]
    if options.show_extremes:
        cols += ["Smallest", "Largest"]
    if options.show_times:
        cols += ["Oldest", "Newest"]
    return cols


def format_rows(stats: Sequence[ExtensionStats], options: DisplayOptions) -> List[List[str]]:
    rows: List[List[str]] = []
    for s in stats:
        row = [
            format_label(s, options),
            format_number(s.count, options.no_commas),
            format_size(s.total_bytes, options),
        ]
        if options.show_extremes:
            row += [format_size(s.min_size, options), format_size(s.max_size, options)]
        if options.show_times:
            row += [format_time(s.oldest), format_time(s.newest)]
        rows.append(row)
    return rows


def render_plain(rows: Sequence[Sequence[str]]) -> List[str]:
    """Pad every column to its widest cell; first column left, the rest right."""
    if not rows:
        return []
    widths = [0] * max(len(r) for r in rows)
    for row in rows:
        for i, col in enumerate(row):
            widths[i] = max(widths[i], len(col))
    lines = []
    for row in rows:
        cols = [
            f"{col:<{widths[i]}}" if i == 0 else f"{col:>{widths[i]}}"
            for i, col in enumerate(row)
        ]
        lines.append(" ".join(cols))
    return lines


def print_stats(
    stats: Sequence[ExtensionStats],
    options: DisplayOptions,
    console: Optional[Console] = None,
) -> None:
    console = console or make_console()
    rows = format_rows(stats, options)

    if options.plain:
        for line in render_plain(rows):
            console.print(line, markup=False, emoji=False, highlight=False, soft_wrap=True)
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
    for i, title in enumerate(headers(options)):
        if i == 0:
            table.add_column(title, style="white", no_wrap=True, overflow="ellipsis", min_width=8)
        else:
            table.add_column(title, justify="right", no_wrap=True)
    for row in rows:
        table.add_row(escape(row[0]), *row[1:])
    console.print(table)

    total_bytes = sum(s.total_bytes for s in stats)
    total_files = sum(s.count for s in stats)
    console.print(
        f"[dim]Totals[/] [bold]{format_size(total_bytes, options)}[/] in "
        f"{format_number(total_files, options.no_commas)} files, {len(stats)} extensions"
    )
