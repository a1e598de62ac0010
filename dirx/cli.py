from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from rich.markup import escape

from . import __version__
from .aggregator import StatsAggregator
from .config import ENV_VAR, Settings, load_config, platform_config_default
from .display import DisplayOptions, format_label, make_console, print_stats
from .extensions import ExtensionTableError, build_canonicalizer, merge_stats
from .sorting import sort_stats
from .walker import RootDirectoryError, WalkOptions, Walker, scan_listing

logger = logging.getLogger(__name__)


def _epilog() -> str:
    return (
        "Examples:\n"
        "  dirx -r ~/Pictures            # counts per file type, whole tree\n"
        "  dirx -r -s -m 3 /var/log      # by size, three levels deep\n"
        "  find . -name '*.py' | dirx -i -x\n"
        "\n"
        f"Config: {platform_config_default()} (or ${ENV_VAR}, or --config)\n"
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dirx",
        description="Gather statistics about a folder tree, grouped by file extension.",
        epilog=_epilog(),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("directory", metavar="DIR", nargs="?", default=".",
                   help="Folder to scan (default: current directory)")
    p.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", "-c", help=f"Path to config TOML (overrides ${ENV_VAR} & defaults)")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")

    # Scan policy. Left as None when absent so the config file can supply it.
    p.add_argument("--all", "-a", dest="include_hidden", action="store_true", default=None,
                   help="Include hidden (dot) files and folders")
    p.add_argument("--follow-links", "-l", action="store_true", default=None,
                   help="Follow symlinks")
    p.add_argument("--recurse", "-r", action="store_true", default=None,
                   help="Recurse into subdirectories (otherwise only DIR itself)")
    p.add_argument("--maxdepth", "-m", type=int, default=None, metavar="N",
                   help="Maximum depth: 0 means unlimited, 1 is DIR only")
    p.add_argument("--workers", "-w", type=int, default=None, metavar="N",
                   help="Threads used for directory listing")
    p.add_argument("--stdin", "-i", action="store_true",
                   help="Read file paths from stdin (one per line) instead of walking DIR")

    # Presentation
    p.add_argument("--by-size", "-s", action="store_true", default=None,
                   help="Sort by total size (default: by count)")
    p.add_argument("--only", "-o", dest="show_single_name", action="store_true", default=None,
                   help="Show the file name when it is the only one of its type")
    p.add_argument("--numbers", "-n", dest="no_commas", action="store_true", default=None,
                   help="Numbers without thousands separators")
    p.add_argument("--human", "-u", dest="human_sizes", action="store_true", default=None,
                   help="Human readable sizes (KiB, MiB, ...)")
    p.add_argument("--extremes", "-x", action="store_true",
                   help="Add smallest/largest file size columns")
    p.add_argument("--times", "-t", action="store_true",
                   help="Add oldest/newest modification time columns")
    p.add_argument("--plain", "-p", action="store_true",
                   help="Plain aligned columns instead of a table")
    return p


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _pick(flag, default):
    return default if flag is None else flag


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line flags win over config values, but only when given."""
    if args.include_hidden:
        settings.skip_hidden = False
    settings.follow_links = _pick(args.follow_links, settings.follow_links)
    settings.recurse = _pick(args.recurse, settings.recurse)
    settings.max_depth = _pick(args.maxdepth, settings.max_depth)
    settings.workers = _pick(args.workers, settings.workers)
    if args.by_size:
        settings.sort_by = "size"
    settings.show_single_name = _pick(args.show_single_name, settings.show_single_name)
    settings.no_commas = _pick(args.no_commas, settings.no_commas)
    settings.human_sizes = _pick(args.human_sizes, settings.human_sizes)
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    err = make_console(stderr=True)

    try:
        settings = apply_overrides(load_config(args.config), args)
        if settings.max_depth < 0:
            raise ValueError(f"maxdepth must be >= 0, got {settings.max_depth}")
        if settings.workers is not None and settings.workers < 1:
            raise ValueError(f"workers must be >= 1, got {settings.workers}")
        canonicalizer = build_canonicalizer(settings.groups)
    except (OSError, ValueError, TypeError) as e:
        # ExtensionTableError is a ValueError: a bad table never reaches the walk.
        kind = "extension table" if isinstance(e, ExtensionTableError) else "configuration"
        err.print(f"[red]Error[/] invalid {kind}: {escape(str(e))}", highlight=False)
        return 2

    options = WalkOptions(
        skip_hidden=settings.skip_hidden,
        follow_links=settings.follow_links,
        recurse=settings.recurse,
        max_depth=settings.max_depth,
        workers=settings.workers,
    )
    aggregator = StatsAggregator()
    if args.stdin:
        counted = scan_listing(sys.stdin, aggregator, options)
        logger.debug("read %d paths from stdin", counted)
    else:
        walker = Walker(aggregator, options)
        try:
            walker.traverse(args.directory)
        except RootDirectoryError as e:
            err.print(f"[red]Error[/] {escape(str(e))}", highlight=False)
            return 1
        logger.debug("scanned %d directories, %d files", walker.directories_scanned, aggregator.file_count)

    display = DisplayOptions(
        show_single_name=settings.show_single_name,
        no_commas=settings.no_commas,
        human_sizes=settings.human_sizes,
        show_extremes=args.extremes,
        show_times=args.times,
        plain=args.plain,
    )
    rows = sort_stats(
        merge_stats(aggregator.snapshot(), canonicalizer),
        by=settings.sort_by,
        label=lambda s: format_label(s, display),
    )
    try:
        print_stats(rows, display)
        sys.stdout.flush()
    except BrokenPipeError:
        # Reader went away (e.g. `dirx | head`); silence the flush at exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
