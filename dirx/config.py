from __future__ import annotations

import dataclasses as dc
import logging
import os
import pathlib
import typing as t
from dataclasses import field

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

from .sorting import SORT_KEYS

logger = logging.getLogger(__name__)

PathLikeStr = t.Union[str, "os.PathLike[str]"]
ConfigDict = t.Dict[str, t.Any]

ENV_VAR = "DIRX_CONFIG"


def platform_config_default() -> pathlib.Path:
    """
    Determine the default config path by OS:
      - Windows: %APPDATA%/dirx/config.toml
      - Others:  ~/.config/dirx/config.toml
    """
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return pathlib.Path(appdata) / "dirx" / "config.toml"
    return pathlib.Path.home() / ".config" / "dirx" / "config.toml"


@dc.dataclass
class Settings:
    # scan policy
    skip_hidden: bool = True
    follow_links: bool = False
    recurse: bool = False
    max_depth: int = 0
    workers: int | None = None
    # presentation
    sort_by: str = "count"
    show_single_name: bool = False
    no_commas: bool = False
    human_sizes: bool = False
    # extra / overriding extension groups: key -> members
    groups: dict[str, list[str]] = field(default_factory=dict)


def resolve_config_path(path: PathLikeStr | None) -> tuple[pathlib.Path, bool]:
    """
    Resolve the config file path (explicit path -> DIRX_CONFIG env -> platform default).
    The flag is True when the path was asked for explicitly and therefore must exist.
    """
    if path:
        return pathlib.Path(path).expanduser(), True
    env = os.environ.get(ENV_VAR)
    if env:
        return pathlib.Path(env).expanduser(), True
    return platform_config_default(), False


def load_config(path: PathLikeStr | None = None) -> Settings:
    candidate, required = resolve_config_path(path)
    if not candidate.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {candidate}")
        logger.debug("no config at %s; using defaults", candidate)
        return Settings()

    logger.debug("loading config %s", candidate)
    with candidate.open("rb") as f:
        data = tomllib.load(f)
    return _parse_config_dict(data)


def _expect(section: str, key: str, value: t.Any, kind: type) -> t.Any:
    # bool is an int subclass; keep `max_depth = true` out.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise TypeError(f"[{section}] {key} must be {kind.__name__}, got {value!r}")
    return value


def _parse_config_dict(d: ConfigDict) -> Settings:
    scan = d.get("scan", {}) or {}
    display = d.get("display", {}) or {}
    settings = Settings()

    for key in ("skip_hidden", "follow_links", "recurse"):
        if key in scan:
            setattr(settings, key, _expect("scan", key, scan[key], bool))
    if "max_depth" in scan:
        settings.max_depth = _expect("scan", "max_depth", scan["max_depth"], int)
        if settings.max_depth < 0:
            raise ValueError(f"[scan] max_depth must be >= 0, got {settings.max_depth}")
    if "workers" in scan:
        settings.workers = _expect("scan", "workers", scan["workers"], int)
        if settings.workers < 1:
            raise ValueError(f"[scan] workers must be >= 1, got {settings.workers}")

    if "sort_by" in display:
        sort_by = _expect("display", "sort_by", display["sort_by"], str)
        if sort_by not in SORT_KEYS:
            raise ValueError(f"[display] sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
        settings.sort_by = sort_by
    for key in ("show_single_name", "no_commas", "human_sizes"):
        if key in display:
            setattr(settings, key, _expect("display", key, display[key], bool))

    groups = d.get("groups", {}) or {}
    if not isinstance(groups, dict):
        raise TypeError("[groups] must be a table of key = [extensions]")
    for key, members in groups.items():
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise TypeError(f"[groups] {key} must be a list of strings")
        settings.groups[key] = [m.lstrip(".") for m in members]
    return settings
