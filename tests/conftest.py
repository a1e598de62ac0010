#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared fixtures for the dirx tests.

Puts the project root (containing the 'dirx' package) on sys.path so the
suite runs without an installed/editable package.
"""
from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

# tests/ -> project_root/
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def make_file(path: Path, size: int, mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(b"x" * size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def sample_tree(tmp_path):
    root = tmp_path / "root"
    now = time.time()
    make_file(root / "a.jpg", 3, now - 300)
    make_file(root / "b.jpeg", 5, now - 100)
    make_file(root / "c.JPG", 7, now - 200)
    make_file(root / "notes.txt", 2)
    make_file(root / "README", 4)
    make_file(root / ".env", 1)
    make_file(root / ".git" / "config", 9)
    make_file(root / "sub" / "d.py", 11)
    make_file(root / "sub" / "nested" / "e.py", 13)
    return root


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep a developer's real ~/.config/dirx/config.toml out of the tests."""
    monkeypatch.delenv("DIRX_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))


@pytest.fixture
def mkfile():
    return make_file
