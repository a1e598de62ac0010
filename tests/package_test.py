from __future__ import annotations

import importlib

import pytest

import dirx


@pytest.mark.parametrize("module", ["dirx", "dirx.extensions", "dirx.walker", "dirx.display"])
def test_module_docstrings_are_real(module):
    assert importlib.import_module(module).__doc__


def test_errors_share_a_base():
    assert issubclass(dirx.RootDirectoryError, dirx.DirxError)
    assert issubclass(dirx.ExtensionTableError, dirx.DirxError)
    assert "DirxError" in dirx.__all__
