"""Tests for dirx.cli."""
from __future__ import annotations

import argparse
import io

import pytest

from dirx.cli import build_parser, main


def _lines(capsys):
    return [ln for ln in capsys.readouterr().out.splitlines() if ln.strip()]


class TestBuildParser:
    def test_parser_created(self):
        parser = build_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "dirx"

    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_unset_flags_stay_none(self):
        args = build_parser().parse_args([])
        assert args.directory == "."
        assert args.recurse is None and args.maxdepth is None and args.include_hidden is None

    def test_short_flags(self):
        args = build_parser().parse_args(["-r", "-s", "-m", "3", "-o", "-n", "-a", "d"])
        assert (args.recurse, args.by_size, args.maxdepth) == (True, True, 3)
        assert (args.show_single_name, args.no_commas, args.include_hidden) == (True, True, True)
        assert args.directory == "d"


def test_recursive_plain_output(sample_tree, capsys):
    assert main([str(sample_tree), "-r", "-p"]) == 0
    lines = _lines(capsys)
    assert lines[0].split() == [".JPG,jpeg,jpg", "3", "15"]
    assert lines[1].split() == [".py", "2", "24"]
    labels = [ln.split()[0] for ln in lines]
    assert labels[2:] == [".txt", "[no"]  # ties broken by the label as shown
    assert lines[3].startswith("[no extension]")


def test_default_is_root_only(sample_tree, capsys):
    assert main([str(sample_tree), "-p"]) == 0
    out = capsys.readouterr().out
    assert ".py" not in out
    assert ".JPG,jpeg,jpg" in out


def test_sort_by_size_and_single_name(sample_tree, capsys):
    assert main([str(sample_tree), "-r", "-p", "-s", "-o", "-n"]) == 0
    lines = _lines(capsys)
    assert lines[0].split() == [".py", "2", "24"]
    assert lines[1].split() == [".JPG,jpeg,jpg", "3", "15"]
    names = [ln.split()[0] for ln in lines]
    assert "README" in names and "notes.txt" in names


def test_include_hidden(sample_tree, capsys):
    assert main([str(sample_tree), "-r", "-p", "-a"]) == 0
    lines = _lines(capsys)
    noext = [ln for ln in lines if ln.startswith("[no extension]")]
    assert noext[0].split()[2] == "3"


def test_maxdepth(sample_tree, capsys):
    assert main([str(sample_tree), "-r", "-m", "2", "-p"]) == 0
    lines = _lines(capsys)
    py = [ln for ln in lines if ln.startswith(".py")]
    assert py[0].split()[1] == "1"


def test_table_output(sample_tree, capsys):
    assert main([str(sample_tree), "-r", "-x", "-t"]) == 0
    out = capsys.readouterr().out
    for col in ("Extension", "Count", "Size", "Smallest", "Largest", "Oldest", "Newest"):
        assert col in out
    assert "Totals" in out


def test_missing_root_exits_1(tmp_path, capsys):
    assert main([str(tmp_path / "nope")]) == 1
    assert "Error" in capsys.readouterr().err


def test_bad_extension_table_exits_2(sample_tree, tmp_path, capsys):
    cfg = tmp_path / "bad.toml"
    cfg.write_text('[groups]\npics = ["pics", "jpg"]\n', encoding="utf-8")
    assert main([str(sample_tree), "-c", str(cfg)]) == 2
    assert "extension table" in capsys.readouterr().err


def test_missing_config_exits_2(sample_tree, tmp_path, capsys):
    assert main([str(sample_tree), "-c", str(tmp_path / "none.toml")]) == 2


def test_config_supplies_defaults_and_flags_override(sample_tree, tmp_path, capsys):
    cfg = tmp_path / "c.toml"
    cfg.write_text('[scan]\nrecurse = true\n[display]\nno_commas = true\nsort_by = "size"\n'
                   '[groups]\njpeg = ["jpeg"]\n', encoding="utf-8")
    assert main([str(sample_tree), "-c", str(cfg), "-p"]) == 0
    lines = _lines(capsys)
    assert lines[0].split() == [".py", "2", "24"]
    labels = [ln.split()[0] for ln in lines]
    assert {".jpeg", ".jpg", ".JPG"} <= set(labels)


def test_stdin_listing(sample_tree, monkeypatch, capsys):
    listing = f"{sample_tree / 'a.jpg'}\n{sample_tree / 'sub' / 'd.py'}\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(listing))
    assert main(["-i", "-p"]) == 0
    labels = [ln.split()[0] for ln in _lines(capsys)]
    assert sorted(labels) == [".jpg", ".py"]
