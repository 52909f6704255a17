"""Tests for the mtime-validated compile cache."""

from __future__ import annotations

import os
from pathlib import Path

from toys.stores import CompileCache


def _touch(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns))


def test_cache_returns_entry_while_source_is_unchanged(tmp_path: Path) -> None:
    source = tmp_path / "app.js"
    source.write_text("var a = 1;", encoding="utf-8")
    cache = CompileCache(tmp_path / "cache")

    assert cache.get(source) is None
    cache.set(source, "var a=1;")

    assert cache.get(source) == "var a=1;"
    assert (cache.hits, cache.misses) == (1, 1)
    assert cache.entry_path(source).stat().st_mtime_ns == source.stat().st_mtime_ns


def test_cache_entry_goes_stale_when_source_mtime_changes(tmp_path: Path) -> None:
    source = tmp_path / "app.css"
    source.write_text("a { color: red; }", encoding="utf-8")
    _touch(source, 1_600_000_000_000_000_000)
    cache = CompileCache(tmp_path / "cache")
    cache.set(source, "a{color:red}")

    _touch(source, 1_700_000_000_000_000_000)

    assert cache.get(source) is None


def test_cache_never_hashes_contents(tmp_path: Path) -> None:
    source = tmp_path / "app.js"
    source.write_text("var a;", encoding="utf-8")
    cache = CompileCache(tmp_path / "cache")
    cache.set(source, "old")
    stamp = source.stat().st_mtime_ns

    source.write_text("var changed;", encoding="utf-8")
    _touch(source, stamp)

    assert cache.get(source) == "old"


def test_keys_are_stable_per_source_path(tmp_path: Path) -> None:
    cache = CompileCache(tmp_path / "cache")
    first, second = tmp_path / "a.js", tmp_path / "b.js"

    assert cache.key(first) == cache.key(tmp_path / "." / "a.js")
    assert cache.key(first) != cache.key(second)
    assert cache.entry_path(first).parent == tmp_path / "cache"


def test_clear_removes_the_cache_directory(tmp_path: Path) -> None:
    source = tmp_path / "app.js"
    source.write_text("var a;", encoding="utf-8")
    cache = CompileCache(tmp_path / "cache")
    cache.set(source, "var a;")
    cache.get(source)

    cache.clear()

    assert not cache.path.exists()
    assert (cache.hits, cache.misses) == (0, 0)
    assert cache.get(source) is None
