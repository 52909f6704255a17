"""Tests for toys.compiler."""

from __future__ import annotations

import os
from typing import List

import pytest

from toys.compiler import Compiler
from toys.errors import CompressorError
from toys.loader import DependencyLoader
from toys.registry import ModuleScanner
from toys.stores import CompileCache

CORE_FILES = {
    "styles/app.css": "a { color: red; }",
    "scripts/app.js": "var a = 1;",
    "views/list.html": "<ul></ul>",
    "lang/en.json": '{"title": "Hi"}',
    "assets/logo.png": "png",
}


class RecordingMinifier:
    def __init__(self) -> None:
        self.calls: List[str] = []

    def minify(self, data: str) -> str:
        self.calls.append(data)
        return f"min({data})"


@pytest.fixture
def minifier() -> RecordingMinifier:
    return RecordingMinifier()


def _compile(project, minifier: RecordingMinifier, **kwargs):
    options = project.options(**kwargs)
    result = DependencyLoader(ModuleScanner(options).scan()).load_autoload()
    minifiers = {category: minifier for category in ("styles", "scripts", "models", "views")}
    compiler = Compiler(options, cache=CompileCache(project.cache_dir), minifiers=minifiers)
    compiler.compile(result.files)
    return compiler, result


def _data(result, category: str) -> List[str | None]:
    return [file.data for file in result.files[category]]


def test_dev_mode_leaves_the_release_tree_alone(project, minifier) -> None:
    project.module("core", {"autoload": True}, CORE_FILES)

    compiler, _ = _compile(project, minifier)

    assert not project.output.exists()
    assert compiler.stats["copied"] == 0
    assert minifier.calls == []


def test_uncompressed_compile_copies_files_except_inline_ones(project, minifier) -> None:
    project.module("core", {"autoload": True}, CORE_FILES)

    compiler, _ = _compile(project, minifier, compile=True)

    release = project.output / "uncompressed" / "core"
    assert (release / "scripts" / "app.js").read_text(encoding="utf-8") == "var a = 1;"
    assert (release / "styles" / "app.css").is_file()
    assert (release / "assets" / "logo.png").is_file()
    assert not (release / "views").exists()
    assert not (release / "lang").exists()
    assert compiler.stats["copied"] == 3
    assert minifier.calls == []


def test_compress_minifies_compressible_files_and_copies_assets(project, minifier) -> None:
    project.module("core", {"autoload": True}, CORE_FILES)

    compiler, result = _compile(project, minifier, compress=True)

    assert _data(result, "styles") == ["min(a { color: red; })"]
    assert _data(result, "scripts") == ["min(var a = 1;)"]
    assert _data(result, "views") == ["min(<ul></ul>)"]
    release = project.output / "compressed" / "core"
    assert (release / "assets" / "logo.png").is_file()
    assert not (release / "scripts").exists()
    assert compiler.stats["minified"] == 3
    assert compiler.stats["copied"] == 1


def test_compress_reuses_cache_until_source_changes(project, minifier) -> None:
    directory = project.module("core", {"autoload": True}, {"scripts/app.js": "var a = 1;"})
    _compile(project, minifier, compress=True)

    second = RecordingMinifier()
    compiler, result = _compile(project, second, compress=True)

    assert second.calls == []
    assert compiler.stats["cached"] == 1
    assert _data(result, "scripts") == ["min(var a = 1;)"]

    source = directory / "scripts" / "app.js"
    source.write_text("var a = 2;", encoding="utf-8")
    stamp = source.stat().st_mtime_ns + 1_000_000_000
    os.utime(source, ns=(stamp, stamp))

    third = RecordingMinifier()
    _, result = _compile(project, third, compress=True)

    assert third.calls == ["var a = 2;"]
    assert _data(result, "scripts") == ["min(var a = 2;)"]


def test_nocache_neither_reads_nor_writes_the_cache(project, minifier) -> None:
    directory = project.module("core", {"autoload": True}, {"scripts/app.js": "var a = 1;"})
    source = directory / "scripts" / "app.js"

    _compile(project, minifier, compress=True, cache=False)
    assert not project.cache_dir.exists()

    _compile(project, RecordingMinifier(), compress=True)
    entry = CompileCache(project.cache_dir).entry_path(source)
    entry.write_text("tampered", encoding="utf-8")
    stamp = source.stat().st_mtime_ns
    os.utime(entry, ns=(stamp, stamp))

    second = RecordingMinifier()
    compiler, result = _compile(project, second, compress=True, cache=False)

    assert second.calls == ["var a = 1;"]
    assert compiler.stats["cached"] == 0
    assert _data(result, "scripts") == ["min(var a = 1;)"]
    assert entry.read_text(encoding="utf-8") == "tampered"


def test_hook_can_replace_the_default_minifier(project, minifier) -> None:
    project.module(
        "core",
        {"autoload": True},
        {
            "styles/app.css": "a { color: red; }",
            "assets/secret.txt": "hidden",
            "compressor.py": """
            def styles(file):
                file.data = file.data.upper()
                return False

            def assets(file):
                return file.name != "secret.txt"
            """,
        },
    )

    compiler, result = _compile(project, minifier, compress=True)

    assert _data(result, "styles") == ["A { COLOR: RED; }"]
    assert minifier.calls == []
    assert not (project.output / "compressed" / "core" / "assets" / "secret.txt").exists()
    assert compiler.stats["skipped"] == 2

    cache = CompileCache(project.cache_dir)
    assert cache.get(result.files["styles"][0].path) == "A { COLOR: RED; }"


def test_hook_abort_stops_compilation(project, minifier) -> None:
    project.module(
        "core",
        {"autoload": True},
        {
            "scripts/app.js": "eval('x');",
            "compressor.py": """
            def scripts(file):
                if "eval" in file.data:
                    return ("Refusing to compress [%s]", file.name)
            """,
        },
    )

    with pytest.raises(CompressorError, match=r"Refusing to compress \[app.js\]"):
        _compile(project, minifier, compress=True)


def test_hook_with_unsupported_return_value_is_an_error(project, minifier) -> None:
    project.module(
        "core",
        {"autoload": True},
        {
            "scripts/app.js": "var a;",
            "compressor.py": "def scripts(file):\n    return 42\n",
        },
    )

    with pytest.raises(CompressorError, match="unsupported value"):
        _compile(project, minifier, compress=True)


@pytest.mark.parametrize(
    ("returned", "message"),
    [
        ('["Broken build", ["x"]]', "Broken build"),
        ('["Broken %s and %s", ["x"]]', "Broken %s and %s"),
        ('("Bad number %d", "x")', "Bad number %d"),
        ('["Broken %s", "app.js"]', "Broken app.js"),
    ],
)
def test_abort_message_with_mismatched_arguments_still_aborts(
    project, minifier, returned: str, message: str
) -> None:
    project.module(
        "core",
        {"autoload": True},
        {
            "scripts/app.js": "var a;",
            "compressor.py": f"def scripts(file):\n    return {returned}\n",
        },
    )

    with pytest.raises(CompressorError) as excinfo:
        _compile(project, minifier, compress=True)

    assert str(excinfo.value) == message
