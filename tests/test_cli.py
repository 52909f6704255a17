"""CLI parser and command tests."""

from __future__ import annotations

import pytest

from toys.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "--verbose"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_build_flags_default_to_unset() -> None:
    args = _build_parser().parse_args(["build"])
    assert args.sources is None
    assert args.compile is None
    assert args.compress is None
    assert args.clean is None
    assert args.nocache is False
    assert args.make is None


def test_cli_accepts_build_flags() -> None:
    args = _build_parser().parse_args(
        ["build", "app", "-o", "out", "--compress", "--clean", "--nocache", "--make", "ui/menu"]
    )
    assert args.sources == "app"
    assert args.output == "out"
    assert args.compress is True
    assert args.clean is True
    assert args.nocache is True
    assert args.make == "ui/menu"


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 8000


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_build_prints_the_dev_document(project, monkeypatch, capsys) -> None:
    project.module("core", {"autoload": True}, {"scripts/a.js": "var a;"})
    monkeypatch.chdir(project.root)

    main(["build", "src", "--cache-dir", str(project.cache_dir)])

    out = capsys.readouterr().out
    assert '<script src="src/core/scripts/a.js"></script>' in out
    assert 'var modules = ["Core"];' in out


def test_build_compile_reports_the_index_location(project, monkeypatch, capsys) -> None:
    project.module("core", {"autoload": True}, {"scripts/a.js": "var a;"})
    monkeypatch.chdir(project.root)

    main(["build", "--compile", "--cache-dir", str(project.cache_dir)])

    assert capsys.readouterr().out.strip() == "Uncompressed version written to dist/uncompressed/index.html"
    assert (project.output / "uncompressed" / "core" / "scripts" / "a.js").is_file()


def test_build_reads_defaults_from_settings_file(project, monkeypatch, capsys) -> None:
    project.module("core", {"autoload": True}, {"scripts/a.js": "var a = 1;"})
    (project.root / ".toys.yml").write_text(
        "sources: src\noutput: public\ncompress: true\ncache_dir: .cache\n", encoding="utf-8"
    )
    monkeypatch.chdir(project.root)

    main(["build"])

    assert capsys.readouterr().out.strip() == "Compressed version written to public/compressed/index.html"
    index = (project.root / "public" / "compressed" / "index.html").read_text(encoding="utf-8")
    assert "var a=1;" in index


def test_make_prints_created_files(project, monkeypatch, capsys) -> None:
    monkeypatch.chdir(project.root)

    main(["make", "shop/cart"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "src/shop/cart/toys.json"
    assert "src/shop/cart/module.js" in lines


def test_build_failure_exits_with_message(project, monkeypatch, capsys) -> None:
    monkeypatch.chdir(project.root)

    with pytest.raises(SystemExit) as excinfo:
        main(["build", "missing"])

    assert excinfo.value.code == 1
    assert "toys build failed: Path" in capsys.readouterr().err


def test_make_existing_module_fails(project, monkeypatch, capsys) -> None:
    project.module("core")
    monkeypatch.chdir(project.root)

    with pytest.raises(SystemExit):
        main(["make", "core"])

    assert "Module [core] already exists." in capsys.readouterr().err
