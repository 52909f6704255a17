"""CLI entrypoints for toys commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .builder import Builder
from .config import BuildSettings, RunOptions, load_settings
from .errors import ToysError
from .logging import configure_logging
from .registry import ModuleScanner
from .scaffold import Scaffolder

DEFAULT_SOURCES = Path("src")
DEFAULT_OUTPUT = Path("dist")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Log every build phase and per-file decision.",
    )


def _add_sources_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "sources",
        nargs="?",
        default=None,
        help="Path to the project sources root (defaults to ./src or .toys.yml).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Release directory (defaults to ./dist or .toys.yml).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toys",
        description="Discover, compile and assemble Toys modules.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Build settings file (defaults to ./.toys.yml).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Render the dev shell, or compile a release with --compile.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_sources_argument(build_parser)
    _add_output_option(build_parser)
    build_parser.add_argument(
        "--compile",
        action="store_true",
        default=None,
        help="Copy module files into the release tree and write index.html.",
    )
    build_parser.add_argument(
        "--compress",
        action="store_true",
        default=None,
        help="Compile and minify styles, scripts and views into index.html.",
    )
    build_parser.add_argument(
        "--nocache",
        action="store_true",
        help="Ignore and do not update the compile cache.",
    )
    build_parser.add_argument(
        "--clean",
        action="store_true",
        default=None,
        help="Remove the compile cache and previous releases first.",
    )
    build_parser.add_argument(
        "--make",
        metavar="NAMESPACE",
        default=None,
        help="Scaffold a new module before building.",
    )
    build_parser.add_argument(
        "--cache-dir",
        default=None,
        help="Compile cache directory (defaults to ./.toys/cache).",
    )

    make_parser = subparsers.add_parser(
        "make",
        help="Scaffold a new module under the given namespace.",
    )
    _add_verbose_option(make_parser, suppress_default=True)
    make_parser.add_argument("namespace", help="Namespace of the module to create.")
    _add_sources_argument(make_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the builder over HTTP (flags passed as query parameters).",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_sources_argument(serve_parser)
    _add_output_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for toys commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        settings = load_settings(Path(args.config) if args.config else Path.cwd())
        sources = _resolve(args.sources, settings.sources, DEFAULT_SOURCES)

        if args.command == "build":
            _run_build(args, settings, sources)
        elif args.command == "make":
            options = RunOptions.create(sources, _resolve(None, settings.output, DEFAULT_OUTPUT))
            registry = ModuleScanner(options).scan()
            for path in Scaffolder(options, registry).make(args.namespace):
                print(_relativize(path))
        elif args.command == "serve":
            from .service import run_service

            run_service(
                sources,
                _resolve(args.output, settings.output, DEFAULT_OUTPUT),
                host=args.host,
                port=args.port,
            )
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ToysError as exc:
        parser.exit(1, f"toys {args.command} failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"toys {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_build(args: argparse.Namespace, settings: BuildSettings, sources: Path) -> None:
    options = RunOptions.create(
        sources,
        _resolve(args.output, settings.output, DEFAULT_OUTPUT),
        compile=_flag(args.compile, settings.compile),
        compress=_flag(args.compress, settings.compress),
        cache=False if args.nocache else _flag(settings.cache, None, default=True),
        clean=_flag(args.clean, settings.clean),
        make=args.make,
        cache_path=Path(args.cache_dir) if args.cache_dir else settings.cache_dir,
    )
    result = Builder(options).build()
    if result.index_path is None:
        print(result.output)
    else:
        label = result.output_type.capitalize()
        print(f"{label} version written to {_relativize(result.index_path)}")


def _resolve(value: str | None, configured: Path | None, default: Path) -> Path:
    if value:
        return Path(value)
    return configured or default


def _flag(value: bool | None, configured: bool | None, *, default: bool = False) -> bool:
    if value is not None:
        return bool(value)
    if configured is not None:
        return configured
    return default


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
