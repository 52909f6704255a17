"""Build pipeline: scan, scaffold, load, compile, render and write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .compiler import Compiler
from .config import COMPRESSED, UNCOMPRESSED, RunOptions
from .loader import DependencyLoader, LoadResult
from .logging import get_logger, log_phase
from .minifiers import Minifier
from .registry import ModuleRegistry, ModuleScanner
from .rendering import TemplateRenderer, render_confirmation_page
from .scaffold import Scaffolder
from .stores import CompileCache
from .utils import join_url, remove_path

INDEX_FILENAME = "index.html"


@dataclass
class BuildResult:
    """Outcome of one build invocation."""

    output: str
    document: str
    output_type: str
    index_path: Optional[Path] = None
    startup: List[str] = field(default_factory=list)
    loaded: List[str] = field(default_factory=list)
    scaffolded: List[Path] = field(default_factory=list)


class Builder:
    """Runs one build end to end.

    Dev builds return the shell document with assets referenced by url.
    Compile builds also write the release tree and ``index.html``; their
    ``output`` is the confirmation page linking to it.
    """

    def __init__(
        self,
        options: RunOptions,
        *,
        cache: CompileCache | None = None,
        minifiers: Optional[Mapping[str, Minifier]] = None,
    ) -> None:
        self.options = options
        self.cache = cache if cache is not None else CompileCache(options.paths.get("cache"))
        self.minifiers = minifiers
        self.logger = get_logger("builder")
        self.registry: ModuleRegistry | None = None
        self.result: LoadResult | None = None

    @property
    def state(self) -> Dict[str, Any]:
        """Build fields reachable from shell template tags."""
        return {
            "compile": self.options.compile,
            "compress": self.options.compress,
            "cache": self.options.cache,
            "clean": self.options.clean,
            "output_type": self.options.output_type,
        }

    def build(self, *, base_url: str = "") -> BuildResult:
        """Run every phase in order; ``base_url`` prefixes the confirmation link."""
        options = self.options
        self.logger.info(
            "Starting %s build of %s",
            options.output_type if options.compile else "dev",
            options.paths.get("sources"),
        )

        with log_phase(self.logger, "prepare"):
            self._prepare()

        with log_phase(self.logger, "scan"):
            self.registry = ModuleScanner(options).scan()
        self.logger.debug("Discovered %d modules", len(self.registry))

        scaffolded: List[Path] = []
        if options.make:
            with log_phase(self.logger, "scaffold"):
                scaffolded = Scaffolder(options, self.registry).make(options.make)

        with log_phase(self.logger, "load"):
            self.result = DependencyLoader(self.registry).load_autoload()

        with log_phase(self.logger, "compile"):
            Compiler(options, cache=self.cache, minifiers=self.minifiers).compile(self.result.files)

        with log_phase(self.logger, "render"):
            document = TemplateRenderer(options, self.result, state=self.state).render()

        build = BuildResult(
            output=document,
            document=document,
            output_type=options.output_type,
            startup=list(self.result.startup),
            loaded=list(self.result.loaded),
            scaffolded=scaffolded,
        )
        if options.compile:
            build.index_path = self._write_index(document)
            build.output = render_confirmation_page(
                options.output_type,
                join_url(base_url.rstrip("/"), options.urls.get("release"), INDEX_FILENAME),
                options.paths.get("release"),
            )
            self.logger.info("Release written to %s", build.index_path)
        return build

    def _prepare(self) -> None:
        paths = self.options.paths
        if self.options.clean:
            self.cache.clear()
            for variant in (COMPRESSED, UNCOMPRESSED):
                if remove_path(paths.get("output", variant)):
                    self.logger.debug("Removed %s", paths.get("output", variant))
        if self.options.compile:
            self.cache.path.mkdir(parents=True, exist_ok=True)
            paths.get("release").mkdir(parents=True, exist_ok=True)

    def _write_index(self, document: str) -> Path:
        release = self.options.paths.get("release")
        release.mkdir(parents=True, exist_ok=True)
        index_path = release / INDEX_FILENAME
        index_path.write_text(document, encoding="utf-8")
        return index_path


__all__ = ["BuildResult", "Builder", "INDEX_FILENAME"]
