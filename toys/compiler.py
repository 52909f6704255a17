"""Copies or compresses aggregated files into the release tree."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from .compressor import CONTINUE, HookOutcome
from .config import RunOptions
from .logging import get_logger
from .minifiers import Minifier, default_minifiers
from .models import INLINE_ONLY, File
from .stores import CompileCache
from .utils import copy_file


class Compiler:
    """Applies the copy or minify action to every file of a load result.

    Compiling is a no-op outside compile mode. Without compression every
    file is copied as is. With compression, non-compressible files go
    through their module's hook then get copied, and compressible files are
    read, passed through the hook and the category minifier, and cached.
    Views and language files are never copied to the release tree.
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
        self.minifiers = minifiers if minifiers is not None else default_minifiers()
        self.logger = get_logger("compiler")
        self.stats: Dict[str, int] = {"copied": 0, "minified": 0, "cached": 0, "skipped": 0}

    def compile(self, files: Mapping[str, Sequence[File]]) -> None:
        if not self.options.compile:
            return
        action = self.compress_file if self.options.compress else self.copy_file
        for category, category_files in files.items():
            self.logger.debug("Compiling %d %s file(s)", len(category_files), category)
            for file in category_files:
                action(file)
        self.logger.info(
            "Compiled files: %d copied, %d minified, %d from cache, %d skipped",
            self.stats["copied"],
            self.stats["minified"],
            self.stats["cached"],
            self.stats["skipped"],
        )

    def copy_file(self, file: File) -> None:
        if file.type in INLINE_ONLY:
            return
        copy_file(file.path, file.release_path)
        self.stats["copied"] += 1
        self.logger.debug("Copied %s", file.relative_path)

    def compress_file(self, file: File) -> None:
        if not file.compressible:
            if self._call_hook(file).proceed:
                self.copy_file(file)
            else:
                self._skipped(file)
            return

        if self.options.cache:
            cached = self.cache.get(file.path)
            if cached is not None:
                file.data = cached
                self.stats["cached"] += 1
                self.logger.debug("Cache hit for %s", file.relative_path)
                return

        file.get_data()
        if self._call_hook(file).proceed:
            file.data = self.minifiers[file.type].minify(file.data or "")
            self.stats["minified"] += 1
        else:
            self._skipped(file)

        if self.options.cache:
            self.cache.set(file.path, file.data or "")

    def _call_hook(self, file: File) -> HookOutcome:
        compressor = file.module.compressor
        if compressor is None:
            return CONTINUE
        return compressor.call(file.type, file)

    def _skipped(self, file: File) -> None:
        self.stats["skipped"] += 1
        self.logger.debug("Compressor hook skipped default action for %s", file.relative_path)


__all__ = ["Compiler"]
