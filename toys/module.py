"""Module wrapper: manifest loading, file discovery and compressor attachment."""

from __future__ import annotations

import glob
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from .compressor import Compressor, HookAction, HookOutcome, load_compressor
from .config import RunOptions
from .logging import get_logger
from .models import CATEGORIES, SCRIPTS, File
from .utils import as_list, classify, iter_files, join_url, load_json_file, normalize_path

MODULE_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "main": "module.js",
        "autoload": False,
        "relpath": "",
        "require": [],
        **{category: [f"{category}/*"] for category in CATEGORIES},
    }
)

logger = get_logger("module")


class Module:
    """A source directory carrying a manifest, identified by its namespace.

    ``base_path`` is the module directory; ``sources_path`` is where asset
    patterns are resolved, which differs when the manifest sets ``relpath``
    to vendor code from elsewhere.
    """

    def __init__(self, options: RunOptions, namespace: str, base_path: Path | None = None) -> None:
        self.namespace = normalize_path(namespace).lower()
        self.id = self.namespace.replace("/", "")
        self.name = self.namespace.rsplit("/", 1)[-1]
        self.class_name = classify(self.namespace)

        self.base_path = base_path or options.paths.get("sources", self.namespace)

        self.config = self._load_config(options)
        self.relpath = normalize_path(str(self.config["relpath"] or ""))

        self.sources_path = self.base_path / self.relpath if self.relpath else self.base_path
        self.release_path = options.paths.get("release", self.namespace)
        self.base_url = options.urls.get("build", self.namespace)
        self.url = join_url(self.base_url, "" if options.compile else self.relpath)

        self.compressor: Compressor | None = None
        if options.compress:
            self.compressor = self._load_compressor(options)

        self.files: Dict[str, List[File]] = {
            category: self._collect_files(category) for category in CATEGORIES
        }
        self._append_main_file()

    def __repr__(self) -> str:
        return f"Module(namespace={self.namespace!r})"

    @property
    def autoload(self) -> bool:
        return bool(self.config["autoload"])

    @property
    def requires(self) -> List[str]:
        return [normalize_path(str(item)).lower() for item in as_list(self.config["require"])]

    def _load_config(self, options: RunOptions) -> Mapping[str, Any]:
        manifest = load_json_file(self.base_path / options.project.toys_filename)
        config: Dict[str, Any] = dict(MODULE_DEFAULTS)
        config.update(manifest)
        for category in CATEGORIES:
            config[category] = [str(pattern) for pattern in as_list(config[category])]
        return MappingProxyType(config)

    def _load_compressor(self, options: RunOptions) -> Compressor | None:
        hook_file = self.base_path / options.project.compressor_filename
        if not hook_file.is_file():
            return None
        compressor = load_compressor(hook_file)
        if compressor.initialize is None:
            return compressor
        outcome = HookOutcome.from_result(compressor.initialize(self), hook="initialize")
        outcome.raise_for_abort()
        if outcome.action is HookAction.SKIP:
            logger.debug("Compression disabled by %s for module %s", hook_file.name, self.namespace)
            return None
        return compressor

    def _collect_files(self, category: str) -> List[File]:
        files: Dict[Path, File] = {}
        # Only the pattern is glob syntax, never the directory it is resolved in.
        root = glob.escape(str(self.sources_path))
        for pattern in self.config[category]:
            if (self.sources_path / pattern).is_dir():
                pattern = os.path.join(pattern, "*")
            for match in sorted(glob.glob(os.path.join(root, pattern))):
                path = Path(match)
                if path in files:
                    continue
                if path.is_file():
                    files[path] = File(self, category, path)
                elif path.is_dir():
                    for nested in iter_files(path):
                        if nested not in files:
                            files[nested] = File(self, category, nested)
        return list(files.values())

    def _append_main_file(self) -> None:
        main_file = self.base_path / str(self.config["main"])
        if not main_file.is_file():
            return
        # The entry point runs after every other script the module declares.
        scripts = [file for file in self.files[SCRIPTS] if file.path != main_file]
        scripts.append(File(self, SCRIPTS, main_file))
        self.files[SCRIPTS] = scripts


__all__ = ["MODULE_DEFAULTS", "Module"]
