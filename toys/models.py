"""Asset categories and the file model shared across the builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

from .utils import dom_slug, join_url, read_text

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .module import Module

STYLES = "styles"
SCRIPTS = "scripts"
ASSETS = "assets"
MODELS = "models"
VIEWS = "views"
LANG = "lang"

# Manifest declaration order; also the order files are collected per module.
CATEGORIES: Tuple[str, ...] = (STYLES, SCRIPTS, ASSETS, MODELS, VIEWS, LANG)

# Aggregated categories: models are spliced into scripts by the loader.
AGGREGATE_CATEGORIES: Tuple[str, ...] = (STYLES, SCRIPTS, ASSETS, VIEWS, LANG)

COMPRESSIBLE = frozenset({STYLES, SCRIPTS, MODELS, VIEWS})

# Categories that only exist to be inlined into the shell document.
INLINE_ONLY = frozenset({VIEWS, LANG})


@dataclass(eq=False)
class File:
    """One asset on disk, owned by exactly one module."""

    module: "Module" = field(repr=False)
    type: str
    path: Path
    data: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.name = self.path.name
        self.id = f"{self.module.id}-{dom_slug(self.name)}".lower()
        self.relative_path, root_url = self._locate()
        self.release_path = self.module.release_path / self.relative_path
        self.url = join_url(root_url, self.relative_path)
        self.compressible = self.type in COMPRESSIBLE

    @property
    def view_id(self) -> str:
        """DOM id used when the file is inlined as a view template."""
        return f"{self.module.id}-{dom_slug(self.path.stem)}-view".lower()

    def get_data(self) -> str:
        """Read, normalise, remember and return the file contents."""
        self.data = read_text(self.path)
        return self.data

    def _locate(self) -> Tuple[str, str]:
        """Return the path relative to its module and the url it hangs from."""
        module = self.module
        # A main file may live in the module root while sources are redirected.
        for root, url in ((module.sources_path, module.url), (module.base_path, module.base_url)):
            try:
                return self.path.relative_to(root).as_posix(), url
            except ValueError:
                continue
        return self.name, module.url


__all__ = [
    "AGGREGATE_CATEGORIES",
    "ASSETS",
    "CATEGORIES",
    "COMPRESSIBLE",
    "File",
    "INLINE_ONLY",
    "LANG",
    "MODELS",
    "SCRIPTS",
    "STYLES",
    "VIEWS",
]
