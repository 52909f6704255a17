"""Dependency-ordered loading of autoload modules into per-category aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .logging import get_logger
from .models import AGGREGATE_CATEGORIES, MODELS, SCRIPTS, File
from .registry import ModuleRegistry


@dataclass
class LoadResult:
    """Aggregated files per category plus the startup order of module classes."""

    files: Dict[str, List[File]] = field(
        default_factory=lambda: {category: [] for category in AGGREGATE_CATEGORIES}
    )
    startup: List[str] = field(default_factory=list)
    loaded: List[str] = field(default_factory=list)


class DependencyLoader:
    """Depth-first, memoised walk over ``require`` edges.

    A namespace is marked as loaded before its requirements are visited, so a
    diamond contributes once and a ``require`` cycle stops at the second visit
    instead of recursing forever. Cycles are therefore accepted, not rejected.
    """

    def __init__(self, registry: ModuleRegistry) -> None:
        self.registry = registry
        self.logger = get_logger("loader")
        self._result = LoadResult()
        self._visited: Set[str] = set()

    def load_autoload(self) -> LoadResult:
        """Load every autoload module, in registry discovery order."""
        self._result = LoadResult()
        self._visited = set()
        for module in self.registry.modules():
            if module.autoload:
                self.load(module.namespace)
        self.logger.debug(
            "Loaded %d modules; startup order: %s",
            len(self._result.loaded),
            ", ".join(self._result.startup) or "(none)",
        )
        return self._result

    def load(self, namespace: str) -> LoadResult:
        for module in self.registry.get_module(namespace):
            if module.namespace in self._visited:
                continue
            self._visited.add(module.namespace)
            self._result.loaded.append(module.namespace)

            for required in module.requires:
                self.load(required)

            if module.autoload:
                self._result.startup.append(module.class_name)

            for category in AGGREGATE_CATEGORIES:
                contribution = module.files[category]
                if category == SCRIPTS:
                    # Models precede their own module's scripts, not everyone's.
                    contribution = module.files[MODELS] + contribution
                self._result.files[category].extend(contribution)
        return self._result


__all__ = ["DependencyLoader", "LoadResult"]
