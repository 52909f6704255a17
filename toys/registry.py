"""Module discovery and the namespace-indexed registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

from .config import RunOptions
from .errors import ModuleNotFound
from .logging import get_logger
from .module import Module
from .utils import normalize_path


@dataclass
class RegistryNode:
    """One namespace segment: the modules declared here plus nested segments."""

    modules: List[Module] = field(default_factory=list)
    children: Dict[str, "RegistryNode"] = field(default_factory=dict)

    def walk(self) -> Iterator[Module]:
        yield from self.modules
        for child in self.children.values():
            yield from child.walk()


class ModuleRegistry:
    """Namespace tree whose nodes may hold several modules each."""

    def __init__(self) -> None:
        self._root = RegistryNode()

    def add_module(self, namespace: str, module: Module) -> None:
        node = self._root
        for segment in _segments(namespace):
            node = node.children.setdefault(segment, RegistryNode())
        node.modules.append(module)

    def get_module(self, namespace: str) -> List[Module]:
        """Return every module at or below ``namespace``, in discovery order."""
        node = self._root
        for segment in _segments(namespace):
            try:
                node = node.children[segment]
            except KeyError:
                raise ModuleNotFound('Module "%s" not defined.', namespace) from None
        return list(node.walk())

    def has_module(self, namespace: str) -> bool:
        try:
            return bool(self.get_module(namespace))
        except ModuleNotFound:
            return False

    def modules(self) -> List[Module]:
        return list(self._root.walk())

    def __len__(self) -> int:
        return sum(1 for _ in self._root.walk())


class ModuleScanner:
    """Walks the sources tree and registers every directory holding a manifest."""

    def __init__(self, options: RunOptions) -> None:
        self.options = options
        self.logger = get_logger("registry")

    def scan(self) -> ModuleRegistry:
        registry = ModuleRegistry()
        sources = self.options.paths.get("sources")
        self._scan(sources, sources, registry)
        self.logger.debug("Scanner registered %d modules", len(registry))
        return registry

    def _scan(self, directory: Path, sources: Path, registry: ModuleRegistry) -> None:
        manifest_name = self.options.project.toys_filename
        for child in sorted(directory.iterdir()):
            if child.name.startswith(".") or not child.is_dir():
                continue
            if (child / manifest_name).is_file():
                namespace = child.relative_to(sources).as_posix().lower()
                self.logger.debug("Found module %s", namespace)
                registry.add_module(namespace, Module(self.options, namespace, base_path=child))
            # Modules may nest: keep descending whether or not this one qualified.
            self._scan(child, sources, registry)


def _segments(namespace: str) -> List[str]:
    return [segment for segment in normalize_path(namespace).lower().split("/") if segment]


__all__ = ["ModuleRegistry", "ModuleScanner", "RegistryNode"]
