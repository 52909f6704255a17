"""Module scaffolding: writes the boilerplate of a new module."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from jinja2 import DictLoader, Environment

from .config import RunOptions
from .errors import ModuleAlreadyExists
from .logging import get_logger
from .models import CATEGORIES
from .module import MODULE_DEFAULTS
from .registry import ModuleRegistry
from .utils import classify, normalize_path

_TEMPLATES = {
    "manifest.json": "{{ manifest }}\n",
    "lang.json": '{\n    "name": "{{ class_name }}"\n}\n',
    "module.js": "var {{ class_name }} = ToysModule.extend(\n{\n    \n});\n",
    "model.js": "var {{ class_name }}Model = ToysModel.extend(\n{\n    \n});\n",
    "default.css": "#{{ id }}\n{\n    \n}\n",
    "default.tpl": (
        '<div id="{{ id }}">\n'
        "    <h1>{{ class_name }}</h1>\n"
        "    <p>Default view at {{ path }}.</p>\n"
        "</div>\n"
    ),
}

_env = Environment(loader=DictLoader(_TEMPLATES), autoescape=False, keep_trailing_newline=True)


class Scaffolder:
    """Creates the directory layout and starter files of a module."""

    def __init__(self, options: RunOptions, registry: ModuleRegistry) -> None:
        self.options = options
        self.registry = registry
        self.logger = get_logger("scaffold")

    def make(self, namespace: str) -> List[Path]:
        """Write a new module under ``namespace`` and return the created files."""
        namespace = normalize_path(namespace.strip().lower())
        if self.registry.has_module(namespace):
            raise ModuleAlreadyExists("Module [%s] already exists.", namespace)

        class_name = classify(namespace)
        dom_id = class_name.lower()
        base_path = self.options.paths.get("sources", namespace)
        for category in CATEGORIES:
            (base_path / category).mkdir(parents=True, exist_ok=True)

        manifest = json.dumps(dict(MODULE_DEFAULTS), indent=4)
        outputs = {
            base_path / self.options.project.toys_filename: ("manifest.json", {"manifest": manifest}),
            base_path / "lang" / f"{self.options.project.lang}.json": ("lang.json", {"class_name": class_name}),
            base_path / str(MODULE_DEFAULTS["main"]): ("module.js", {"class_name": class_name}),
            base_path / "models" / "model.js": ("model.js", {"class_name": class_name}),
            base_path / "styles" / "default.css": ("default.css", {"id": dom_id}),
            base_path / "views" / "default.tpl": (
                "default.tpl",
                {"id": dom_id, "class_name": class_name, "path": f"{namespace}/views/default.tpl"},
            ),
        }

        written: List[Path] = []
        for path, (template_name, context) in outputs.items():
            path.write_text(_env.get_template(template_name).render(**context), encoding="utf-8")
            written.append(path)

        self.logger.info("Created module %s (%s) at %s", namespace, class_name, base_path)
        return written


__all__ = ["Scaffolder"]
