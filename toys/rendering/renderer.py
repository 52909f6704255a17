"""Shell template execution and ``{{tag}}`` resolution."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import RunOptions
from ..errors import PathNotFound
from ..loader import LoadResult
from ..logging import get_logger
from ..models import LANG, SCRIPTS, STYLES, VIEWS, File
from ..utils import load_json_file, normalize_contents, read_text

TAG_PATTERN = re.compile(r"\{\{([^}]+?)\}\}")

_INDENT = "    "


def create_shell_environment(search_path: Path) -> Environment:
    """Jinja environment whose output syntax leaves ``{{tag}}`` untouched."""
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        autoescape=False,
        keep_trailing_newline=True,
        variable_start_string="[[",
        variable_end_string="]]",
        undefined=StrictUndefined,
    )


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return _to_json(value)


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class TemplateRenderer:
    """Renders the shell document for one build.

    Tags resolve independently and in one pass, first match wins: a render
    handler, then a project configuration key, then a build state field.
    Unknown tags are left as written.
    """

    def __init__(
        self,
        options: RunOptions,
        result: LoadResult,
        *,
        state: Mapping[str, Any] | None = None,
    ) -> None:
        self.options = options
        self.result = result
        self.state = dict(state or {})
        self.logger = get_logger("rendering")
        self.handlers: Dict[str, Callable[[], str]] = {
            "styles": self.render_styles_tag,
            "scripts": self.render_scripts_tag,
            "views": self.render_views_tag,
            "config": self.render_config_tag,
            "texts": self.render_texts_tag,
            "modules": self.render_modules_tag,
        }

    def render(self) -> str:
        buffer = normalize_contents(self.execute_shell())
        return self.substitute(buffer)

    def execute_shell(self) -> str:
        main_file = self.options.paths.get("main_file")
        if not main_file.is_file():
            raise PathNotFound('Path "%s" does not exist.', main_file)
        env = create_shell_environment(main_file.parent)
        template = env.get_template(main_file.name)
        return template.render(
            config=self.options.project.as_dict(),
            options=self.options,
            modules=list(self.result.startup),
            files=self.result.files,
            state=self.state,
        )

    def substitute(self, buffer: str) -> str:
        return TAG_PATTERN.sub(self._resolve_tag, buffer)

    def resolve(self, key: str) -> str | None:
        handler = self.handlers.get(key)
        if handler is not None:
            return handler()
        if key in self.options.project:
            return stringify(self.options.project.get(key))
        if key in self.state:
            return stringify(self.state[key])
        return None

    def _resolve_tag(self, match: "re.Match[str]") -> str:
        key = match.group(1).strip()
        value = self.resolve(key)
        if value is None:
            self.logger.debug("Unresolved tag {{%s}} left in output", key)
            return match.group(0)
        return value

    # ------------------------------------------------------------------
    # Render handlers

    def render_styles_tag(self) -> str:
        return self._render_assets(STYLES)

    def render_scripts_tag(self) -> str:
        return self._render_assets(SCRIPTS)

    def render_views_tag(self) -> str:
        views = self.result.files[VIEWS]
        if not views:
            return ""
        lines = [
            f'<script type="text/html" id="{view.view_id}">{read_text(view.path)}</script>'
            for view in views
        ]
        return _render_collection(VIEWS, lines)

    def render_config_tag(self) -> str:
        return _to_json(self.options.project.as_dict())

    def render_texts_tag(self) -> str:
        compiled: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for file in self.result.files[LANG]:
            texts = load_json_file(file.path)
            language = compiled.setdefault(file.path.stem, {})
            language.setdefault(file.module.class_name, {}).update(texts)
        return _to_json(compiled)

    def render_modules_tag(self) -> str:
        return _to_json(list(self.result.startup))

    def _render_assets(self, category: str) -> str:
        files: Sequence[File] = self.result.files[category]
        if not files:
            return ""
        if self.options.compress:
            if category == STYLES:
                opening, closing = '<style type="text/css">', "</style>"
            else:
                opening, closing = '<script type="text/javascript">', "</script>"
            lines = [opening]
            lines.extend(f"/* ===>>> {file.url} */{file.data or ''}" for file in files)
            lines.append(closing)
        elif category == STYLES:
            lines = [f'<link href="{file.url}" rel="stylesheet">' for file in files]
        else:
            lines = [f'<script src="{file.url}"></script>' for file in files]
        return _render_collection(category, lines)


def _render_collection(label: str, lines: List[str], depth: int = 2) -> str:
    indent = _INDENT * depth
    body = "\n".join(f"{indent}{line}" for line in lines)
    return f"<!-- {label.capitalize()} -->\n{body}"


__all__ = ["TAG_PATTERN", "TemplateRenderer", "create_shell_environment", "stringify"]
