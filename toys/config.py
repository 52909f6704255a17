"""Run options, project manifest and build settings (.toys.yml) loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import AliasNotDefined, ConfigError, PathNotFound
from .utils import as_list, join_url, load_json_file, normalize_path, relative_url

SETTINGS_FILENAME = ".toys.yml"
PROJECT_FILENAME = "toys.json"

COMPRESSED = "compressed"
UNCOMPRESSED = "uncompressed"

PROJECT_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "lang": "en",
        "languages": ["en"],
        "main_file": "main.tpl",
        "toys_filename": PROJECT_FILENAME,
        "compressor_filename": "compressor.py",
    }
)


@dataclass(frozen=True)
class ProjectConfig:
    """Project manifest merged over the builder defaults."""

    values: Mapping[str, Any]

    @property
    def lang(self) -> str:
        return str(self.values["lang"])

    @property
    def languages(self) -> List[str]:
        return [str(item) for item in self.values["languages"]]

    @property
    def main_file(self) -> str:
        return str(self.values["main_file"])

    @property
    def toys_filename(self) -> str:
        return str(self.values["toys_filename"])

    @property
    def compressor_filename(self) -> str:
        return str(self.values["compressor_filename"])

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)


def load_project_config(path: Path) -> ProjectConfig:
    """Load the project manifest; the first language becomes the default one."""
    merged: Dict[str, Any] = dict(PROJECT_DEFAULTS)
    merged.update(load_json_file(path))
    merged["languages"] = as_list(merged.get("languages"))
    if merged["languages"]:
        merged["lang"] = merged["languages"][0]
    return ProjectConfig(values=MappingProxyType(merged))


class PathAliases:
    """Named absolute paths registered once while options are resolved."""

    def __init__(self) -> None:
        self._paths: Dict[str, Path] = {}

    def set(self, alias: str, path: Path, *subpaths: str) -> Path:
        resolved = path.joinpath(*subpaths) if subpaths else path
        self._paths[alias] = resolved
        return resolved

    def get(self, alias: str, *subpaths: str) -> Path:
        try:
            base = self._paths[alias]
        except KeyError:
            raise AliasNotDefined("Paths alias [%s] not defined.", alias) from None
        parts = [normalize_path(part) for part in subpaths if part]
        return base.joinpath(*[part for part in parts if part])

    def __contains__(self, alias: object) -> bool:
        return alias in self._paths


class UrlAliases:
    """Named urls, relative to the directory the shell document is served from."""

    def __init__(self) -> None:
        self._urls: Dict[str, str] = {}

    def set(self, alias: str, url: str) -> str:
        self._urls[alias] = normalize_path(url)
        return self._urls[alias]

    def get(self, alias: str, *suburls: str) -> str:
        try:
            base = self._urls[alias]
        except KeyError:
            raise AliasNotDefined("URL alias [%s] not defined.", alias) from None
        return join_url(base, *suburls)

    def __contains__(self, alias: object) -> bool:
        return alias in self._urls


@dataclass
class RunOptions:
    """Everything one build needs to know, resolved once at the boundary."""

    compile: bool
    compress: bool
    cache: bool
    clean: bool
    paths: PathAliases
    urls: UrlAliases
    project: ProjectConfig
    make: Optional[str] = None

    @property
    def output_type(self) -> str:
        return COMPRESSED if self.compress else UNCOMPRESSED

    @classmethod
    def create(
        cls,
        sources: Path,
        output: Path,
        *,
        compile: bool = False,
        compress: bool = False,
        cache: bool = True,
        clean: bool = False,
        make: str | None = None,
        builder_path: Path | None = None,
        cache_path: Path | None = None,
        sources_url: str | None = None,
        release_url: str | None = None,
    ) -> "RunOptions":
        """Resolve flags, alias tables and the project manifest.

        ``compress`` implies ``compile``. The url of the sources and release
        trees default to paths relative to ``builder_path`` (the directory
        the shell document is served from, the working directory by default).
        """
        compile = compile or compress
        output_type = COMPRESSED if compress else UNCOMPRESSED

        sources = Path(sources).expanduser()
        if not sources.is_dir():
            raise PathNotFound('Path "%s" does not exist.', sources)

        paths = PathAliases()
        builder = paths.set("builder", Path(builder_path or Path.cwd()).expanduser().resolve())
        sources = paths.set("sources", sources.resolve())
        config_path = paths.set("config", sources / PROJECT_FILENAME)
        output = paths.set("output", Path(output).expanduser().resolve())
        paths.set("cache", Path(cache_path).expanduser().resolve() if cache_path else builder / ".toys" / "cache")
        release = paths.set("release", output, output_type)

        urls = UrlAliases()
        sources_link = urls.set("sources", sources_url if sources_url is not None else relative_url(builder, sources))
        urls.set("release", release_url if release_url is not None else relative_url(builder, release))
        urls.set("build", "." if compile else sources_link)

        project = load_project_config(config_path)
        paths.set("main_file", sources, project.main_file)

        return cls(
            compile=compile,
            compress=compress,
            cache=cache,
            clean=clean,
            paths=paths,
            urls=urls,
            project=project,
            make=make,
        )


@dataclass
class BuildSettings:
    """Defaults read from .toys.yml; command line flags take precedence."""

    root: Path
    sources: Optional[Path] = None
    output: Optional[Path] = None
    cache_dir: Optional[Path] = None
    compile: Optional[bool] = None
    compress: Optional[bool] = None
    cache: Optional[bool] = None
    clean: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def load_settings(config_path: Path) -> BuildSettings:
    """Load build settings from disk; a missing file yields empty settings."""
    config_file = _resolve_settings_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BuildSettings(root=root)

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError("Failed to parse %s: %s", config_file, exc) from exc
    if data is None:
        return BuildSettings(root=root)
    if not isinstance(data, dict):
        raise ConfigError("%s must contain a mapping at the root", config_file.name)

    known = {"sources", "output", "cache_dir", "compile", "compress", "cache", "clean"}
    return BuildSettings(
        root=root,
        sources=_as_path(root, data.get("sources")),
        output=_as_path(root, data.get("output")),
        cache_dir=_as_path(root, data.get("cache_dir")),
        compile=_as_bool(data.get("compile")),
        compress=_as_bool(data.get("compress")),
        cache=_as_bool(data.get("cache")),
        clean=_as_bool(data.get("clean")),
        extra={key: value for key, value in data.items() if key not in known},
    )


def _resolve_settings_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return config_path / SETTINGS_FILENAME
    return config_path


def _as_path(root: Path, value: Any) -> Optional[Path]:
    if not isinstance(value, str) or not value.strip():
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "BuildSettings",
    "COMPRESSED",
    "PROJECT_DEFAULTS",
    "PathAliases",
    "ProjectConfig",
    "RunOptions",
    "UNCOMPRESSED",
    "UrlAliases",
    "load_project_config",
    "load_settings",
]
