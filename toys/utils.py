"""Path, text and manifest helpers shared across the builder."""

from __future__ import annotations

import json
import os
import re
import shutil
from pathlib import Path
from typing import Any, Dict, Iterator, List

from .errors import ManifestDecodeError, PathNotFound

_SEPARATORS = re.compile(r"[\\/]+")
_CLASS_SPLIT = re.compile(r"[^a-z0-9]+", re.IGNORECASE)
_DOM_UNSAFE = re.compile(r"[^a-zA-Z0-9_\-]+")
_LEADING_COMMENT = re.compile(r"^/\*.*?\*/", re.DOTALL)

_EMPTY_MANIFEST = "Empty manifest (empty file ?)."
_DEPTH_EXCEEDED = "Maximum stack depth exceeded."
_CONTROL_CHAR = "Unexpected control character found."
_SYNTAX_ERROR = "Syntax error, malformed JSON."
_BAD_UTF8 = "Malformed UTF-8 characters."
_NOT_AN_OBJECT = "Manifest root must be a JSON object."


def normalize_path(path: str) -> str:
    """Collapse separators to ``/`` and strip leading/trailing separators."""
    return _SEPARATORS.sub("/", path).strip("/")


def join_url(base: str, *parts: str) -> str:
    """Join url segments, skipping empty ones."""
    segments = [base] + [normalize_path(part) for part in parts]
    return "/".join(segment for segment in segments if segment)


def relative_url(from_dir: Path, to_path: Path) -> str:
    """Return the posix relative path leading from ``from_dir`` to ``to_path``."""
    relative = os.path.relpath(to_path, from_dir)
    return normalize_path(Path(relative).as_posix())


def normalize_contents(content: str) -> str:
    """Unify line endings, expand tabs to four spaces and trim outer whitespace."""
    content = content.replace("\r\n", "\n")
    content = content.replace("\t", "    ")
    return content.strip()


def read_text(path: Path) -> str:
    """Read a text file and return its normalised contents."""
    return normalize_contents(path.read_text(encoding="utf-8"))


def load_json_file(path: Path) -> Dict[str, Any]:
    """Decode a JSON manifest, classifying failures into a readable reason."""
    if not path.is_file():
        raise PathNotFound('Path "%s" does not exist.', path)
    try:
        content = normalize_contents(path.read_bytes().decode("utf-8-sig"))
    except UnicodeDecodeError:
        raise ManifestDecodeError("%s for decoding : %s", _BAD_UTF8, path) from None
    if not content:
        raise ManifestDecodeError("%s for decoding : %s", _EMPTY_MANIFEST, path)
    try:
        data = json.loads(content)
    except RecursionError:
        raise ManifestDecodeError("%s for decoding : %s", _DEPTH_EXCEEDED, path) from None
    except json.JSONDecodeError as exc:
        reason = _CONTROL_CHAR if "control character" in exc.msg else _SYNTAX_ERROR
        raise ManifestDecodeError("%s for decoding : %s", reason, path) from exc
    if not isinstance(data, dict):
        raise ManifestDecodeError("%s for decoding : %s", _NOT_AN_OBJECT, path)
    return data


def classify(value: str) -> str:
    """Return a PascalCase identifier: ``ui/my-widget`` becomes ``UiMyWidget``."""
    parts = _CLASS_SPLIT.split(value)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def dom_slug(value: str) -> str:
    """Replace runs of characters that are unsafe in a DOM id with ``-``."""
    return _DOM_UNSAFE.sub("-", value)


def strip_leading_comments(data: str) -> str:
    """Remove every ``/* ... */`` block that opens the text."""
    while data.startswith("/*"):
        match = _LEADING_COMMENT.match(data)
        if match is None:
            break
        data = data[match.end():].strip()
    return data


def iter_files(directory: Path) -> Iterator[Path]:
    """Yield every file below ``directory``, depth first, in sorted order."""
    for child in sorted(directory.iterdir()):
        if child.is_dir():
            yield from iter_files(child)
        elif child.is_file():
            yield child


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def copy_file(source: Path, destination: Path) -> None:
    """Byte-copy ``source`` to ``destination``, creating parent directories."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)


def remove_path(path: Path) -> bool:
    """Remove a file or a whole directory tree; return False when absent."""
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


__all__ = [
    "as_list",
    "classify",
    "copy_file",
    "dom_slug",
    "iter_files",
    "join_url",
    "load_json_file",
    "normalize_contents",
    "normalize_path",
    "read_text",
    "relative_url",
    "remove_path",
    "strip_leading_comments",
]
