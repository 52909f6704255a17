"""Per-module compressor hooks and the outcome protocol they follow.

A module may ship a ``compressor.py`` next to its manifest. Its top-level
functions named ``initialize``, ``assets``, ``styles``, ``scripts`` and
``views`` are picked up as hooks::

    def initialize(module):
        return False  # disable compression for this module

    def styles(file):
        file.data = file.data.upper()
        return False  # keep file.data, skip the default minifier

    def scripts(file):
        return ("Unsupported script [%s]", [file.name])  # abort the build

Returning ``None`` or ``True`` lets the default action run.
"""

from __future__ import annotations

import importlib.util
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .errors import CompressorError
from .logging import get_logger

HOOK_NAMES = ("initialize", "assets", "styles", "scripts", "views")

Hook = Callable[[Any], Any]

logger = get_logger("compressor")


class HookAction(Enum):
    CONTINUE = "continue"
    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True)
class HookOutcome:
    """Tagged result of one hook call."""

    action: HookAction
    message: Optional[str] = None

    @classmethod
    def from_result(cls, result: Any, *, hook: str = "hook") -> "HookOutcome":
        if result is None or result is True:
            return CONTINUE
        if result is False:
            return SKIP
        if isinstance(result, str):
            return cls(HookAction.ABORT, result)
        if isinstance(result, (list, tuple)) and len(result) == 2 and isinstance(result[0], str):
            message, args = result
            return cls(HookAction.ABORT, _format_message(message, args))
        raise CompressorError("Compressor hook [%s] returned an unsupported value: %r", hook, result)

    def raise_for_abort(self) -> "HookOutcome":
        if self.action is HookAction.ABORT:
            raise CompressorError(self.message or "Compressor aborted the build.")
        return self

    @property
    def proceed(self) -> bool:
        return self.action is HookAction.CONTINUE


def _format_message(message: str, args: Any) -> str:
    values = tuple(args) if isinstance(args, (list, tuple)) else (args,)
    try:
        return message % values
    except (TypeError, ValueError):
        # Placeholders that do not line up with the arguments leave the message raw.
        return message


CONTINUE = HookOutcome(HookAction.CONTINUE)
SKIP = HookOutcome(HookAction.SKIP)


@dataclass
class Compressor:
    """Explicit set of optional hook slots loaded from a module hook file."""

    initialize: Optional[Hook] = None
    assets: Optional[Hook] = None
    styles: Optional[Hook] = None
    scripts: Optional[Hook] = None
    views: Optional[Hook] = None
    source: Optional[Path] = None

    @classmethod
    def from_mapping(cls, hooks: Dict[str, Any], *, source: Path | None = None) -> "Compressor":
        slots = {name: hooks[name] for name in HOOK_NAMES if callable(hooks.get(name))}
        return cls(source=source, **slots)

    def has_hook(self, name: str) -> bool:
        return name in HOOK_NAMES and getattr(self, name) is not None

    def call(self, name: str, target: Any) -> HookOutcome:
        """Run hook ``name`` and return its outcome, raising on abort."""
        hook = getattr(self, name) if name in HOOK_NAMES else None
        if hook is None:
            return CONTINUE
        return HookOutcome.from_result(hook(target), hook=name).raise_for_abort()


def load_compressor(path: Path) -> Compressor:
    """Execute a hook file and collect its hook functions."""
    module_name = f"_toys_compressor_{abs(hash(str(path)))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise CompressorError("Unable to load compressor file %s", path)
    namespace = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(namespace)
    compressor = Compressor.from_mapping(vars(namespace), source=path)
    logger.debug(
        "Loaded compressor %s with hooks: %s",
        path,
        ", ".join(name for name in HOOK_NAMES if compressor.has_hook(name)) or "none",
    )
    return compressor


__all__ = [
    "CONTINUE",
    "Compressor",
    "HOOK_NAMES",
    "HookAction",
    "HookOutcome",
    "SKIP",
    "load_compressor",
]
