"""Exception types raised by the toys builder.

Every error is fatal for the build that raised it. Messages accept
printf-style arguments so call sites read like::

    raise ModuleNotFound('Module "%s" not defined.', namespace)
"""

from __future__ import annotations


class ToysError(Exception):
    """Base class for builder errors with optional message formatting."""

    def __init__(self, message: str, *args: object) -> None:
        if args:
            message = message % args
        self.message = message
        super().__init__(message)


class PathNotFound(ToysError):
    """Raised when a required filesystem path does not exist."""


class AliasNotDefined(ToysError):
    """Raised when a path or url alias is read before being registered."""


class ModuleNotFound(ToysError):
    """Raised when a namespace is absent from the module registry."""


class ModuleAlreadyExists(ToysError):
    """Raised when scaffolding targets a namespace that already holds a module."""


class ManifestDecodeError(ToysError):
    """Raised when a module or project manifest is not a valid JSON object."""


class CompressorError(ToysError):
    """Raised when a compressor hook aborts the build."""


class ConfigError(ToysError):
    """Raised when the build settings file cannot be parsed."""


__all__ = [
    "AliasNotDefined",
    "CompressorError",
    "ConfigError",
    "ManifestDecodeError",
    "ModuleAlreadyExists",
    "ModuleNotFound",
    "PathNotFound",
    "ToysError",
]
