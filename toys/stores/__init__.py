"""Persistent stores used between builds."""

from .compile_cache import CompileCache

__all__ = ["CompileCache"]
