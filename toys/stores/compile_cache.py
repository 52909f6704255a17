"""On-disk cache of compiled file contents, validated by source mtime."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Optional

from ..utils import remove_path


class CompileCache:
    """Flat directory of compiled outputs keyed by a hash of the source path.

    An entry is valid while its own modification time equals the source's;
    writing an entry stamps it with the source's current mtime. Contents are
    never hashed.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.hits = 0
        self.misses = 0

    def key(self, source: Path) -> str:
        return hashlib.sha256(str(source.resolve()).encode("utf-8")).hexdigest()

    def entry_path(self, source: Path) -> Path:
        return self.path / self.key(source)

    def get(self, source: Path) -> Optional[str]:
        entry = self.entry_path(source)
        try:
            fresh = entry.stat().st_mtime_ns == source.stat().st_mtime_ns
        except FileNotFoundError:
            fresh = False
        if not fresh:
            self.misses += 1
            return None
        self.hits += 1
        return entry.read_text(encoding="utf-8")

    def set(self, source: Path, data: str) -> None:
        entry = self.entry_path(source)
        self.path.mkdir(parents=True, exist_ok=True)
        entry.write_text(data, encoding="utf-8")
        stat_result = source.stat()
        os.utime(entry, ns=(stat_result.st_atime_ns, stat_result.st_mtime_ns))

    def clear(self) -> None:
        remove_path(self.path)
        self.hits = 0
        self.misses = 0


__all__ = ["CompileCache"]
