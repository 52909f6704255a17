"""Minifier interface and the default implementation per asset category."""

from __future__ import annotations

from functools import lru_cache
from typing import Mapping, Protocol

import rcssmin
import rjsmin

from .models import MODELS, SCRIPTS, STYLES, VIEWS
from .utils import strip_leading_comments


class Minifier(Protocol):
    def minify(self, data: str) -> str:
        """Return the minified form of ``data``."""


class CssMinifier:
    def minify(self, data: str) -> str:
        return strip_leading_comments(rcssmin.cssmin(data).strip())


class JsMinifier:
    def minify(self, data: str) -> str:
        data = rjsmin.jsmin(data).replace("\n", " ")
        return strip_leading_comments(data.strip())


class HtmlMinifier:
    """Views are inlined verbatim."""

    def minify(self, data: str) -> str:
        return data


@lru_cache(maxsize=None)
def default_minifiers() -> Mapping[str, Minifier]:
    """Return the process-wide minifier for every compressible category."""
    js = JsMinifier()
    return {STYLES: CssMinifier(), SCRIPTS: js, MODELS: js, VIEWS: HtmlMinifier()}


__all__ = ["CssMinifier", "HtmlMinifier", "JsMinifier", "Minifier", "default_minifiers"]
