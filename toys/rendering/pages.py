"""Small HTML pages shown at the boundary: build confirmation and errors."""

from __future__ import annotations

import traceback
from pathlib import Path

from jinja2 import DictLoader, Environment

_TEMPLATES = {
    "confirmation.html": (
        '<html lang="en"><head><meta charset="utf-8">'
        "<title>Toys builder - {{ label }} version</title></head><body>"
        "<h1>{{ label }} version</h1><hr /><pre>"
        '<b>Live location :</b> <a href="{{ link }}">{{ link }}</a>\n'
        "<b>File location :</b> {{ location }}"
        "</pre></body></html>"
    ),
    "error.html": (
        '<html lang="en"><head><meta charset="utf-8">'
        "<title>Error !</title></head><body>"
        "<h1>Error !</h1><hr /><pre>"
        "<b>Message :</b> {{ message }}\n"
        "<b>File    :</b> {{ file }}\n"
        "<b>Line    :</b> {{ line }}\n"
        "</pre></body></html>"
    ),
}

_env = Environment(loader=DictLoader(_TEMPLATES), autoescape=True)


def render_confirmation_page(output_type: str, link: str, location: Path) -> str:
    """Page pointing at a freshly written release."""
    return _env.get_template("confirmation.html").render(
        label=output_type.capitalize(), link=link, location=str(location)
    )


def render_error_page(exc: BaseException) -> str:
    """Page describing a fatal build error and where it was raised."""
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    origin = frames[-1] if frames else None
    return _env.get_template("error.html").render(
        message=str(exc),
        file=origin.filename if origin else "",
        line=origin.lineno if origin else "",
    )


__all__ = ["render_confirmation_page", "render_error_page"]
