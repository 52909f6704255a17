"""Shell document rendering."""

from .pages import render_confirmation_page, render_error_page
from .renderer import TAG_PATTERN, TemplateRenderer, create_shell_environment, stringify

__all__ = [
    "TAG_PATTERN",
    "TemplateRenderer",
    "create_shell_environment",
    "render_confirmation_page",
    "render_error_page",
    "stringify",
]
