"""Terminal rendering: structured-input previews and reply sanitizing."""

from eo.rendering.sanitizer import sanitize  # noqa: F401
from eo.rendering.tabular import render_json, render_table  # noqa: F401

__all__ = ["render_json", "render_table", "sanitize"]
