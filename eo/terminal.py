from __future__ import annotations

import os
import shutil
import sys
from typing import Mapping, TextIO

DEFAULT_WIDTH = 80


def terminal_width(default: int = DEFAULT_WIDTH) -> int:
    """Return the terminal's column count, or ``default`` when unknown."""
    columns = shutil.get_terminal_size((default, 24)).columns
    return columns if columns > 0 else default


def colors_enabled(stream: TextIO | None = None, environ: Mapping[str, str] | None = None) -> bool:
    """Return True if ANSI styling should be written to ``stream``.

    Styling is on for terminals, and for pipes when ``FORCE_COLOR`` is set.
    """
    stream = stream if stream is not None else sys.stdout
    environ = environ if environ is not None else os.environ
    if "FORCE_COLOR" in environ:
        return True
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def read_input(stream: TextIO | None = None) -> str:
    """Read all of ``stream`` (stdin by default)."""
    stream = stream if stream is not None else sys.stdin
    return stream.read()
