"""Shared data types for input classification and rendering."""

from __future__ import annotations

from enum import Enum

# Rows of whitespace-delimited cells, in input order.
TableGrid = list[list[str]]


class FormatKind(Enum):
    """Structural shape of piped input."""

    JSON = "json"
    TABLE = "table"
    PLAIN_TEXT = "plain_text"


def split_fields(line: str) -> list[str]:
    """Split a line on runs of whitespace, dropping empty fields."""
    return line.split()


def split_rows(text: str) -> TableGrid:
    """Tokenize text into a grid, one row per non-blank line."""
    rows = (split_fields(line) for line in text.splitlines())
    return [row for row in rows if row]
