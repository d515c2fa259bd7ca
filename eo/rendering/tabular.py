"""Width-aware preview rendering for structured input.

JSON is re-serialised with indentation chosen from the display width.
Whitespace tables are re-aligned into left-justified columns, shrinking the
columns when the grid would not fit the terminal.
"""

from __future__ import annotations

import json
import logging
import math

from eo.parsing.format_classifier import parse_json
from eo.parsing.models import TableGrid, split_rows

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
WIDE_TERMINAL = 100
COLUMN_PADDING = 2
MIN_COLUMN_WIDTH = 5


def render_json(text: str, width: int = DEFAULT_WIDTH) -> str:
    """Pretty-print a JSON document.

    Args:
        text: JSON document text.
        width: Display width; terminals narrower than 100 columns get a
            2-space indent, wider ones 4 spaces.

    Returns:
        The indented document, or an ``"Error: Invalid JSON ─ ..."`` line
        if the text does not parse.
    """
    try:
        document = parse_json(text)
    except (ValueError, RecursionError) as e:
        logger.debug("JSON preview failed: %s", e)
        return f"Error: Invalid JSON ─ {e}"

    indent = 2 if width < WIDE_TERMINAL else 4
    return json.dumps(document, indent=indent, ensure_ascii=False)


def column_widths(grid: TableGrid) -> list[int]:
    """Return the maximum cell length of each column.

    The column count is taken from the longest row so ragged grids still
    render every cell.
    """
    columns = max((len(row) for row in grid), default=0)
    widths = [0] * columns
    for row in grid:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    return widths


def fit_widths(widths: list[int], width: int) -> list[int]:
    """Shrink column widths so the padded grid fits ``width`` characters.

    Every column loses the same amount, floored at
    :data:`MIN_COLUMN_WIDTH`. Columns already narrower than the floor keep
    their width; shrinking never widens a column.
    """
    if not widths:
        return []

    total = sum(w + COLUMN_PADDING for w in widths)
    if total <= width:
        return list(widths)

    count = len(widths)
    shrink = math.ceil((total - width + count) / count)
    fitted = [min(w, max(w - shrink, MIN_COLUMN_WIDTH)) for w in widths]
    logger.debug(
        "Table is %d chars wide for a %d-column display, shrinking columns by %d",
        total, width, shrink,
    )
    return fitted


def render_grid(grid: TableGrid, widths: list[int]) -> str:
    """Render a grid with each cell truncated and padded to its column."""
    lines: list[str] = []
    for row in grid:
        cells = [
            cell[: widths[i]].ljust(widths[i] + COLUMN_PADDING)
            for i, cell in enumerate(row)
        ]
        lines.append("".join(cells) + "\n")
    return "".join(lines)


def render_table(text: str, width: int = DEFAULT_WIDTH) -> str:
    """Re-align whitespace-delimited text into fixed-width columns.

    Args:
        text: Table text; runs of whitespace separate cells and blank
            lines are ignored.
        width: Display width the rendered rows should fit.

    Returns:
        One newline-terminated line per row, or an empty string when the
        text holds no cells.
    """
    grid = split_rows(text)
    if not grid:
        return ""

    widths = fit_widths(column_widths(grid), width)
    return render_grid(grid, widths)
