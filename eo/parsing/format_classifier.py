"""Classify piped command output as JSON, a whitespace table, or plain text.

Classification is an ordered list of predicates; the first one that accepts
the input decides its :class:`~eo.parsing.models.FormatKind`. Input that no
predicate accepts is plain text. Predicates never raise: a parse failure
simply means "not this format".
"""

from __future__ import annotations

import json
import logging
from typing import Callable

from eo.parsing.models import FormatKind, split_fields

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def parse_json(text: str):
    """Strictly parse ``text`` as a JSON document.

    ``NaN`` and ``Infinity`` are rejected, unlike :func:`json.loads`'s
    default behaviour.

    Raises:
        ValueError: If the text is not a valid JSON document.
    """
    return json.loads(text, parse_constant=_reject_constant)


def is_json_document(text: str) -> bool:
    """Return True if text parses as a JSON object or array."""
    try:
        value = parse_json(text)
    except (ValueError, RecursionError):
        return False
    return isinstance(value, (dict, list))


def is_whitespace_table(text: str) -> bool:
    """Return True if every line has the same field count as the first.

    Requires at least two rows and two columns. Blank lines have zero
    fields, so a blank line inside the input breaks the table.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        return False

    columns = len(split_fields(lines[0]))
    if columns < 2:
        return False

    return all(len(split_fields(line)) == columns for line in lines[1:])


# Evaluated in order, first match wins.
CLASSIFIERS: tuple[tuple[FormatKind, Predicate], ...] = (
    (FormatKind.JSON, is_json_document),
    (FormatKind.TABLE, is_whitespace_table),
)


def classify(
    text: str,
    classifiers: tuple[tuple[FormatKind, Predicate], ...] = CLASSIFIERS,
) -> FormatKind:
    """Classify raw input into a :class:`FormatKind`.

    Args:
        text: The full piped input.
        classifiers: Ordered ``(kind, predicate)`` pairs. Defaults to
            :data:`CLASSIFIERS`.

    Returns:
        The kind of the first accepting predicate, or
        ``FormatKind.PLAIN_TEXT`` when none accepts (including empty input).
    """
    if not text:
        return FormatKind.PLAIN_TEXT

    for kind, predicate in classifiers:
        if predicate(text):
            logger.debug("Input classified as %s by %s", kind.value, predicate.__name__)
            return kind

    logger.debug("Input classified as %s", FormatKind.PLAIN_TEXT.value)
    return FormatKind.PLAIN_TEXT
