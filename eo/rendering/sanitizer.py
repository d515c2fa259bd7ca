"""Turn a generated reply into clean ANSI terminal output.

The generation service is asked to answer with terminal escapes, but it
writes them as literal text and mixes in markdown: ``**bold**`` markers,
``color[**text**]`` tags, code fences, markdown tables, a ``<think>`` aside
and a closing ``Note:`` remark. :func:`sanitize` runs an ordered list of
:class:`RewriteRule` objects over the reply to fix all of that.

Order is significant:

  1. ``think``        drop ``<think>...</think>`` spans.
  2. ``unescape``     ``\\\\``, ``\\n``, ``\\t``, ``\\r``, ``\\033`` become real characters.
  3. ``note``         drop the trailing ``Note:`` remark (needs real newlines).
  4. ``code_fences``  drop fenced blocks, then stray fences.
  5. ``bold``         ``**text**`` outside a color tag becomes bold.
  6. ``color_tags``   ``red|green|yellow|blue[**text**]`` becomes colored bold.
  7. ``table_markup`` flatten markdown table rows, drop separators.
  8. ``trim``         strip surrounding whitespace.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

import eo.log_setup  # noqa: F401  (adds Logger.trace)

logger = logging.getLogger(__name__)

ESC = "\x1b"
BOLD = f"{ESC}[1m"
RESET = f"{ESC}[0m"

COLOR_CODES: dict[str, str] = {
    "red": f"{ESC}[31m",
    "green": f"{ESC}[32m",
    "yellow": f"{ESC}[33m",
    "blue": f"{ESC}[34m",
}


@dataclass(frozen=True)
class RewriteRule:
    """One named, pure text-to-text step of the sanitizing pipeline."""

    name: str
    transform: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.transform(text)


# ---------------------------------------------------------------------------
# Rules that do not depend on color support
# ---------------------------------------------------------------------------

_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)


def strip_think(text: str) -> str:
    """Remove ``<think>...</think>`` reasoning asides."""
    return _THINK_RE.sub("", text)


_ESCAPE_RE = re.compile(r"\\(\\|n|t|r|033)")
_ESCAPES = {
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "033": ESC,
}


def unescape(text: str) -> str:
    """Replace literal backslash escapes with the characters they name.

    Only ``\\\\``, ``\\n``, ``\\t``, ``\\r`` and ``\\033`` are recognised;
    any other backslash is kept as is.
    """
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], text)


_NOTE_RE = re.compile(r"\n+[ \t]*Note:.*\Z", re.DOTALL)


def strip_note(text: str) -> str:
    """Remove a trailing ``Note:`` remark and everything after it."""
    return _NOTE_RE.sub("", text)


_FENCED_BLOCK_RE = re.compile(r"```[\w+.#-]*.*?```", re.DOTALL)
_FENCE_RE = re.compile(r"```")


def strip_code_fences(text: str) -> str:
    """Remove fenced code blocks, then any unbalanced fence markers."""
    text = _FENCED_BLOCK_RE.sub("", text)
    return _FENCE_RE.sub("", text)


# Separator rows: | --- | :---: | ...
_TABLE_SEPARATOR_RE = re.compile(
    r"^[ \t]*\|(?:[ \t:]*-[- \t:]*\|)+[ \t]*\r?(?:\n|\Z)", re.MULTILINE
)
# Border rows: |_____| or |___|___|
_TABLE_BORDER_RE = re.compile(r"^[ \t]*\|(?:_+\|)+[ \t]*\r?(?:\n|\Z)", re.MULTILINE)
_TABLE_ROW_RE = re.compile(
    r"^([ \t]*)\|[ \t]?(.*?)[ \t]?\|?[ \t]*(\r?)$", re.MULTILINE
)


def _flatten_row(match: re.Match) -> str:
    return match.group(1) + match.group(2).replace(" | ", "  ") + match.group(3)


def strip_table_markup(text: str) -> str:
    """Flatten markdown tables into space-separated rows.

    Separator and border rows are removed; for the remaining rows the
    leading ``| `` and trailing `` |`` go away and each interior `` | ``
    divider becomes two spaces.
    """
    text = _TABLE_SEPARATOR_RE.sub("", text)
    text = _TABLE_BORDER_RE.sub("", text)
    return _TABLE_ROW_RE.sub(_flatten_row, text)


def trim(text: str) -> str:
    return text.strip()


# ---------------------------------------------------------------------------
# Styling rules
# ---------------------------------------------------------------------------

_COLOR_TAG_RE = re.compile(
    r"\b(" + "|".join(COLOR_CODES) + r")\[\*\*([^*\]]+)\*\*\]"
)
# A whole color tag is matched first so its markers are never taken as bold.
_BOLD_RE = re.compile(_COLOR_TAG_RE.pattern + r"|\*\*([^*]+)\*\*")


def bold_rule(use_colors: bool = True) -> RewriteRule:
    """Build the ``**text**`` rule; without colors the markers are dropped."""
    def _replace(match: re.Match) -> str:
        span = match.group(3)
        if span is None:
            return match.group(0)
        return f"{BOLD}{span}{RESET}" if use_colors else span

    def make_bold(text: str) -> str:
        return _BOLD_RE.sub(_replace, text)

    return RewriteRule("bold", make_bold)


def color_tag_rule(use_colors: bool = True) -> RewriteRule:
    """Build the ``color[**text**]`` rule for the colors in :data:`COLOR_CODES`.

    Only the full tag with its ``**`` markers is rewritten; a bare
    ``blue[0]`` is ordinary text.
    """
    def _replace(match: re.Match) -> str:
        if not use_colors:
            return match.group(2)
        return f"{COLOR_CODES[match.group(1)]}{BOLD}{match.group(2)}{RESET}"

    def color_tags(text: str) -> str:
        return _COLOR_TAG_RE.sub(_replace, text)

    return RewriteRule("color_tags", color_tags)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@lru_cache(maxsize=2)
def build_rules(use_colors: bool = True) -> tuple[RewriteRule, ...]:
    """Return the sanitizing pipeline in execution order."""
    return (
        RewriteRule("think", strip_think),
        RewriteRule("unescape", unescape),
        RewriteRule("note", strip_note),
        RewriteRule("code_fences", strip_code_fences),
        bold_rule(use_colors),
        color_tag_rule(use_colors),
        RewriteRule("table_markup", strip_table_markup),
        RewriteRule("trim", trim),
    )


RULES_BY_NAME: dict[str, RewriteRule] = {rule.name: rule for rule in build_rules()}


def apply_rules(text: str, rules) -> str:
    """Run ``text`` through ``rules`` in order."""
    for rule in rules:
        rewritten = rule(text)
        if rewritten != text:
            logger.trace(
                "Rule %s rewrote reply (%d -> %d chars)",
                rule.name, len(text), len(rewritten),
            )
        text = rewritten
    return text


def sanitize(reply: str, use_colors: bool = True) -> str:
    """Convert a raw generated reply into printable terminal text.

    Args:
        reply: Reply text as returned by the generation service.
        use_colors: Emit ANSI styling for bold and color tags. When False
            the markup is removed and only the text is kept.

    Returns:
        The cleaned reply. Rules that find nothing to rewrite are no-ops,
        so any string is accepted.
    """
    return apply_rules(reply, build_rules(use_colors))
