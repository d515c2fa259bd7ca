"""Prompts sent to the generation service, one per input format.

The plain-text prompt defines the markup contract the sanitizer relies on:
literal ``\\033[..m`` escapes, ``**bold**`` spans and ``color[**text**]``
tags for red, green, yellow and blue. Keep
:mod:`eo.rendering.sanitizer` in step with any change here.
"""

from __future__ import annotations

from eo.parsing.models import FormatKind

JSON_PROMPT = (
    "Act as a data analyst do not talk to me. Analyze the provided JSON data "
    "and provide concise insights or conclusions. Highlight key points, "
    "patterns, trends, or notable observations. Do not repeat the data; "
    "focus on interpretation. Here's the data:\n\n"
)

TABLE_PROMPT = (
    "Act as a data analyst do not talk to me. Analyze the provided table data "
    "and provide concise, actionable insights or conclusions. Identify "
    "potential issues, and suggest next steps if applicable. Do not repeat "
    "the data; focus on interpretation. Do not use markdown code blocks; "
    "output plain text only. Here's the data:\n\n"
)

PLAIN_TEXT_PROMPT = (
    "Act as a command-line output enhancer do not talk to me. Transform the "
    "raw output from a command into a highly readable and visually appealing "
    "format suitable for a terminal, removing unnecessary data (summarize "
    "the information), using ANSI escape codes (e.g., \\033[31m for red, "
    "\\033[32m for green, \\033[33m for yellow, \\033[34m for blue, "
    "\\033[1m for bold, \\033[0m to reset). For text wrapped in ** (e.g., "
    "**something**), apply bold formatting. For text prefixed with a color "
    "name followed by [**text**] (e.g., yellow[**All Clear!**]), apply the "
    "specified color and bold formatting. Supported colors are red "
    "(\\033[31m), green (\\033[32m), yellow (\\033[33m), blue (\\033[34m). "
    "Use icons (e.g., ★, ►, ✔) or emojis for clarity. Do not use markdown "
    "code blocks (e.g., ```) or any markdown formatting; output plain text "
    "with ANSI codes only. Here's the output to enhance:\n\n"
)

_PROMPTS: dict[FormatKind, str] = {
    FormatKind.JSON: JSON_PROMPT,
    FormatKind.TABLE: TABLE_PROMPT,
    FormatKind.PLAIN_TEXT: PLAIN_TEXT_PROMPT,
}


def build_prompt(kind: FormatKind, raw: str) -> str:
    """Return the prompt for ``kind`` followed by the raw input."""
    return _PROMPTS[kind] + raw
