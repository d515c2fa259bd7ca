"""Tests for the reply sanitizing pipeline, rule by rule and end to end."""

from unittest.mock import patch

import pytest

from eo.rendering.sanitizer import (
    BOLD,
    ESC,
    RESET,
    RULES_BY_NAME,
    RewriteRule,
    apply_rules,
    bold_rule,
    build_rules,
    color_tag_rule,
    sanitize,
    strip_code_fences,
    strip_note,
    strip_table_markup,
    strip_think,
    unescape,
)

YELLOW = f"{ESC}[33m"


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

class TestStripThink:
    def test_removes_span(self):
        assert strip_think("<think>hmm</think>Answer") == "Answer"

    def test_multiline_span(self):
        assert strip_think("<think>\nstep 1\nstep 2\n</think>\nAnswer") == "\nAnswer"

    def test_non_greedy(self):
        text = "<think>a</think>keep<think>b</think>"
        assert strip_think(text) == "keep"

    def test_no_span_noop(self):
        assert strip_think("plain") == "plain"


class TestUnescape:
    def test_newline(self):
        assert unescape("a\\nb") == "a\nb"

    def test_tab_and_cr(self):
        assert unescape("a\\tb\\rc") == "a\tb\rc"

    def test_escape_sequence(self):
        assert unescape("\\033[31mred\\033[0m") == f"{ESC}[31mred{ESC}[0m"

    def test_double_backslash(self):
        assert unescape("C:\\\\temp") == "C:\\temp"

    def test_double_backslash_consumed_first(self):
        """``\\\\n`` is an escaped backslash followed by a plain n."""
        assert unescape("\\\\n") == "\\n"

    def test_unknown_escape_kept(self):
        assert unescape("\\x41 \\d") == "\\x41 \\d"

    def test_partial_033_kept(self):
        assert unescape("\\03x") == "\\03x"

    def test_trailing_backslash_kept(self):
        assert unescape("end\\") == "end\\"


class TestStripNote:
    def test_trailing_note_removed(self):
        assert strip_note("Result\nNote: ignore") == "Result"

    def test_note_with_following_lines(self):
        assert strip_note("Result\n\nNote: one\ntwo") == "Result"

    def test_note_mid_line_kept(self):
        assert strip_note("Take Note: this stays") == "Take Note: this stays"

    def test_leading_note_kept(self):
        """Only newline-prefixed remarks are stripped."""
        assert strip_note("Note: first line") == "Note: first line"


class TestStripCodeFences:
    def test_block_with_language(self):
        assert strip_code_fences("before\n```bash\nls -la\n```\nafter") == "before\n\nafter"

    def test_block_without_language(self):
        assert strip_code_fences("a```\ncode\n```b") == "ab"

    def test_stray_fence(self):
        assert strip_code_fences("text ``` more") == "text  more"


class TestBoldRule:
    def test_bold(self):
        assert bold_rule()("a **b** c") == f"a {BOLD}b{RESET} c"

    def test_multiple(self):
        assert bold_rule()("**x** and **y**") == f"{BOLD}x{RESET} and {BOLD}y{RESET}"

    def test_without_colors(self):
        assert bold_rule(use_colors=False)("a **b** c") == "a b c"

    def test_unbalanced_left_alone(self):
        assert bold_rule()("**open") == "**open"

    def test_color_tag_left_for_color_rule(self):
        assert bold_rule()("yellow[**All Clear!**]") == "yellow[**All Clear!**]"

    def test_tag_markers_not_paired_with_later_bold(self):
        text = "red[**a**] and **b**"
        assert bold_rule()(text) == f"red[**a**] and {BOLD}b{RESET}"

    def test_color_suffix_of_word_is_bold(self):
        assert bold_rule()("lightblue[**x**]") == f"lightblue[{BOLD}x{RESET}]"


class TestColorTagRule:
    @pytest.mark.parametrize("color,code", [
        ("red", "31"), ("green", "32"), ("yellow", "33"), ("blue", "34"),
    ])
    def test_raw_tag(self, color, code):
        result = color_tag_rule()(f"{color}[**ok**]")
        assert result == f"{ESC}[{code}m{BOLD}ok{RESET}"

    def test_tag_survives_bold_rule(self):
        after_bold = bold_rule()("yellow[**All Clear!**]")
        assert color_tag_rule()(after_bold) == f"{YELLOW}{BOLD}All Clear!{RESET}"

    def test_unknown_color_literal(self):
        assert color_tag_rule()("purple[**x**]") == "purple[**x**]"

    def test_color_suffix_of_word_not_matched(self):
        assert color_tag_rule()("lightblue[**x**]") == "lightblue[**x**]"

    def test_without_colors_keeps_text(self):
        assert color_tag_rule(use_colors=False)("green[**up**]") == "up"

    @pytest.mark.parametrize("use_colors", [True, False])
    def test_bracket_without_markers_literal(self, use_colors):
        text = "Check blue[0] and red[x] entries"
        assert color_tag_rule(use_colors)(text) == text


class TestStripTableMarkup:
    def test_markdown_table(self):
        text = "| Name | Status |\n|------|--------|\n| web | up |"
        assert strip_table_markup(text) == "Name  Status\nweb  up"

    def test_aligned_separator(self):
        text = "| a | b |\n| :--- | ---: |\n| c | d |"
        assert strip_table_markup(text) == "a  b\nc  d"

    def test_border_row(self):
        assert strip_table_markup("|_____|\n| x |") == "x"

    def test_prose_untouched(self):
        text = "cpu | memory usage is fine"
        assert strip_table_markup(text) == text

    def test_crlf_rows(self):
        text = "| a | b |\r\n|---|---|\r\n| c | d |\r\n"
        assert strip_table_markup(text) == "a  b\r\nc  d\r\n"

    def test_crlf_border_row(self):
        assert strip_table_markup("|___|___|\r\n| x |\r\n") == "x\r\n"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class TestRulePipeline:
    def test_rule_order(self):
        names = [rule.name for rule in build_rules()]
        assert names == [
            "think", "unescape", "note", "code_fences",
            "bold", "color_tags", "table_markup", "trim",
        ]

    def test_rules_by_name(self):
        assert RULES_BY_NAME["trim"]("  x \n") == "x"

    def test_apply_subset(self):
        rules = [RULES_BY_NAME["unescape"], RULES_BY_NAME["note"]]
        assert apply_rules("ok\\nNote: bye", rules) == "ok"

    def test_custom_rule(self):
        shout = RewriteRule("shout", str.upper)
        assert apply_rules("hi", [shout]) == "HI"

    def test_rewrites_logged_at_trace(self):
        shout = RewriteRule("shout", str.upper)
        keep = RewriteRule("keep", str)
        with patch("eo.rendering.sanitizer.logger") as log:
            apply_rules("hi", [shout, keep])
        log.trace.assert_called_once_with(
            "Rule %s rewrote reply (%d -> %d chars)", "shout", 2, 2,
        )

    def test_unescape_before_note(self):
        """A Note line encoded with a literal \\n is still stripped."""
        assert sanitize("Done\\nNote: extra") == "Done"

    def test_escaped_bold_markers_after_unescape(self):
        assert sanitize("\\033[32mok\\033[0m **now**") == (
            f"{ESC}[32mok{ESC}[0m {BOLD}now{RESET}"
        )


class TestSanitize:
    def test_think_and_bold(self):
        assert sanitize("<think>x</think>Hello **world**") == f"Hello {BOLD}world{RESET}"

    def test_color_tag(self):
        assert sanitize("yellow[**All Clear!**]") == f"{YELLOW}{BOLD}All Clear!{RESET}"

    def test_note_and_newlines(self):
        assert sanitize("Result: 5\\nDone\\nNote: ignore this") == "Result: 5\nDone"

    def test_code_block_removed(self):
        reply = "Summary\n```\nraw dump\n```\nEnd"
        assert sanitize(reply) == "Summary\n\nEnd"

    def test_trims_whitespace(self):
        assert sanitize("\n\n  text  \n") == "text"

    def test_empty(self):
        assert sanitize("") == ""

    def test_no_colors(self):
        reply = "**Disk** usage: red[**92%**]"
        assert sanitize(reply, use_colors=False) == "Disk usage: 92%"

    @pytest.mark.parametrize("use_colors", [True, False])
    def test_bracketed_values_kept(self, use_colors):
        assert sanitize("blue[0]", use_colors=use_colors) == "blue[0]"
        reply = "Check blue[0] and red[x] entries"
        assert sanitize(reply, use_colors=use_colors) == reply

    def test_crlf_markdown_table(self):
        reply = "| a | b |\r\n|---|---|\r\n| c | d |\r\n"
        assert sanitize(reply) == "a  b\r\nc  d"

    def test_tag_and_bold_in_one_line(self):
        assert sanitize("red[**down**] but **db** ok") == (
            f"{ESC}[31m{BOLD}down{RESET} but {BOLD}db{RESET} ok"
        )

    def test_no_colors_has_no_escape_characters(self):
        reply = "<think>...</think>**a** green[**b**]\n| c | d |"
        assert ESC not in sanitize(reply, use_colors=False)

    def test_pure(self):
        reply = "| a | b |\n|---|---|\n| **x** | blue[**y**] |\nNote: z"
        assert sanitize(reply) == sanitize(reply)

    def test_full_reply(self):
        reply = (
            "<think>Let me look at the disks.</think>\n"
            "**Disk report**\\n"
            "| Mount | Use |\\n"
            "|-------|-----|\\n"
            "| / | red[**92%**] |\\n"
            "| /boot | green[**12%**] |\\n"
            "```\\ndf -h\\n```\\n"
            "Note: values are approximate."
        )
        assert sanitize(reply) == (
            f"{BOLD}Disk report{RESET}\n"
            "Mount  Use\n"
            f"/  {ESC}[31m{BOLD}92%{RESET}\n"
            f"/boot  {ESC}[32m{BOLD}12%{RESET}"
        )
