"""
Indentation formatter for PureBasic sources.

This package provides a line-based formatter that:
1. Strips strings and comments so keywords are matched only in code
2. Classifies each line against a single ordered keyword table
3. Threads an immutable nesting state through a pure transition function
4. Re-renders leading whitespace only, for whole documents or line ranges
"""

from __future__ import annotations

__all__ = [
    "IndentFormatter",
    "FormattingOptions",
    "FormattedResult",
    "FormattingWarning",
    "FormatterState",
    "LineKind",
    "DefaultFormattingRules",
    "advance",
    "classify_line",
    "format_text",
    "format_text_range",
    "is_inline_block",
    "reconstruct_state",
    "render_indent",
    "strip_strings_and_comments",
]

from .core import (
    FormattedResult,
    FormattingOptions,
    FormattingWarning,
    IndentFormatter,
    format_text,
    format_text_range,
    render_indent,
)
from .rules import LineKind, classify_line, is_inline_block
from .sanitizer import strip_strings_and_comments
from .state import FormatterState, advance, reconstruct_state


class DefaultFormattingRules:
    @staticmethod
    def standard():
        return FormattingOptions(tab_size=4, insert_spaces=True, trim_trailing_whitespace=True)

    @staticmethod
    def compact():
        return FormattingOptions(tab_size=2, insert_spaces=True, trim_trailing_whitespace=True)

    @staticmethod
    def tabs():
        return FormattingOptions(tab_size=4, insert_spaces=False, trim_trailing_whitespace=True)
