"""Core formatting infrastructure for PureBasic indentation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .rules import LineKind, leading_keyword
from .sanitizer import strip_strings_and_comments
from .state import INITIAL_STATE, FormatterState, advance, reconstruct_state

logger = logging.getLogger(__name__)


@dataclass
class FormattingOptions:
    """Configuration options for indentation formatting."""

    tab_size: int = 4
    insert_spaces: bool = True
    trim_trailing_whitespace: bool = True


@dataclass(frozen=True)
class FormattingWarning:
    """Structural anomaly noticed while formatting (0-based line)."""

    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line + 1}: {self.message}"


@dataclass
class FormattedResult:
    """Result of a formatting operation.

    For range formatting ``formatted_text`` replaces lines
    ``start_line..end_line`` (inclusive) of the original document.
    """

    formatted_text: str
    is_changed: bool
    start_line: int = 0
    end_line: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[FormattingWarning] = field(default_factory=list)

    def success(self) -> bool:
        """Check if formatting was successful."""
        return len(self.errors) == 0


def render_indent(level: int, options: FormattingOptions) -> str:
    """Create the indentation string for *level* nesting units."""
    if options.insert_spaces:
        return " " * (level * options.tab_size)
    return "\t" * level


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; carriage returns stay attached to their line."""
    return text.split("\n")


_BRANCH_OPENERS = {"endselect": "Select", "compilerendselect": "CompilerSelect"}


def _unmatched_message(raw: str, kind: Optional[LineKind]) -> str:
    keyword = leading_keyword(strip_strings_and_comments(raw))
    if kind is LineKind.BRANCH_CLOSER:
        return f"{keyword} without matching {_BRANCH_OPENERS.get(keyword.lower(), 'Select')}"
    return f"{keyword} without matching opening block"


def _split_eol(raw: str) -> Tuple[str, str]:
    if raw.endswith("\r"):
        return raw[:-1], "\r"
    return raw, ""


class IndentFormatter:
    """
    Line-based indentation formatter for PureBasic.

    The formatter:
    1. Strips strings and comments from each line
    2. Classifies the line by its leading keyword
    3. Feeds it to the indentation state machine
    4. Re-renders only the leading whitespace
    """

    def __init__(self, options: Optional[FormattingOptions] = None):
        self.options = options or FormattingOptions()

    def format_document(self, source_text: str) -> FormattedResult:
        """
        Format a complete PureBasic document.

        Args:
            source_text: The source code to format

        Returns:
            FormattedResult spanning every line of the document
        """
        lines = split_lines(source_text)
        formatted_lines, final_state, warnings = self._format_lines(lines, INITIAL_STATE, first_line=0)

        if final_state.indent_level > 0 or final_state.in_branch_block:
            warnings.append(
                FormattingWarning(
                    line=len(lines) - 1,
                    message=f"unclosed block(s) at end of document (level {final_state.indent_level})",
                )
            )

        formatted_text = "\n".join(formatted_lines)
        logger.debug("Formatted %d line(s), %d warning(s)", len(lines), len(warnings))
        return FormattedResult(
            formatted_text=formatted_text,
            is_changed=formatted_text != source_text,
            start_line=0,
            end_line=len(lines) - 1,
            warnings=warnings,
        )

    def format_range(self, source_text: str, start_line: int, end_line: int) -> FormattedResult:
        """
        Format the lines ``start_line..end_line`` (inclusive, 0-based).

        The nesting state at ``start_line`` is rebuilt from the lines before
        it; the rest of the document is neither re-emitted nor changed.
        """
        lines = split_lines(source_text)
        last = len(lines) - 1
        if start_line > end_line:
            start_line, end_line = end_line, start_line
        start_line = min(max(start_line, 0), last)
        end_line = min(max(end_line, 0), last)

        initial_state = reconstruct_state(lines[:start_line])
        original = lines[start_line:end_line + 1]
        formatted_lines, _, warnings = self._format_lines(original, initial_state, first_line=start_line)

        original_text = "\n".join(original)
        formatted_text = "\n".join(formatted_lines)
        logger.debug(
            "Formatted range %d-%d starting at level %d",
            start_line,
            end_line,
            initial_state.indent_level,
        )
        return FormattedResult(
            formatted_text=formatted_text,
            is_changed=formatted_text != original_text,
            start_line=start_line,
            end_line=end_line,
            warnings=warnings,
        )

    def _format_lines(
        self,
        lines: Sequence[str],
        state: FormatterState,
        first_line: int,
    ) -> Tuple[List[str], FormatterState, List[FormattingWarning]]:
        out: List[str] = []
        warnings: List[FormattingWarning] = []
        for offset, raw in enumerate(lines):
            step = advance(state, raw)
            state = step.state
            out.append(self._render_line(raw, step.level))
            if step.unmatched:
                warnings.append(FormattingWarning(line=first_line + offset, message=_unmatched_message(raw, step.kind)))
        return out, state, warnings

    def _render_line(self, raw: str, level: Optional[int]) -> str:
        body, eol = _split_eol(raw)
        if level is None:
            return eol
        content = body.strip() if self.options.trim_trailing_whitespace else body.lstrip()
        return render_indent(level, self.options) + content + eol


def format_text(source_text: str, options: Optional[FormattingOptions] = None) -> str:
    """Return *source_text* re-indented."""
    return IndentFormatter(options).format_document(source_text).formatted_text


def format_text_range(
    source_text: str,
    start_line: int,
    end_line: int,
    options: Optional[FormattingOptions] = None,
) -> str:
    """Return the re-indented replacement for lines ``start_line..end_line``."""
    return IndentFormatter(options).format_range(source_text, start_line, end_line).formatted_text


__all__ = [
    "FormattingOptions",
    "FormattingWarning",
    "FormattedResult",
    "IndentFormatter",
    "render_indent",
    "split_lines",
    "format_text",
    "format_text_range",
]
