"""Strip string literals and line comments before keyword matching."""

from __future__ import annotations

from typing import List, Optional

COMMENT_MARKER = ";"
_QUOTES = ('"', "'")


def strip_strings_and_comments(line: str) -> str:
    """Return *line* without string contents and without a trailing comment.

    Quote delimiters are kept (``"..."`` becomes ``""``) so the line still
    reads as containing a string.  A ``;`` inside an open string is content,
    not a comment start.  An unterminated string swallows the rest of the
    line.
    """

    out: List[str] = []
    open_quote: Optional[str] = None
    for ch in line:
        if open_quote is None:
            if ch == COMMENT_MARKER:
                break
            if ch in _QUOTES:
                open_quote = ch
            out.append(ch)
        elif ch == open_quote:
            open_quote = None
            out.append(ch)
    return "".join(out)


def is_comment_only(raw: str, code: str) -> bool:
    """True when *raw* has text but nothing survives sanitizing."""

    return bool(raw.strip()) and not code.strip()


__all__ = ["COMMENT_MARKER", "strip_strings_and_comments", "is_comment_only"]
