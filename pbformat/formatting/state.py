"""Indentation state machine shared by whole-document and range formatting."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from .rules import LineKind, classify_line, is_inline_block
from .sanitizer import is_comment_only, strip_strings_and_comments


@dataclass(frozen=True)
class BranchFrame:
    """Saved anchor of an enclosing ``Select`` while a nested one is open."""

    base_indent: int
    case_seen: bool


@dataclass(frozen=True)
class FormatterState:
    """Nesting state in effect before the next line is formatted."""

    indent_level: int = 0
    in_branch_block: bool = False
    branch_base_indent: int = 0
    case_seen: bool = False
    outer_branches: Tuple[BranchFrame, ...] = ()


INITIAL_STATE = FormatterState()


@dataclass(frozen=True)
class LineStep:
    """Outcome of feeding one physical line to the state machine.

    ``level`` is ``None`` for blank lines, which are emitted empty.
    ``unmatched`` marks a closer that had nothing open to close.
    """

    level: Optional[int]
    state: FormatterState
    kind: Optional[LineKind] = None
    unmatched: bool = False


_BRANCH_KINDS = (LineKind.BRANCH_CLOSER, LineKind.BRANCH_OPENER, LineKind.CASE_LABEL)


def advance(state: FormatterState, raw_line: str) -> LineStep:
    """Return the indent level for *raw_line* and the state after it."""

    if not raw_line.strip():
        return LineStep(None, state)

    code = strip_strings_and_comments(raw_line).strip()
    if is_comment_only(raw_line, code):
        return LineStep(state.indent_level, state)
    if is_inline_block(code):
        return LineStep(state.indent_level, state)

    kind = classify_line(code)
    if kind is LineKind.CASE_LABEL and not state.in_branch_block:
        kind = LineKind.STATEMENT

    level = state.indent_level
    unmatched = False

    if kind is LineKind.BRANCH_CLOSER:
        if state.in_branch_block:
            level = state.branch_base_indent
            state = _leave_branch(state)
        else:
            level = max(0, state.indent_level - 1)
            unmatched = True
            state = replace(state, indent_level=level)
    elif kind is LineKind.BRANCH_OPENER:
        outer = state.outer_branches
        if state.in_branch_block:
            outer = outer + (BranchFrame(state.branch_base_indent, state.case_seen),)
        state = FormatterState(
            indent_level=level + 1,
            in_branch_block=True,
            branch_base_indent=level,
            case_seen=False,
            outer_branches=outer,
        )
    elif kind is LineKind.CASE_LABEL:
        level = state.branch_base_indent + 1
        state = replace(state, case_seen=True, indent_level=state.branch_base_indent + 2)
    elif kind is LineKind.BLOCK_CLOSER:
        unmatched = state.indent_level == 0
        level = max(0, state.indent_level - 1)
        state = replace(state, indent_level=level)
    elif kind is LineKind.BLOCK_TRANSFER:
        level = max(0, state.indent_level - 1)
        state = replace(state, indent_level=level + 1)
    elif kind is LineKind.BLOCK_OPENER:
        state = replace(state, indent_level=level + 1)

    if state.in_branch_block and not state.case_seen and kind not in _BRANCH_KINDS:
        floor = state.branch_base_indent + 1
        if state.indent_level < floor:
            state = replace(state, indent_level=floor)

    return LineStep(level, state, kind, unmatched)


def _leave_branch(state: FormatterState) -> FormatterState:
    if state.outer_branches:
        frame = state.outer_branches[-1]
        return FormatterState(
            indent_level=state.branch_base_indent,
            in_branch_block=True,
            branch_base_indent=frame.base_indent,
            case_seen=frame.case_seen,
            outer_branches=state.outer_branches[:-1],
        )
    return replace(state, indent_level=state.branch_base_indent, in_branch_block=False, case_seen=False)


def reconstruct_state(lines: Iterable[str], initial: Optional[FormatterState] = None) -> FormatterState:
    """Replay *lines* through :func:`advance` and return the final state."""

    state = initial if initial is not None else INITIAL_STATE
    for line in lines:
        state = advance(state, line).state
    return state


__all__ = [
    "BranchFrame",
    "FormatterState",
    "INITIAL_STATE",
    "LineStep",
    "advance",
    "reconstruct_state",
]
