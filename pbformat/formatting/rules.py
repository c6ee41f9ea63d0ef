"""PureBasic keyword tables used by the indentation formatter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Tuple


class LineKind(Enum):
    """Structural category of a sanitized line."""

    BRANCH_CLOSER = "branch-closer"
    BRANCH_OPENER = "branch-opener"
    CASE_LABEL = "case-label"
    BLOCK_CLOSER = "block-closer"
    BLOCK_TRANSFER = "block-transfer"
    BLOCK_OPENER = "block-opener"
    STATEMENT = "statement"


# Checked top to bottom; a keyword belongs to the first category listing it.
KEYWORD_TABLE: Tuple[Tuple[LineKind, Tuple[str, ...]], ...] = (
    (LineKind.BRANCH_CLOSER, ("EndSelect", "CompilerEndSelect")),
    (LineKind.BRANCH_OPENER, ("Select", "CompilerSelect")),
    (LineKind.CASE_LABEL, ("Case", "Default", "CompilerCase", "CompilerDefault")),
    (
        LineKind.BLOCK_CLOSER,
        (
            "EndProcedure",
            "EndModule",
            "EndDeclareModule",
            "EndStructure",
            "EndStructureUnion",
            "EndInterface",
            "EndEnumeration",
            "EndMacro",
            "EndDataSection",
            "EndImport",
            "EndIf",
            "Next",
            "Wend",
            "Until",
            "ForEver",
            "EndWith",
            "CompilerEndIf",
        ),
    ),
    (
        LineKind.BLOCK_TRANSFER,
        ("Else", "ElseIf", "CompilerElse", "CompilerElseIf"),
    ),
    (
        LineKind.BLOCK_OPENER,
        (
            "Procedure",
            "ProcedureC",
            "ProcedureDLL",
            "ProcedureCDLL",
            "Module",
            "DeclareModule",
            "Structure",
            "StructureUnion",
            "Interface",
            "Enumeration",
            "EnumerationBinary",
            "Macro",
            "DataSection",
            "Import",
            "ImportC",
            "If",
            "For",
            "ForEach",
            "While",
            "Repeat",
            "With",
            "CompilerIf",
        ),
    ),
)


@dataclass(frozen=True)
class BlockFamily:
    """Opening and closing keywords that bound one kind of block."""

    name: str
    openers: Tuple[str, ...]
    closers: Tuple[str, ...]


BLOCK_FAMILIES: Tuple[BlockFamily, ...] = (
    BlockFamily("if", ("If",), ("EndIf",)),
    BlockFamily("for", ("For", "ForEach"), ("Next",)),
    BlockFamily("while", ("While",), ("Wend",)),
    BlockFamily("repeat", ("Repeat",), ("Until", "ForEver")),
    BlockFamily("select", ("Select",), ("EndSelect",)),
    BlockFamily("with", ("With",), ("EndWith",)),
    BlockFamily(
        "procedure",
        ("Procedure", "ProcedureC", "ProcedureDLL", "ProcedureCDLL"),
        ("EndProcedure",),
    ),
    BlockFamily("module", ("Module",), ("EndModule",)),
    BlockFamily("declare-module", ("DeclareModule",), ("EndDeclareModule",)),
    BlockFamily("structure", ("Structure",), ("EndStructure",)),
    BlockFamily("structure-union", ("StructureUnion",), ("EndStructureUnion",)),
    BlockFamily("interface", ("Interface",), ("EndInterface",)),
    BlockFamily("enumeration", ("Enumeration", "EnumerationBinary"), ("EndEnumeration",)),
    BlockFamily("macro", ("Macro",), ("EndMacro",)),
    BlockFamily("data-section", ("DataSection",), ("EndDataSection",)),
    BlockFamily("import", ("Import", "ImportC"), ("EndImport",)),
    BlockFamily("compiler-if", ("CompilerIf",), ("CompilerEndIf",)),
    BlockFamily("compiler-select", ("CompilerSelect",), ("CompilerEndSelect",)),
)

_LEADING_WORD = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
# Structure field access such as `*node\Next` or `item\EndIf`.
_FIELD_ACCESS = re.compile(r"\\\s*[A-Za-z_][A-Za-z0-9_]*")


def _build_keyword_index(table: Sequence[Tuple[LineKind, Sequence[str]]]) -> Dict[str, LineKind]:
    index: Dict[str, LineKind] = {}
    for kind, keywords in table:
        for keyword in keywords:
            index.setdefault(keyword.lower(), kind)
    return index


def _word_pattern(keywords: Sequence[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


_KEYWORD_INDEX = _build_keyword_index(KEYWORD_TABLE)
_FAMILY_PATTERNS: Tuple[Tuple[re.Pattern[str], re.Pattern[str]], ...] = tuple(
    (_word_pattern(family.openers), _word_pattern(family.closers)) for family in BLOCK_FAMILIES
)


def leading_keyword(code: str) -> str:
    """Return the identifier the sanitized line starts with, or ``""``."""

    match = _LEADING_WORD.match(code.strip())
    return match.group(0) if match else ""


def classify_line(code: str) -> LineKind:
    """Classify a sanitized line by its leading keyword."""

    word = leading_keyword(code)
    if not word:
        return LineKind.STATEMENT
    return _KEYWORD_INDEX.get(word.lower(), LineKind.STATEMENT)


def is_inline_block(code: str) -> bool:
    """True when *code* opens and closes the same kind of block on one line.

    Field names reached through ``\\`` are not keywords and are ignored.
    """

    code = _FIELD_ACCESS.sub("", code)
    return any(opener.search(code) and closer.search(code) for opener, closer in _FAMILY_PATTERNS)


__all__ = [
    "LineKind",
    "KEYWORD_TABLE",
    "BlockFamily",
    "BLOCK_FAMILIES",
    "leading_keyword",
    "classify_line",
    "is_inline_block",
]
