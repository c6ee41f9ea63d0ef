"""Document level state tracking for the PureBasic language server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, PositionEncodingKind, Range
from pygls.workspace import PositionCodec

from pbformat.formatting import FormattingWarning, IndentFormatter


def default_position_codec() -> PositionCodec:
    return PositionCodec(encoding=PositionEncodingKind.Utf16)


@dataclass
class DocumentState:
    """Latest text received for an open document.

    Positions exchanged with the client are counted in the negotiated
    encoding units (UTF-16 unless the client chose otherwise); ``codec``
    converts them to string indices.
    """

    uri: str
    text: str
    version: int
    codec: PositionCodec = field(default_factory=default_position_codec)
    lines: List[str] = field(init=False)
    _line_offsets: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._set_text(self.text)

    def update(self, text: str, version: int) -> None:
        self._set_text(text)
        self.version = version

    def offset_at(self, position: Position) -> int:
        if position.line >= len(self._line_offsets):
            return len(self.text)
        line = max(position.line, 0)
        return self._line_offsets[line] + self._char_index(line, max(position.character, 0))

    def end_position(self) -> Position:
        """Position just past the last character of the document."""
        last = len(self.lines) - 1
        return Position(line=last, character=self.codec.client_num_units(self.lines[last]))

    def line_end(self, line: int) -> Position:
        """Position at the end of *line*, before its terminator."""
        text = self.lines[line]
        if text.endswith("\r"):
            text = text[:-1]
        return Position(line=line, character=self.codec.client_num_units(text))

    def structural_diagnostics(self) -> List[Diagnostic]:
        result = IndentFormatter().format_document(self.text)
        return [self._diagnostic_from_warning(warning) for warning in result.warnings]

    def _char_index(self, line: int, units: int) -> int:
        consumed = 0
        for index, char in enumerate(self.lines[line]):
            if consumed >= units:
                return index
            consumed += self.codec.client_num_units(char)
        return len(self.lines[line])

    def _diagnostic_from_warning(self, warning: FormattingWarning) -> Diagnostic:
        line = min(warning.line, len(self.lines) - 1)
        return Diagnostic(
            range=Range(start=Position(line=line, character=0), end=self.line_end(line)),
            message=warning.message,
            severity=DiagnosticSeverity.Warning,
            source="pbformat",
        )

    def _set_text(self, text: str) -> None:
        self.text = text
        self.lines = text.split("\n")
        offsets = []
        running = 0
        for line in self.lines:
            offsets.append(running)
            running += len(line) + 1
        self._line_offsets = offsets


__all__ = ["DocumentState", "default_position_codec"]
