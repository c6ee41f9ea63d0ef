"""Open-document tracking and formatting requests for the language server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from lsprotocol.types import (
    Diagnostic,
    DocumentFormattingParams,
    DocumentRangeFormattingParams,
    Position,
    Range,
    TextDocumentContentChangeEvent,
    TextDocumentItem,
    TextEdit,
)
from pygls.uris import to_fs_path
from pygls.workspace import PositionCodec

from pbformat.config import WorkspaceConfig, load_workspace_config
from pbformat.errors import PBConfigError
from pbformat.formatting import FormattingOptions, IndentFormatter

from .state import DocumentState, default_position_codec


class DocumentStore:
    """Keeps the latest text of every open document and answers formatting requests."""

    def __init__(self, root_uri: Optional[str] = None, position_codec: Optional[PositionCodec] = None) -> None:
        self.logger = logging.getLogger("pbformat.lsp.workspace")
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self.config = WorkspaceConfig(root=self.root_path)
        self.position_codec = position_codec or default_position_codec()
        self._open_documents: Dict[str, DocumentState] = {}

    def set_root(self, root_uri: Optional[str]) -> None:
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)

    def set_position_codec(self, codec: PositionCodec) -> None:
        """Use the position encoding negotiated with the client."""
        self.position_codec = codec
        for document in self._open_documents.values():
            document.codec = codec

    def reload_config(self) -> None:
        try:
            self.config = load_workspace_config(self.root_path)
        except PBConfigError as exc:
            self.logger.warning("Ignoring workspace configuration: %s", exc.format())
            self.config = WorkspaceConfig(root=self.root_path)

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> List[Diagnostic]:
        document = DocumentState(uri=item.uri, text=item.text, version=item.version, codec=self.position_codec)
        self._open_documents[item.uri] = document
        return document.structural_diagnostics()

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> List[Diagnostic]:
        document = self._open_documents.get(uri)
        if document is None:
            document = DocumentState(
                uri=uri,
                text=self._read_document_from_fs(uri),
                version=version,
                codec=self.position_codec,
            )
            self._open_documents[uri] = document
        next_text = self._apply_content_changes(document, changes)
        document.update(next_text, version)
        return document.structural_diagnostics()

    def did_close(self, uri: str) -> None:
        self._open_documents.pop(uri, None)

    def document(self, uri: str) -> Optional[DocumentState]:
        return self._open_documents.get(uri)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def format_document(self, params: DocumentFormattingParams) -> List[TextEdit]:
        document = self.document(params.text_document.uri)
        if document is None:
            return []
        formatter = IndentFormatter(self.merge_options(params.options))
        result = formatter.format_document(document.text)
        if not result.is_changed:
            return []
        total_range = Range(start=Position(line=0, character=0), end=document.end_position())
        return [TextEdit(range=total_range, new_text=result.formatted_text)]

    def format_range(self, params: DocumentRangeFormattingParams) -> List[TextEdit]:
        document = self.document(params.text_document.uri)
        if document is None:
            return []
        formatter = IndentFormatter(self.merge_options(params.options))
        result = formatter.format_range(document.text, params.range.start.line, params.range.end.line)
        if not result.is_changed:
            return []
        expanded = Range(
            start=Position(line=result.start_line, character=0),
            end=document.line_end(result.end_line),
        )
        new_text = result.formatted_text
        if new_text.endswith("\r") and document.lines[result.end_line].endswith("\r"):
            new_text = new_text[:-1]
        return [TextEdit(range=expanded, new_text=new_text)]

    def merge_options(self, options: Any) -> FormattingOptions:
        """Request options win; missing or invalid values fall back to the workspace defaults."""
        defaults = self.config.format
        tab_size = getattr(options, "tab_size", None)
        insert_spaces = getattr(options, "insert_spaces", None)
        if tab_size is not None and (isinstance(tab_size, bool) or not isinstance(tab_size, int) or tab_size < 1):
            self.logger.warning("Ignoring invalid tabSize %r from client", tab_size)
            tab_size = None
        if insert_spaces is not None and not isinstance(insert_spaces, bool):
            self.logger.warning("Ignoring invalid insertSpaces %r from client", insert_spaces)
            insert_spaces = None
        trim = getattr(options, "trim_trailing_whitespace", None)
        return FormattingOptions(
            tab_size=defaults.tab_size if tab_size is None else tab_size,
            insert_spaces=defaults.insert_spaces if insert_spaces is None else insert_spaces,
            trim_trailing_whitespace=defaults.trim_trailing_whitespace if trim is None else bool(trim),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _apply_content_changes(
        self,
        document: DocumentState,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> str:
        text = document.text
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                text = change.text
                continue
            # Offsets are computed against the text as of the previous change.
            scratch = DocumentState(uri=document.uri, text=text, version=document.version, codec=document.codec)
            start = scratch.offset_at(change_range.start)
            end = scratch.offset_at(change_range.end)
            text = text[:start] + change.text + text[end:]
        return text

    def _read_document_from_fs(self, uri: str) -> str:
        fs_path = to_fs_path(uri)
        if not fs_path:
            return ""
        try:
            return Path(fs_path).read_text(encoding="utf-8")
        except OSError:
            return ""

    def _resolve_root(self, root_uri: Optional[str]) -> Path:
        if root_uri:
            fs_path = to_fs_path(root_uri)
            return Path(fs_path) if fs_path else Path(root_uri)
        return Path.cwd()


__all__ = ["DocumentStore"]
