"""Formatting handlers."""

from __future__ import annotations

from lsprotocol.types import DocumentFormattingParams, DocumentRangeFormattingParams


def register(server) -> None:
    store = server.document_store

    @server.feature("textDocument/formatting")
    async def _format(ls, params: DocumentFormattingParams):
        return store.format_document(params)

    @server.feature("textDocument/rangeFormatting")
    async def _format_range(ls, params: DocumentRangeFormattingParams):
        return store.format_range(params)
