from __future__ import annotations

from pathlib import Path

import pytest
from lsprotocol.types import TextDocumentItem

from pbformat.lsp.workspace import DocumentStore

DATA_DIR = Path(__file__).parent / "data"


def _make_uri(path: Path) -> str:
    return path.resolve().as_uri()


@pytest.fixture()
def store() -> DocumentStore:
    root_uri = _make_uri(DATA_DIR)
    ds = DocumentStore(root_uri)
    ds.reload_config()
    return ds


def open_document(store: DocumentStore, filename: str, *, version: int = 1) -> TextDocumentItem:
    path = DATA_DIR / filename
    text = path.read_text(encoding="utf-8")
    item = TextDocumentItem(
        uri=_make_uri(path),
        language_id="purebasic",
        version=version,
        text=text,
    )
    store.did_open(item)
    return item


def open_text(store: DocumentStore, text: str, *, uri: str = "file:///memory/untitled.pb") -> TextDocumentItem:
    item = TextDocumentItem(uri=uri, language_id="purebasic", version=1, text=text)
    store.did_open(item)
    return item


__all__ = ["store", "open_document", "open_text", "DATA_DIR"]
