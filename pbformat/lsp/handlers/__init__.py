"""Handler registration helpers."""

from __future__ import annotations

from . import documents, formatting


def register_all(server) -> None:
    documents.register(server)
    formatting.register(server)


__all__ = ["register_all"]
