"""pygls based Language Server entrypoint."""

from __future__ import annotations

import logging
import os

from lsprotocol.types import InitializedParams
from pygls.server import LanguageServer

from pbformat import __version__

from .handlers import register_all
from .workspace import DocumentStore

logger = logging.getLogger(__name__)


class PureBasicLanguageServer(LanguageServer):
    """Concrete LanguageServer holding the open-document store."""

    def __init__(self) -> None:
        super().__init__(name="pbformat-lsp", version=__version__)
        self.document_store = DocumentStore()
        register_all(self)
        self._register_lifecycle_handlers()

    def _register_lifecycle_handlers(self) -> None:
        store = self.document_store

        @self.feature("initialized")
        async def _on_initialized(ls: "PureBasicLanguageServer", params: InitializedParams) -> None:  # noqa: ARG001
            store.set_root(ls.workspace.root_uri)
            store.set_position_codec(ls.workspace.position_codec)
            store.reload_config()
            logger.info("Formatting defaults loaded from %s", store.config.source or "built-in defaults")


def create_server() -> PureBasicLanguageServer:
    return PureBasicLanguageServer()


def main() -> None:
    server = create_server()
    logger.info("Starting pbformat LSP (pid=%s)", os.getpid())
    server.start_io()


if __name__ == "__main__":  # pragma: no cover
    main()
