"""Language Server Protocol implementation for pbformat."""

from .server import PureBasicLanguageServer, create_server

__all__ = [
    "PureBasicLanguageServer",
    "create_server",
]
