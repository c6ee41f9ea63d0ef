"""Command handlers for the pbformat CLI."""

from .tools import cmd_format, cmd_lsp

__all__ = ["cmd_format", "cmd_lsp"]
