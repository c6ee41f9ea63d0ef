"""
pbformat CLI entry point.

This module provides the main CLI interface, dispatching subcommands to
the command modules under ``pbformat.cli.commands``.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pbformat import __version__
from pbformat.config import load_workspace_config
from pbformat.errors import PBConfigError

from .commands import cmd_format, cmd_lsp
from .context import CLIContext
from .errors import handle_cli_exception


def _configure_logging(args) -> None:
    """Configure the ``pbformat`` logger from --log-level or PBFORMAT_LOG_LEVEL."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('PBFORMAT_LOG_LEVEL', 'warning')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    numeric_level = level_map.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('pbformat')
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def build_parser(workspace_root: Path, config_path: Optional[Path]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pbformat – indentation formatter and language server for PureBasic",
        prog="pbformat"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=str(config_path) if config_path else None,
        help='Path to a pbformat.toml configuration file'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set PBFORMAT_VERBOSE=1)'
    )
    parser.add_argument(
        '--workspace',
        default=str(workspace_root),
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set PBFORMAT_LOG_LEVEL)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    format_parser = subparsers.add_parser(
        'format',
        help='Re-indent PureBasic source files'
    )
    format_parser.add_argument(
        'files',
        nargs='*',
        help='Files or directories to format (.pb, .pbi, .pbf by default)'
    )
    format_parser.add_argument(
        '--check', action='store_true',
        help='Only report files that would be reformatted; exit 1 if any'
    )
    format_parser.add_argument(
        '--diff', action='store_true',
        help='Print a unified diff instead of writing files'
    )
    format_parser.add_argument(
        '--tab-size', type=int, default=None,
        help='Indentation width in spaces (default from config, else 4)'
    )
    format_parser.add_argument(
        '--use-tabs', action='store_true',
        help='Indent with one tab per level'
    )
    format_parser.add_argument(
        '--lines', default=None, metavar='START:END',
        help='Only re-indent this 1-based, inclusive line range of a single file'
    )
    format_parser.add_argument(
        '--stdin', action='store_true',
        help='Read source from stdin and write the result to stdout'
    )
    format_parser.set_defaults(func=cmd_format)

    lsp_parser = subparsers.add_parser(
        'lsp',
        help='Start the PureBasic language server over stdio'
    )
    lsp_parser.set_defaults(func=cmd_lsp)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Format a project in place:
        >>> main(['format', 'src/'])  # doctest: +SKIP

        Check formatting in CI:
        >>> main(['format', '--check', 'src/'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pre-parse to get workspace and config before building the parser
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('--config')
    pre_parser.add_argument('--workspace')
    pre_parser.add_argument('--verbose', action='store_true')
    pre_args, _ = pre_parser.parse_known_args(argv)

    workspace_root = (
        Path(pre_args.workspace).resolve()
        if pre_args.workspace
        else Path.cwd()
    )
    config_path = (
        Path(pre_args.config).resolve()
        if pre_args.config
        else None
    )
    try:
        config = load_workspace_config(workspace_root, config_path)
    except PBConfigError as exc:
        handle_cli_exception(exc, verbose=pre_args.verbose)
        return

    parser = build_parser(workspace_root, config_path)
    args = parser.parse_args(argv)
    _configure_logging(args)

    if not getattr(args, 'func', None):
        parser.print_help()
        return

    args.cli_context = CLIContext(workspace_root=workspace_root, config=config)
    args.func(args)


__all__ = ["main", "build_parser"]
