"""
Development tools commands.

This module handles the ``format`` and ``lsp`` commands: re-indenting
PureBasic sources on disk or stdin, and starting the language server.
"""

import argparse
import codecs
import difflib
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ...config import WorkspaceConfig
from ...formatting import FormattedResult, FormattingOptions, IndentFormatter
from ..context import get_cli_context
from ..errors import CLIFileNotFoundError, CLIRuntimeError, CLIValidationError, handle_cli_exception

logger = logging.getLogger(__name__)


def parse_line_range(value: str) -> Tuple[int, int]:
    """
    Parse a ``START:END`` option (1-based, inclusive) into 0-based bounds.

    Examples:
        >>> parse_line_range("3:7")
        (2, 6)
        >>> parse_line_range("5")
        (4, 4)
    """
    start_text, _, end_text = value.partition(":")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
    except ValueError as exc:
        raise CLIValidationError(
            f"Invalid line range '{value}'",
            hint="Use START:END with 1-based line numbers, e.g. --lines 10:20",
        ) from exc
    if start < 1 or end < 1:
        raise CLIValidationError(
            f"Invalid line range '{value}'",
            hint="Line numbers start at 1",
        )
    if start > end:
        start, end = end, start
    return start - 1, end - 1


def resolve_options(args: argparse.Namespace, config: WorkspaceConfig) -> FormattingOptions:
    """Workspace defaults overridden by ``--tab-size`` and ``--use-tabs``."""
    options = config.format.to_options()
    tab_size = getattr(args, "tab_size", None)
    if tab_size is not None:
        if tab_size < 1:
            raise CLIValidationError(
                f"--tab-size must be a positive integer, got {tab_size}",
                hint="Use a value such as 2 or 4",
            )
        options.tab_size = tab_size
    if getattr(args, "use_tabs", False):
        options.insert_spaces = False
    return options


def collect_source_files(paths: List[str], config: WorkspaceConfig) -> List[Path]:
    """Expand files and directories into the PureBasic sources to format."""
    files: List[Path] = []
    for file_arg in paths:
        path = Path(file_arg)
        if path.is_file():
            if config.matches(path):
                files.append(path)
            else:
                print(f"Warning: Skipping {file_arg} (not a {'/'.join(config.extensions)} file)")
        elif path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and config.matches(candidate):
                    files.append(candidate)
        else:
            print(f"Warning: Skipping {file_arg} (no such file or directory)")
    return files


def _read_source(path: Path) -> Tuple[str, bool]:
    data = path.read_bytes()
    has_bom = data.startswith(codecs.BOM_UTF8)
    return data.decode("utf-8-sig"), has_bom


def _write_source(path: Path, text: str, has_bom: bool) -> None:
    data = text.encode("utf-8")
    if has_bom:
        data = codecs.BOM_UTF8 + data
    path.write_bytes(data)


def _format_text(
    formatter: IndentFormatter,
    text: str,
    line_range: Optional[Tuple[int, int]],
) -> Tuple[str, FormattedResult]:
    if line_range is None:
        result = formatter.format_document(text)
        return result.formatted_text, result
    result = formatter.format_range(text, line_range[0], line_range[1])
    lines = text.split("\n")
    spliced = lines[:result.start_line] + result.formatted_text.split("\n") + lines[result.end_line + 1:]
    return "\n".join(spliced), result


def _print_diff(path: str, original: str, formatted: str) -> None:
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        formatted.splitlines(keepends=True),
        fromfile=f"{path} (original)",
        tofile=f"{path} (formatted)",
    )
    for line in diff:
        sys.stdout.write(line if line.endswith("\n") else f"{line}\n")


def _format_stdin(args: argparse.Namespace, formatter: IndentFormatter, line_range) -> None:
    source = sys.stdin.read()
    formatted, result = _format_text(formatter, source, line_range)
    for warning in result.warnings:
        print(f"Warning in <stdin>: {warning}", file=sys.stderr)
    if args.check:
        if result.is_changed:
            print("Would reformat <stdin>", file=sys.stderr)
            raise SystemExit(1)
        return
    if args.diff:
        _print_diff("<stdin>", source, formatted)
        return
    sys.stdout.write(formatted)


def cmd_format(args: argparse.Namespace) -> None:
    """
    Handle the 'format' subcommand to re-indent PureBasic source files.

    Args:
        args: Parsed command-line arguments containing:
            - files: List of files or directories to format
            - check: If True, only check if formatting is needed
            - diff: If True, show a unified diff of changes
            - lines: Optional START:END range (single file or stdin only)
            - stdin: Read source from stdin, write the result to stdout

    Raises:
        SystemExit: If formatting encounters errors or check mode finds changes

    Examples:
        >>> args = argparse.Namespace(files=['main.pb'], check=False, diff=False)
        >>> cmd_format(args)  # doctest: +SKIP
        Formatted main.pb
        Formatted 1 file(s) successfully
    """
    try:
        ctx = get_cli_context(args)
        formatter = IndentFormatter(resolve_options(args, ctx.config))
        line_range = parse_line_range(args.lines) if getattr(args, "lines", None) else None

        if getattr(args, "stdin", False):
            _format_stdin(args, formatter, line_range)
            return

        if not args.files:
            raise CLIValidationError(
                "No files given",
                hint="Pass files or directories to format, or use --stdin",
            )

        files_to_format = collect_source_files(args.files, ctx.config)
        if not files_to_format:
            raise CLIFileNotFoundError(
                "No files to format",
                hint=f"Expected files with extensions: {', '.join(ctx.config.extensions)}",
            )
        if line_range is not None and len(files_to_format) != 1:
            raise CLIValidationError(
                "--lines requires exactly one file",
                context={"files": [str(path) for path in files_to_format]},
            )

        formatted_count = 0
        error_count = 0

        for file_path in files_to_format:
            try:
                content, has_bom = _read_source(file_path)
            except (OSError, UnicodeDecodeError) as exc:
                print(f"Error processing {file_path}: {exc}")
                error_count += 1
                continue

            formatted, result = _format_text(formatter, content, line_range)
            logger.debug("%s: changed=%s warnings=%d", file_path, result.is_changed, len(result.warnings))

            for warning in result.warnings:
                print(f"Warning in {file_path}: {warning}")

            if not result.is_changed:
                continue
            formatted_count += 1
            if args.check:
                print(f"Would reformat {file_path}")
            elif args.diff:
                _print_diff(str(file_path), content, formatted)
            else:
                try:
                    _write_source(file_path, formatted, has_bom)
                except OSError as exc:
                    print(f"Error processing {file_path}: {exc}")
                    error_count += 1
                    formatted_count -= 1
                    continue
                print(f"Formatted {file_path}")

        if args.check:
            if formatted_count > 0:
                print(f"{formatted_count} file(s) would be reformatted")
                raise SystemExit(1)
            print("All files are already formatted")
        elif not args.diff:
            if formatted_count > 0:
                print(f"Formatted {formatted_count} file(s) successfully")
            else:
                print("All files are already formatted")
        if error_count > 0:
            print(f"Encountered {error_count} error(s)")
            raise SystemExit(1)

    except SystemExit:
        raise
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_lsp(args: argparse.Namespace) -> None:
    """
    Handle the 'lsp' subcommand to launch the PureBasic language server.

    Starts the language server over stdio for editor integration. It
    provides document and range formatting plus structural warnings.

    Raises:
        SystemExit: If language server fails to start or pygls is not installed
    """
    try:
        get_cli_context(args)

        try:
            from pbformat.lsp.server import create_server
        except ImportError as exc:
            raise CLIRuntimeError(
                "pygls is not installed",
                hint="Install with: pip install pbformat",
            ) from exc

        server = create_server()
        print(f"Starting pbformat language server (pid={os.getpid()})", file=sys.stderr)

        try:
            server.start_io()
        except KeyboardInterrupt:
            print("Language server interrupted by user.", file=sys.stderr)
        except Exception as exc:
            raise CLIRuntimeError(
                f"Language server stopped unexpectedly: {exc}",
            ) from exc

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
