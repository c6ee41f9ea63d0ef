"""
Test suite for the ``pbformat format`` command.

Runs the CLI entry point against temporary workspaces.
"""

import codecs
import io

import pytest

from pbformat.cli import main
from pbformat.cli.commands.tools import parse_line_range
from pbformat.cli.errors import CLIValidationError

UNFORMATTED = "Procedure A()\nIf x\ny()\nEndIf\nEndProcedure\n"
FORMATTED = "Procedure A()\n    If x\n        y()\n    EndIf\nEndProcedure\n"


def _run(tmp_path, *args):
    main(["--workspace", str(tmp_path), *args])


class TestFormatFiles:
    """Formatting files in place."""

    def test_rewrites_file(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(UNFORMATTED, encoding="utf-8")

        _run(tmp_path, "format", str(source))

        assert source.read_text(encoding="utf-8") == FORMATTED
        out = capsys.readouterr().out
        assert f"Formatted {source}" in out
        assert "Formatted 1 file(s) successfully" in out

    def test_already_formatted(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(FORMATTED, encoding="utf-8")

        _run(tmp_path, "format", str(source))

        assert "All files are already formatted" in capsys.readouterr().out

    def test_directory_is_expanded(self, tmp_path, capsys):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "a.pb").write_text(UNFORMATTED, encoding="utf-8")
        (tmp_path / "src" / "b.pbi").write_text(UNFORMATTED, encoding="utf-8")
        (tmp_path / "src" / "notes.txt").write_text(UNFORMATTED, encoding="utf-8")

        _run(tmp_path, "format", str(tmp_path / "src"))

        assert (tmp_path / "src" / "a.pb").read_text(encoding="utf-8") == FORMATTED
        assert (tmp_path / "src" / "b.pbi").read_text(encoding="utf-8") == FORMATTED
        assert (tmp_path / "src" / "notes.txt").read_text(encoding="utf-8") == UNFORMATTED
        assert "Formatted 2 file(s) successfully" in capsys.readouterr().out

    def test_check_mode_reports_and_fails(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(UNFORMATTED, encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "format", "--check", str(source))

        assert exc_info.value.code == 1
        assert source.read_text(encoding="utf-8") == UNFORMATTED
        out = capsys.readouterr().out
        assert f"Would reformat {source}" in out
        assert "1 file(s) would be reformatted" in out

    def test_check_mode_passes_on_formatted_file(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(FORMATTED, encoding="utf-8")

        _run(tmp_path, "format", "--check", str(source))

        assert "All files are already formatted" in capsys.readouterr().out

    def test_diff_mode(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(UNFORMATTED, encoding="utf-8")

        _run(tmp_path, "format", "--diff", str(source))

        out = capsys.readouterr().out
        assert "-y()" in out
        assert "+        y()" in out
        assert source.read_text(encoding="utf-8") == UNFORMATTED

    def test_tab_options(self, tmp_path):
        source = tmp_path / "main.pb"
        source.write_text("If a\nb\nEndIf", encoding="utf-8")

        _run(tmp_path, "format", "--use-tabs", str(source))

        assert source.read_text(encoding="utf-8") == "If a\n\tb\nEndIf"

    def test_workspace_config_applies(self, tmp_path):
        (tmp_path / "pbformat.toml").write_text("[format]\ntab_size = 2\n", encoding="utf-8")
        source = tmp_path / "main.pb"
        source.write_text("If a\nb\nEndIf", encoding="utf-8")

        _run(tmp_path, "format", str(source))

        assert source.read_text(encoding="utf-8") == "If a\n  b\nEndIf"

    def test_tab_size_flag_overrides_config(self, tmp_path):
        (tmp_path / "pbformat.toml").write_text("[format]\ntab_size = 2\n", encoding="utf-8")
        source = tmp_path / "main.pb"
        source.write_text("If a\nb\nEndIf", encoding="utf-8")

        _run(tmp_path, "format", "--tab-size", "3", str(source))

        assert source.read_text(encoding="utf-8") == "If a\n   b\nEndIf"

    def test_line_range(self, tmp_path):
        source = tmp_path / "main.pb"
        source.write_text("If a\nb\nc\nEndIf", encoding="utf-8")

        _run(tmp_path, "format", "--lines", "2:2", str(source))

        assert source.read_text(encoding="utf-8") == "If a\n    b\nc\nEndIf"

    def test_byte_order_mark_preserved(self, tmp_path):
        source = tmp_path / "main.pb"
        source.write_bytes(codecs.BOM_UTF8 + b"If a\r\nb\r\nEndIf\r\n")

        _run(tmp_path, "format", str(source))

        assert source.read_bytes() == codecs.BOM_UTF8 + b"If a\r\n    b\r\nEndIf\r\n"

    def test_structural_warnings_are_printed(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text("EndIf\n", encoding="utf-8")

        _run(tmp_path, "format", str(source))

        assert f"Warning in {source}: line 1: EndIf without matching opening block" in capsys.readouterr().out


class TestFormatStdin:
    """Formatting stdin to stdout."""

    def test_stdin_to_stdout(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(UNFORMATTED))

        _run(tmp_path, "format", "--stdin")

        assert capsys.readouterr().out == FORMATTED

    def test_stdin_check(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(UNFORMATTED))

        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "format", "--stdin", "--check")

        assert exc_info.value.code == 1

    def test_stdin_line_range(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("If a\nb\nc\nEndIf"))

        _run(tmp_path, "format", "--stdin", "--lines", "3")

        assert capsys.readouterr().out == "If a\nb\n    c\nEndIf"


class TestFormatErrors:
    """Invalid invocations exit with status 1 and a readable message."""

    def test_invalid_tab_size(self, tmp_path, capsys):
        source = tmp_path / "main.pb"
        source.write_text(UNFORMATTED, encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "format", "--tab-size", "0", str(source))

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error [CLI_VALIDATION_ERROR]" in err
        assert "Hint:" in err

    def test_no_files(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            _run(tmp_path, "format")
        assert "No files given" in capsys.readouterr().err

    def test_no_matching_files(self, tmp_path, capsys):
        other = tmp_path / "readme.txt"
        other.write_text("x", encoding="utf-8")

        with pytest.raises(SystemExit):
            _run(tmp_path, "format", str(other))

        captured = capsys.readouterr()
        assert f"Warning: Skipping {other}" in captured.out
        assert "CLI_FILE_NOT_FOUND" in captured.err

    def test_lines_requires_single_file(self, tmp_path, capsys):
        for name in ("a.pb", "b.pb"):
            (tmp_path / name).write_text(UNFORMATTED, encoding="utf-8")

        with pytest.raises(SystemExit):
            _run(tmp_path, "format", "--lines", "1:2", str(tmp_path / "a.pb"), str(tmp_path / "b.pb"))

        assert "--lines requires exactly one file" in capsys.readouterr().err

    def test_invalid_workspace_config(self, tmp_path, capsys):
        (tmp_path / "pbformat.toml").write_text("[format]\ntab_size = 0\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "format", "--stdin")

        assert exc_info.value.code == 1
        assert "PB_CONFIG" in capsys.readouterr().err

    def test_non_object_rc_file(self, tmp_path, capsys):
        (tmp_path / ".pbformatrc").write_text("[]", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "format", "--stdin")

        assert exc_info.value.code == 1
        assert "PB_CONFIG" in capsys.readouterr().err

    def test_reraise_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PBFORMAT_RERAISE", "1")
        with pytest.raises(CLIValidationError):
            _run(tmp_path, "format")


class TestParseLineRange:
    """Parsing of --lines values."""

    def test_range(self):
        assert parse_line_range("3:7") == (2, 6)

    def test_single_line(self):
        assert parse_line_range("5") == (4, 4)

    def test_reversed(self):
        assert parse_line_range("7:3") == (2, 6)

    @pytest.mark.parametrize("value", ["a:b", "0:3", "", "1:x"])
    def test_invalid(self, value):
        with pytest.raises(CLIValidationError):
            parse_line_range(value)
