"""
pbformat - indentation formatter and language server for PureBasic.

The code is organised into several modules:

* ``formatting`` – the line classifier, the indentation state machine and
  the ``IndentFormatter`` facade used for whole-document and range
  formatting.
* ``lsp`` – a pygls language server exposing document and range
  formatting to editors.
* ``cli`` – a command line interface for formatting files in place,
  checking formatting in CI and launching the language server.
* ``config`` – workspace configuration (``pbformat.toml``) supplying the
  default indentation options.
"""

import re
from pathlib import Path
from importlib import metadata as _metadata


def _local_version() -> str | None:
    root = Path(__file__).resolve().parents[1]
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return None
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:  # pragma: no cover - IO errors should not break imports
        return None
    match = re.search(r"^version\s*=\s*\"([^\"]+)\"", text, flags=re.MULTILINE)
    if match:
        return match.group(1)
    return None


try:  # pragma: no cover - metadata lookup for installed copies
    __version__ = _metadata.version("pbformat")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = _local_version() or "0.1.0"

__all__ = ["__version__"]
