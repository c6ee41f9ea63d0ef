"""Workspace configuration support for pbformat."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import PBConfigError
from .formatting import FormattingOptions

CONFIG_FILENAMES = ("pbformat.toml", ".pbformatrc")
DEFAULT_EXTENSIONS: Tuple[str, ...] = (".pb", ".pbi", ".pbf")


@dataclass
class FormatDefaults:
    """Indentation settings used when an editor request does not supply them."""

    tab_size: int = 4
    insert_spaces: bool = True
    trim_trailing_whitespace: bool = True

    def to_options(self) -> FormattingOptions:
        return FormattingOptions(
            tab_size=self.tab_size,
            insert_spaces=self.insert_spaces,
            trim_trailing_whitespace=self.trim_trailing_whitespace,
        )


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    format: FormatDefaults = field(default_factory=FormatDefaults)
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def matches(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _require_bool(section: Dict[str, Any], key: str, default: bool, path: Optional[Path]) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise PBConfigError(
            f"'format.{key}' must be true or false, got {value!r}",
            path=str(path) if path else None,
        )
    return value


def parse_format_section(data: Dict[str, Any], path: Optional[Path] = None) -> FormatDefaults:
    section = data.get("format") or {}
    if not isinstance(section, dict):
        raise PBConfigError("'format' must be a table", path=str(path) if path else None)
    tab_size = section.get("tab_size", FormatDefaults.tab_size)
    if isinstance(tab_size, bool) or not isinstance(tab_size, int) or tab_size < 1:
        raise PBConfigError(
            f"'format.tab_size' must be a positive integer, got {tab_size!r}",
            path=str(path) if path else None,
            hint="Use a value such as 2 or 4",
        )
    return FormatDefaults(
        tab_size=tab_size,
        insert_spaces=_require_bool(section, "insert_spaces", FormatDefaults.insert_spaces, path),
        trim_trailing_whitespace=_require_bool(
            section, "trim_trailing_whitespace", FormatDefaults.trim_trailing_whitespace, path
        ),
    )


def _parse_extensions(data: Dict[str, Any], path: Optional[Path]) -> Tuple[str, ...]:
    files_section = data.get("files") or {}
    values = files_section.get("extensions") if isinstance(files_section, dict) else None
    if values is None:
        return DEFAULT_EXTENSIONS
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)) or not values:
        raise PBConfigError("'files.extensions' must be a non-empty list", path=str(path) if path else None)
    extensions: List[str] = []
    for entry in values:
        text = str(entry).strip().lower()
        if not text.startswith("."):
            text = f".{text}"
        extensions.append(text)
    return tuple(extensions)


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return WorkspaceConfig(root=root)

    try:
        if config_path.suffix == ".toml":
            data = _read_toml_config(config_path)
        else:
            data = _read_json_config(config_path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError always carries a position; TOMLDecodeError does from Python 3.14.
        raise PBConfigError(
            f"Could not read configuration: {exc}",
            path=str(config_path),
            line=getattr(exc, "lineno", None),
            column=getattr(exc, "colno", None),
        ) from exc
    if not isinstance(data, dict):
        raise PBConfigError(
            f"Configuration must be a table of sections, got {type(data).__name__}",
            path=str(config_path),
            hint='Use an object such as {"format": {"tab_size": 4}}',
        )

    return WorkspaceConfig(
        root=root,
        format=parse_format_section(data, config_path),
        extensions=_parse_extensions(data, config_path),
        source=config_path,
        raw=data,
    )


__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_EXTENSIONS",
    "FormatDefaults",
    "WorkspaceConfig",
    "load_workspace_config",
    "locate_config_file",
    "parse_format_section",
]
