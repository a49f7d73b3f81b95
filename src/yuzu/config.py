"""YuzuConfig: project-local config naming the database file and its delimiter.

Default layout (relative to the project root):

    yuzu.toml             # project config
    yuzu.db               # the plaintext database

yuzu.toml example:

    [yuzu]
    file = "yuzu.db"      # relative to the project root
    delimiter = "="
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "yuzu.toml"
_DEFAULT_FILE = "yuzu.db"
_DEFAULT_DELIMITER = "="


class ConfigError(Exception):
    """yuzu.toml is unreadable or holds an invalid value."""


@dataclass
class YuzuConfig:
    """Resolved configuration for a yuzu project."""

    root: Path                      # directory that contains yuzu.toml
    file: str = _DEFAULT_FILE
    delimiter: str = _DEFAULT_DELIMITER

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME

    @property
    def db_path(self) -> Path:
        return self.root / self.file

    def ensure_db(self) -> bool:
        """Create an empty database file if missing. Returns True if created."""
        if self.db_path.exists():
            return False
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path.touch()
        return True


def load_config(root: Path | str | None = None) -> YuzuConfig:
    """Load yuzu.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        try:
            with config_path.open("rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            msg = f"invalid {config_path}: {exc}"
            raise ConfigError(msg) from exc

    section = raw.get("yuzu", {})
    if not isinstance(section, dict):
        msg = f"{config_path}: [yuzu] must be a table"
        raise ConfigError(msg)
    file = section.get("file", _DEFAULT_FILE)
    delimiter = section.get("delimiter", _DEFAULT_DELIMITER)
    for name, value in (("file", file), ("delimiter", delimiter)):
        if not isinstance(value, str) or not value:
            msg = f"{config_path}: {name} must be a non-empty string"
            raise ConfigError(msg)

    return YuzuConfig(
        root=root_path,
        file=file,
        delimiter=delimiter,
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for yuzu.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, file: str | None = None, delimiter: str | None = None) -> Path:
    """Write a default yuzu.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"yuzu.toml already exists at {config_path}"
        raise FileExistsError(msg)
    if delimiter == "":
        msg = "delimiter must not be empty"
        raise ConfigError(msg)

    content = f"""\
[yuzu]
file = {_toml_str(file or _DEFAULT_FILE)}
delimiter = {_toml_str(delimiter or _DEFAULT_DELIMITER)}
# Keys and values must never contain the delimiter or a newline:
# there is no escaping, such rows make the file unloadable.
"""
    config_path.write_text(content)
    return config_path


def _toml_str(value: str) -> str:
    """Quote value as a TOML basic string (control characters as \\uXXXX)."""
    out = []
    for ch in value:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch == "\t":
            out.append(ch)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'
