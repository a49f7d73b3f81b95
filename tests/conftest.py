from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    path = tmp_path / "yuzu.db"
    path.write_text("a=1\nb=2\n", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project root with yuzu.toml and a two-row database, used as cwd."""
    (tmp_path / "yuzu.toml").write_text('[yuzu]\nfile = "data.txt"\ndelimiter = ":"\n')
    (tmp_path / "data.txt").write_text("a:1\nb:2\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
