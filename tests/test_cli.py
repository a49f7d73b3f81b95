from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from yuzu.cli import cli

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_init_creates_config_and_db(tmp_path: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--delimiter", "|", "init", "--dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "yuzu.toml").exists()
    assert (tmp_path / "yuzu.db").read_text() == ""
    assert "'|'" in result.output


def test_init_twice_is_harmless(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["init"])
    assert result.exit_code == 0
    assert "already exists" in result.output
    assert (project / "data.txt").read_text() == "a:1\nb:2\n"


def test_get(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["get", "a"])
    assert result.exit_code == 0
    assert result.output == "1\n"


def test_get_missing(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["get", "nope"])
    assert result.exit_code == 1
    assert "Key not found: nope" in result.output


def test_set_and_rm(project: Path, runner: CliRunner) -> None:
    assert runner.invoke(cli, ["set", "c", "3"]).output == "OK\n"
    assert set((project / "data.txt").read_text().splitlines()) == {"a:1", "b:2", "c:3"}

    result = runner.invoke(cli, ["set", "c", "4", "--show-previous"])
    assert result.output == "3\n"

    result = runner.invoke(cli, ["rm", "a"])
    assert result.exit_code == 0
    assert result.output == "1\n"
    assert set((project / "data.txt").read_text().splitlines()) == {"b:2", "c:4"}


def test_rm_missing(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["rm", "nope"])
    assert result.exit_code == 1
    assert "Key not found" in result.output


def test_set_refuses_delimiter_in_value(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["set", "url", "http://x"])
    assert result.exit_code == 1
    assert "delimiter" in result.output
    assert "url" not in (project / "data.txt").read_text()


def test_list_sorted(project: Path, runner: CliRunner) -> None:
    (project / "data.txt").write_text("b:2\na:1\n")
    result = runner.invoke(cli, ["list"])
    assert result.output == "a:1\nb:2\n"


def test_file_and_delimiter_overrides(tmp_path: Path, runner: CliRunner) -> None:
    other = tmp_path / "other.db"
    other.write_text("x->y\n")
    result = runner.invoke(cli, ["-f", str(other), "-d", "->", "get", "x"])
    assert result.exit_code == 0
    assert result.output == "y\n"


def test_empty_delimiter_option(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-d", "", "list"])
    assert result.exit_code == 2


def test_check_ok(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["check"])
    assert result.exit_code == 0
    assert "OK: 2 rows" in result.output


def test_check_reports_parse_error(project: Path, runner: CliRunner) -> None:
    (project / "data.txt").write_text("a:1\nbroken\n")
    result = runner.invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "data.txt:2: failed: parser error" in result.output


def test_missing_db(tmp_path: Path, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli, ["get", "a"])
    assert result.exit_code == 1
    assert "cannot read" in result.output


def test_status(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["status"])
    assert result.exit_code == 0, result.output
    assert "Rows" in result.output
    assert "2" in result.output


def test_set_unencodable_value(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["set", "k", "\udcff"])
    assert result.exit_code == 1
    assert "cannot write" in result.output
    assert (project / "data.txt").read_text() == "a:1\nb:2\n"


def test_malformed_config(project: Path, runner: CliRunner) -> None:
    (project / "yuzu.toml").write_text('yuzu = "x"\n')
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 1
    assert "must be a table" in result.output


def test_init_with_control_character_delimiter(tmp_path: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-d", "\x1f", "init", "--dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "'\\x1f'" in result.output


def test_init_warns_when_overrides_ignored(project: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-d", "|", "init"])
    assert result.exit_code == 0
    assert "not applied" in result.output
    assert "Delimiter: ':'" in result.output
