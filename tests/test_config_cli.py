"""CLI tests for configuration commands."""

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from svnrev.cli import cli
from svnrev.config import ConfigManager


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / "svnrev.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["-c", str(_config_path(tmp_path)), "config", "view"])

    assert result.exit_code == 0
    assert "entries:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)

    result = runner.invoke(
        cli, ["-c", str(path), "config", "set", "output.separator", "--value", "_"]
    )

    assert result.exit_code == 0
    assert "Updated output.separator" in result.output

    config = ConfigManager(config_path=path, env={}).load(include_env=False)
    assert config.output.separator == "_"


def test_config_set_reports_unchanged_value(tmp_path: Path) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)

    result = runner.invoke(
        cli, ["-c", str(path), "config", "set", "svn.executable", "--value", "svn"]
    )

    assert result.exit_code == 0
    assert "No changes applied" in result.output


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)

    result = runner.invoke(
        cli, ["-c", str(path), "config", "set", "runtime.max_workers", "--value", "0"]
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)

    manager = ConfigManager(config_path=path, env={})
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("fail_on_error: true", "fail_on_error: false")

    monkeypatch.setattr("svnrev.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["-c", str(path), "config", "edit"])

    assert result.exit_code == 0
    assert "updated" in result.output.lower()

    config = manager.load(include_env=False)
    assert config.fail_on_error is False


def test_config_view_prints_environment_variables(tmp_path: Path) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)

    result = runner.invoke(cli, ["-c", str(path), "config", "view", "--no-env", "--format", "env"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "SVNREV__SVN__EXECUTABLE=svn" in lines
    assert "SVNREV__OUTPUT__SEPARATOR=." in lines


def test_config_edit_rejects_invalid_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    runner = CliRunner()
    path = _config_path(tmp_path)
    manager = ConfigManager(config_path=path, env={})
    manager.ensure_exists()
    before = manager.read_text()

    monkeypatch.setattr(
        "svnrev.cli.click.edit", lambda text, **_: text.replace("max_workers: 1", "max_workers: 0")
    )

    result = runner.invoke(cli, ["-c", str(path), "config", "edit"])

    assert result.exit_code != 0
    assert manager.read_text() == before
