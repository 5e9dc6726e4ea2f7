"""Tests for the nodemod command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from nodemod.cli.main import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to the runner's streams once a command has run."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Isolated working directory with one file to migrate."""
    (tmp_path / "app.js").write_text("const { log } = require('util');\nlog('hi');\n")
    monkeypatch.chdir(tmp_path)
    with patch("nodemod.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield tmp_path


class TestListCommand:
    """nodemod list."""

    def test_given_json_flag_when_listed_then_catalog(self) -> None:
        result = runner.invoke(cli, ["list", "--json"])

        assert result.exit_code == 0
        names = [r["name"] for r in json.loads(result.stdout)]
        assert names == ["crypto-fips", "types-is-native-error", "util-is", "util-log"]

    def test_given_no_flag_when_listed_then_table(self) -> None:
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0


class TestRunCommand:
    """nodemod run."""

    def test_given_dry_run_json_when_run_then_change_reported(self, workspace: Path) -> None:
        # When
        result = runner.invoke(cli, ["run", "util-log", str(workspace), "--dry-run", "--json"])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["files_changed"] == 1
        assert data["dry_run"] is True
        assert (workspace / "app.js").read_text() == "const { log } = require('util');\nlog('hi');\n"

    def test_given_default_path_when_run_then_cwd_rewritten(self, workspace: Path) -> None:
        result = runner.invoke(cli, ["run", "util-log"])

        assert result.exit_code == 0, result.output
        assert (workspace / "app.js").read_text() == "console.log(new Date().toLocaleString(), 'hi');\n"

    def test_given_unknown_recipe_when_run_then_error(self, workspace: Path) -> None:
        result = runner.invoke(cli, ["run", "no-such-recipe", str(workspace)])

        assert result.exit_code == 1
        assert "Unknown recipe" in result.output

    def test_given_undecodable_file_when_run_then_exit_code_one(self, workspace: Path) -> None:
        (workspace / "bad.js").write_bytes(b"\xff\xfe")

        result = runner.invoke(cli, ["run", "util-log", str(workspace), "--json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["failures"][0]["code"] == 3002


class TestVersion:
    """nodemod --version."""

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
