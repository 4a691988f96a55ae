"""Tests for the root propbind CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from propbind import __version__
from propbind.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestRoot:
    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "propbind" in result.output
        for command in ("schemas", "validate", "resolve", "members"):
            assert command in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_prints_usage(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    @pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
    def test_global_flags_accepted(self, cli_runner: CliRunner, flag: str) -> None:
        result = cli_runner.invoke(cli, [flag, "--version"])
        assert result.exit_code == 0

    def test_missing_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(tmp_path / "missing.toml"), "schemas", "list"])
        assert result.exit_code != 0
        assert "Config file not found" in result.output

    def test_config_file_applies(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text('[resolver.aliases]\nbody = "Rigidbody"\n')
        result = cli_runner.invoke(cli, ["-c", str(config), "-q", "resolve", "body"])
        assert result.exit_code == 0
        assert result.output.strip() == "Rigidbody"

    def test_discovered_config_schema(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "propbind.toml").write_text(
            '[schemas.mover.speed]\nkind = "number"\nrequired = true\nrange = [0, 100]\n'
        )
        result = cli_runner.invoke(cli, ["-q", "schemas", "show", "mover"])
        assert result.exit_code == 0
        assert result.output.strip() == "speed"

    def test_invalid_schema_in_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "propbind.toml").write_text(
            '[schemas.bad.speed]\nkind = "number"\nrequired = true\ndefault = 1\n'
        )
        result = cli_runner.invoke(cli, ["schemas", "list"])
        assert result.exit_code != 0
        assert "Invalid schema in configuration" in result.output
