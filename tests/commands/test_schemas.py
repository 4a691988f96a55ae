"""Tests for the schemas command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from propbind.cli import cli
from propbind.domain.builtin_schemas import SCHEMA_REGISTRY


@pytest.mark.usefixtures("_isolated_cwd")
class TestSchemasList:
    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "schemas", "list"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "list_schemas"
        assert data["data"]["count"] == len(SCHEMA_REGISTRY)

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "schemas", "list"])
        assert result.exit_code == 0
        assert "particle_system.main" in result.output.splitlines()

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["schemas", "list"])
        assert result.exit_code == 0
        assert "Schema" in result.output
        assert "material" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
class TestSchemasShow:
    def test_builtin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "schemas", "show", "material"])
        assert result.exit_code == 0
        entries = json.loads(result.output)["data"]["entries"]
        assert entries[0]["name"] == "materialName"
        assert entries[0]["required"] is True

    def test_derived_from_type(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "schemas", "show", "Rigidbody"])
        assert result.exit_code == 0
        assert "mass" in result.output.splitlines()

    def test_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "schemas", "show", "matrial"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "schema_not_found"

    def test_unknown_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["schemas", "show", "matrial"])
        assert result.exit_code == 1
        assert "did you mean" in result.output
