"""Tests for the validate command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from propbind.cli import cli

MATERIAL = '{"materialName": "Brick", "shaderName": "Standard", "baseColor": "red"}'


@pytest.mark.usefixtures("_isolated_cwd")
class TestValidateCommand:
    def test_inline_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "validate", "material", MATERIAL])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["merged"]["baseColor"] == [1.0, 0.0, 0.0, 1.0]
        assert data["data"]["merged"]["metallic"] == 0.0

    def test_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        payload = tmp_path / "payload.json"
        payload.write_text('{"main": {"duration": 2}}')
        result = cli_runner.invoke(cli, ["--json", "validate", "particle_system", str(payload)])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["merged"]["main"]["duration"] == 2.0

    def test_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "validate", "Rigidbody", "-"], input='{"mass": "3"}')
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["merged"] == {"mass": 3.0}

    def test_failure_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "validate", "material", '{"metallic": 2}'])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "validation_failed"
        messages = [e["message"] for e in data["error"]["detail"]["errors"]]
        assert messages == [
            "Missing required field 'materialName'",
            "Missing required field 'shaderName'",
            "Field 'metallic' out of range: 2 > 1",
        ]

    def test_failure_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "material", "{}"])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "- Missing required field 'materialName'" in result.output

    def test_warnings_on_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "Rigidbody", '{"mas": 1}'])
        assert result.exit_code == 0
        assert "WARNING: Unknown field 'mas' ignored" in result.output

    def test_invalid_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "material", "{oops"])
        assert result.exit_code != 0
        assert "not valid JSON" in result.output

    def test_unknown_schema(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "validate", "nope", "{}"])
        assert result.exit_code == 1
        assert "ERROR: validate - No schema or type named 'nope'" in result.output
