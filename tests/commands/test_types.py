"""Tests for the resolve and members commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from propbind.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestResolveCommand:
    def test_alias(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "resolve", "rb"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["name"] == "Rigidbody"

    def test_prefixed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "resolve", "UnityEngine.AudioSource"])
        assert result.exit_code == 0
        assert result.output.strip() == "AudioSource"

    def test_misspelled(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "resolve", "Rigidboddy"])
        assert result.exit_code == 1
        error = json.loads(result.output)["error"]
        assert error["code"] == "type_not_found"
        assert error["detail"]["suggestions"][0] == "Rigidbody"

    def test_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["resolve", "renderer"])
        assert result.exit_code == 0
        assert "name: MeshRenderer" in result.output
        assert "query: renderer" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
class TestMembersCommand:
    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "members", "Camera"])
        assert result.exit_code == 0
        members = {m["name"]: m for m in json.loads(result.output)["data"]["members"]}
        assert members["aspect"]["writable"] is False
        assert members["cullingMask"]["kind"] == "layer_mask"

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "members", "Rigidbody2D"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["mass", "gravityScale", "bodyType", "velocity"]

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["members", "Light"])
        assert result.exit_code == 0
        assert "intensity" in result.output
        assert "read-write" in result.output

    def test_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["members", "Ligth"])
        assert result.exit_code == 1
        assert "Unknown type 'Ligth'" in result.output
