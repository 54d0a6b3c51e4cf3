"""Tests for `agent-mcp init` command."""

from __future__ import annotations

from pathlib import Path

import yaml
from click.testing import CliRunner

from agent_mcp.cli import cli
from agent_mcp.commands.init import CONFIG_FILENAME, TEMPLATE_YAML
from agent_mcp.config.models import ServerConfig
from agent_mcp.config.parser import load_config


class TestInitCreatesFiles:
    """agent-mcp init writes the template config."""

    def test_creates_config(self, tmp_path: Path) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["init"])
            assert result.exit_code == 0
            assert Path(CONFIG_FILENAME).read_text() == TEMPLATE_YAML

    def test_output_mentions_created_file(self, tmp_path: Path) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["init"])
            assert f"Created {CONFIG_FILENAME}" in result.output
            assert "agent-mcp serve gemini" in result.output


class TestInitOverwrite:
    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path(CONFIG_FILENAME).write_text("keep me", encoding="utf-8")
            result = runner.invoke(cli, ["init"])
            assert result.exit_code == 1
            assert "already exists" in result.output
            assert Path(CONFIG_FILENAME).read_text() == "keep me"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path(CONFIG_FILENAME).write_text("old", encoding="utf-8")
            result = runner.invoke(cli, ["init", "--force"])
            assert result.exit_code == 0
            assert Path(CONFIG_FILENAME).read_text() == TEMPLATE_YAML


class TestGeneratedConfigIsValid:
    """The generated agent-mcp.yaml must parse and validate correctly."""

    def test_template_validates(self) -> None:
        data = yaml.safe_load(TEMPLATE_YAML)
        config = ServerConfig.model_validate(data)
        assert config.version == "1"
        assert set(config.agents) == {"gemini", "claude"}
        assert config.settings_for("claude").unset_env == ["ANTHROPIC_API_KEY"]

    def test_loads_through_parser(self, tmp_path: Path) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            runner.invoke(cli, ["init"])
            config = load_config(Path(CONFIG_FILENAME))
            assert config.settings_for("gemini").render_hint is True
