"""Tests for CLI argument parsing and configuration."""

import pytest

from token_limit.cli import CLIArgumentParser, CLIConfig, parse_cli_args


class TestCLIConfig:
    """Test CLIConfig dataclass and validation."""

    def test_defaults(self):
        """Test an empty config loads from file."""
        config = CLIConfig()

        assert config.files == []
        assert config.json_output is False
        assert config.config_path is None

    def test_config_with_files_rejected(self):
        """Test --config cannot be combined with files."""
        with pytest.raises(ValueError, match="--config cannot be combined with files"):
            CLIConfig(files=["a.md"], config_path="x.json")

    def test_name_without_files_rejected(self):
        """Test --name only applies to files."""
        with pytest.raises(ValueError, match="--name requires files"):
            CLIConfig(name="docs")

    def test_build_check_defaults(self):
        """Test a files check defaults to gpt-4o."""
        config = CLIConfig(files=["docs\\a.md", "b.md"])

        assert config.build_check() == {"path": ["docs/a.md", "b.md"], "model": "gpt-4o"}

    def test_build_check_with_options(self):
        """Test limit, model and name are carried over."""
        config = CLIConfig(files=["a.md"], limit="10k", model="claude-sonnet-4", name="docs")

        assert config.build_check() == {
            "path": ["a.md"],
            "model": "claude-sonnet-4",
            "limit": "10k",
            "name": "docs",
        }


class TestCLIArgumentParser:
    """Test CLIArgumentParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = CLIArgumentParser()

    def test_no_arguments(self):
        """Test parsing with no arguments."""
        config = self.parser.parse_args([])

        assert config == CLIConfig()

    def test_files_and_options(self):
        """Test files with every option."""
        config = self.parser.parse_args(
            [
                "docs/*.md",
                "README.md",
                "--limit",
                "$0.05",
                "--model",
                "gpt-4",
                "--name",
                "docs",
                "--silent",
                "--json",
                "--hide-passed",
                "--debug",
            ]
        )

        assert config.files == ["docs/*.md", "README.md"]
        assert config.limit == "$0.05"
        assert config.model == "gpt-4"
        assert config.name == "docs"
        assert config.silent is True
        assert config.json_output is True
        assert config.hide_passed is True
        assert config.debug is True

    def test_config_path(self):
        """Test --config is stored."""
        assert self.parser.parse_args(["--config", "limits.yaml"]).config_path == "limits.yaml"

    def test_validation_error_exits(self, capsys):
        """Test invalid combinations exit with a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            self.parser.parse_args(["a.md", "--config", "x.json"])

        assert exc_info.value.code == 2
        assert "--config cannot be combined with files" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test --version prints and exits."""
        with pytest.raises(SystemExit) as exc_info:
            self.parser.parse_args(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("token-limit ")

    def test_parse_cli_args(self):
        """Test the convenience function."""
        assert parse_cli_args(["--json"]).json_output is True
