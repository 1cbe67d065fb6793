"""Tests for configuration loading."""

import json
import textwrap

import pytest

from token_limit.config import (
    ConfigError,
    ConfigLoader,
    ConfigNotFoundError,
    TokenCheck,
    define_config,
    load_config,
    process_config,
)


class TestTokenCheck:
    """Tests for TokenCheck dataclass."""

    def test_from_camel_case(self):
        """Test camelCase keys from config files."""
        check = TokenCheck.from_dict(
            {"path": "a.md", "limit": "1k", "warnThreshold": 0.5, "showCost": True}
        )

        assert check.warn_threshold == 0.5
        assert check.show_cost is True
        assert check.model == "gpt-4"

    def test_from_snake_case(self):
        """Test snake_case keys are accepted too."""
        check = TokenCheck.from_dict(
            {"path": ["a.md"], "model": "gpt-4o", "warn_threshold": 0.9, "show_cost": True}
        )

        assert check.patterns == ["a.md"]
        assert check.model == "gpt-4o"
        assert check.warn_threshold == 0.9

    def test_patterns_from_string(self):
        """Test a single path becomes a one-item list."""
        assert TokenCheck(path="a.md").patterns == ["a.md"]

    def test_invalid_threshold(self):
        """Test thresholds outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="warnThreshold must be in range"):
            TokenCheck(path="a.md", warn_threshold=1.5)

    def test_to_dict(self):
        """Test serialization uses camelCase and skips unset fields."""
        check = TokenCheck(path="a.md", limit="1k")

        assert check.to_dict() == {
            "path": "a.md",
            "model": "gpt-4",
            "limit": "1k",
            "warnThreshold": 0.8,
        }


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = ConfigLoader()

    def test_pyproject_section(self, tmp_path):
        """Test checks under [tool.token-limit] in pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text(
            textwrap.dedent(
                """
                [project]
                name = "demo"

                [[tool.token-limit.checks]]
                name = "docs"
                path = "docs/*.md"
                limit = "10k"
                """
            )
        )

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config_path == "pyproject.toml"
        assert result.config_directory == str(tmp_path)
        assert result.config == [
            {"name": "docs", "path": f"{tmp_path.as_posix()}/docs/*.md", "limit": "10k"}
        ]

    def test_pyproject_without_section_is_skipped(self, tmp_path):
        """Test a pyproject.toml without the section falls through."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        (tmp_path / ".token-limit.json").write_text(json.dumps([{"path": "a.md"}]))

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config_path == ".token-limit.json"

    def test_json_names_default_to_paths(self, tmp_path):
        """Test missing names become the relative paths."""
        (tmp_path / ".token-limit.json").write_text(
            json.dumps([{"path": ["a.md", "!b.md"], "limit": 100}])
        )

        result = self.loader.load_config(search_from=str(tmp_path))

        check = result.config[0]
        assert check["name"] == "a.md, !b.md"
        assert check["path"] == [
            f"{tmp_path.as_posix()}/a.md",
            f"!{tmp_path.as_posix()}/b.md",
        ]

    def test_yaml(self, tmp_path):
        """Test YAML config files."""
        (tmp_path / ".token-limit.yml").write_text(
            "- name: prompts\n  path: prompts/*.txt\n  limit: $0.05\n"
        )

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config[0]["name"] == "prompts"
        assert result.config[0]["limit"] == "$0.05"

    def test_toml_checks_array(self, tmp_path):
        """Test standalone TOML files with a checks array."""
        (tmp_path / ".token-limit.toml").write_text(
            '[[checks]]\npath = "a.md"\nlimit = 500\n'
        )

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config[0]["limit"] == 500

    def test_python_config(self, tmp_path):
        """Test Python config files exposing a config list."""
        (tmp_path / ".token-limit.py").write_text(
            textwrap.dedent(
                """
                from token_limit import define_config

                config = define_config([
                    {"name": "docs", "path": "docs/**/*.md", "limit": "10k"},
                ])
                """
            )
        )

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config[0]["name"] == "docs"

    def test_search_order(self, tmp_path):
        """Test earlier search places win."""
        (tmp_path / ".token-limit.json").write_text(json.dumps([{"path": "json.md"}]))
        (tmp_path / ".token-limit.yaml").write_text("- path: yaml.md\n")

        result = self.loader.load_config(search_from=str(tmp_path))

        assert result.config_path == ".token-limit.json"

    def test_explicit_path(self, tmp_path):
        """Test an explicit path is loaded by its extension."""
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        (config_dir / "limits.yaml").write_text("- path: a.md\n")

        result = self.loader.load_config("conf/limits.yaml", search_from=str(tmp_path))

        assert result.config_path == "conf/limits.yaml"
        assert result.config[0]["path"] == f"{config_dir.as_posix()}/a.md"

    def test_explicit_path_missing(self, tmp_path):
        """Test a missing explicit path raises."""
        with pytest.raises(ConfigNotFoundError, match="Config file not found"):
            self.loader.load_config("nope.json", search_from=str(tmp_path))

    def test_not_found(self, tmp_path):
        """Test no config file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError, match="configuration not found"):
            self.loader.load_config(search_from=str(tmp_path))

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises ConfigError."""
        (tmp_path / ".token-limit.json").write_text("[{")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            self.loader.load_config(search_from=str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigError."""
        (tmp_path / ".token-limit.yaml").write_text("- path: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            self.loader.load_config(search_from=str(tmp_path))

    def test_broken_python_config(self, tmp_path):
        """Test errors in Python config files raise ConfigError."""
        (tmp_path / ".token-limit.py").write_text("raise RuntimeError('broken')\n")

        with pytest.raises(ConfigError, match="broken"):
            self.loader.load_config(search_from=str(tmp_path))

    def test_convenience_function(self, tmp_path):
        """Test the module level load_config function."""
        (tmp_path / ".token-limit").write_text(json.dumps([{"path": "a.md"}]))

        result = load_config(search_from=str(tmp_path))

        assert result.config_path == ".token-limit"


class TestProcessConfig:
    """Tests for process_config function."""

    def test_non_list_returned_unchanged(self, tmp_path):
        """Test invalid shapes are left for validation."""
        assert process_config({"path": "a.md"}, tmp_path) == {"path": "a.md"}

    def test_absolute_paths_kept(self, tmp_path):
        """Test absolute paths are not rebased."""
        processed = process_config([{"path": "/abs/a.md", "name": "abs"}], tmp_path)

        assert processed[0]["path"] == "/abs/a.md"

    def test_blank_paths_left_for_validation(self, tmp_path):
        """Test empty patterns are not rebased onto the config directory."""
        processed = process_config(
            [{"path": ""}, {"path": ["docs/*.md", "  "]}], tmp_path
        )

        assert processed[0]["path"] == ""
        assert "name" not in processed[0]
        assert processed[1]["path"] == [(tmp_path / "docs/*.md").as_posix(), "  "]
        assert processed[1]["name"] == "docs/*.md"

    def test_define_config_returns_input(self):
        """Test define_config passes checks through."""
        checks = [{"path": "a.md"}]

        assert define_config(checks) is checks
