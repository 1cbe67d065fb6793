"""Tests for the CLI entry point."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from token_limit.counting import CountingResult
from token_limit.main import EXIT_CHECK_FAILED, EXIT_ERROR, EXIT_SUCCESS, main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in an empty directory without API credentials."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    return tmp_path


def fake_count(tokens: int):
    return AsyncMock(
        side_effect=lambda text, model: CountingResult(model=model, input_tokens=tokens)
    )


class TestMain:
    """Test cases for main function."""

    def test_files_within_limit(self, isolated_env, capsys):
        """Test a passing files check exits 0."""
        (isolated_env / "prompt.md").write_text("hello")

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)):
            exit_code = main(["prompt.md", "--limit", "100"])

        assert exit_code == EXIT_SUCCESS
        assert "Token count is 50 under limit" in capsys.readouterr().out

    def test_files_over_limit(self, isolated_env):
        """Test a failing check exits 2."""
        (isolated_env / "prompt.md").write_text("hello")

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)):
            exit_code = main(["prompt.md", "--limit", "40"])

        assert exit_code == EXIT_CHECK_FAILED

    def test_missing_files_fail(self, capsys):
        """Test unmatched files exit 2."""
        exit_code = main(["missing-*.md", "--limit", "10k"])

        assert exit_code == EXIT_CHECK_FAILED
        assert "can't find files" in capsys.readouterr().out

    def test_json_output(self, isolated_env, capsys):
        """Test --json prints results as JSON."""
        (isolated_env / "prompt.md").write_text("hello")

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)):
            main(["prompt.md", "--limit", "100", "--json", "--name", "prompt"])

        data = json.loads(capsys.readouterr().out)
        assert data[0]["name"] == "prompt"
        assert data[0]["tokenCount"] == 50
        assert data[0]["passed"] is True

    def test_config_file(self, isolated_env, capsys):
        """Test checks are loaded from a config file."""
        (isolated_env / "docs").mkdir()
        (isolated_env / "docs" / "a.md").write_text("hello")
        (isolated_env / ".token-limit.json").write_text(
            json.dumps([{"name": "docs", "path": "docs/*.md", "limit": 10, "model": "gpt-4o"}])
        )

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)):
            exit_code = main([])

        assert exit_code == EXIT_CHECK_FAILED
        assert "at .token-limit.json" in capsys.readouterr().out

    def test_no_config(self, capsys):
        """Test a missing configuration exits 1."""
        exit_code = main([])

        assert exit_code == EXIT_ERROR
        assert "configuration not found" in capsys.readouterr().err

    def test_invalid_limit(self, isolated_env, capsys):
        """Test a malformed limit exits 1 before any check runs."""
        (isolated_env / "prompt.md").write_text("hello")

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)) as mock_count:
            exit_code = main(["prompt.md", "--limit", "abc"])

        assert exit_code == EXIT_ERROR
        assert "abc" in capsys.readouterr().err
        mock_count.assert_not_awaited()

    def test_invalid_config_reports_fields(self, isolated_env, capsys):
        """Test validation errors name the offending fields."""
        (isolated_env / ".token-limit.json").write_text(
            json.dumps([{"path": "", "model": "gpt-9"}])
        )

        exit_code = main([])

        err = capsys.readouterr().err
        assert exit_code == EXIT_ERROR
        assert "checks[0].path" in err
        assert "checks[0].model" in err

    def test_json_error(self, capsys):
        """Test errors are JSON with --json."""
        exit_code = main(["--json"])

        assert exit_code == EXIT_ERROR
        assert "error" in json.loads(capsys.readouterr().out)

    def test_hide_passed(self, isolated_env, capsys):
        """Test --hide-passed hides passing checks."""
        (isolated_env / "prompt.md").write_text("hello")

        with patch("token_limit.main.TokenCounter.count_async", fake_count(50)):
            main(["prompt.md", "--limit", "100", "--hide-passed"])

        assert "Token count" not in capsys.readouterr().out
