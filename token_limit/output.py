"""Output formatting for token limit results."""

import json
import os
import re
import sys
import traceback
from typing import List, Optional, TextIO, Tuple

from .models import ModelRegistry, get_default_registry
from .runner import CheckResult, ReporterConfig

PYPROJECT_FILE = "pyproject.toml"

COLOR_CODES = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "black": "\033[30m",
    "bg_red": "\033[41m",
    "bold": "\033[1m",
    "reset": "\033[0m",
}

_HIGHLIGHT = re.compile(r"\*(?P<text>[^*]+)\*")


def format_tokens(tokens: int) -> str:
    """Format a token count as "950", "1.2k" or "3.4M"."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1000:
        return f"{tokens / 1000:.1f}k"
    return f"{tokens:,}"


def format_cost(cost: float) -> str:
    """Format a USD amount, keeping three decimals below one dollar."""
    if cost < 1:
        return f"${cost:.3f}"
    return f"${cost:.2f}"


def _should_enable_colors(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False

    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class HumanReporter:
    """Prints results as status lines and aligned tables."""

    def __init__(
        self,
        silent: bool = False,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        registry: Optional[ModelRegistry] = None,
    ):
        self.silent = silent
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.registry = registry or get_default_registry()
        self._colors_enabled = _should_enable_colors(self.stdout)
        self._error_colors_enabled = _should_enable_colors(self.stderr)

    def results(self, config: ReporterConfig) -> None:
        """Print every visible check and a fix hint when something failed.

        In silent mode only failed checks are printed, and nothing at all
        when every check passed.
        """
        lines: List[str] = []

        for check in config.checks:
            if not self._should_show(check, config):
                continue

            if check.missed:
                lines.append(
                    self._colorize(
                        f"Token Limit can't find files at {', '.join(check.files)}", "red"
                    )
                )
                if check.message:
                    lines.append(check.message)
                lines.append("")
                continue

            if len(config.checks) > 1:
                lines.append(self._colorize(check.name, "bold"))
                lines.append("")

            lines.extend(self._status_messages(check))
            lines.extend(self._format_table(check))
            lines.append("")

        if config.failed:
            lines.append(
                self._colorize(
                    self._fix_text("Try to reduce token usage or increase limit", config),
                    "yellow",
                )
            )

        if self.silent and not any(line.strip() for line in lines):
            return

        self.stdout.write("\n" + "\n".join(lines) + "\n")

    def error(self, error: BaseException, debug: bool = False) -> None:
        """Print an error to stderr.

        Field names wrapped in asterisks are highlighted and every sentence
        starts on its own line. With debug the traceback is printed instead.
        """
        badge = self._colorize_error(
            self._colorize_error(" ERROR ", "black"), "bg_red"
        )
        if debug:
            message = "".join(traceback.format_exception(error)).rstrip()
        else:
            message = str(error) or "An unknown error occurred"
            message = ".\n        ".join(
                _HIGHLIGHT.sub(
                    lambda match: self._colorize_error(match.group("text"), "yellow"),
                    sentence,
                )
                for sentence in message.split(". ")
            )
        self.stderr.write(f"{badge} {self._colorize_error(message, 'red')}\n")

    def _should_show(self, check: CheckResult, config: ReporterConfig) -> bool:
        if self.silent:
            return check.failed
        return not (config.hide_passed and check.passed and not check.failed)

    def _status_messages(self, check: CheckResult) -> List[str]:
        messages = []

        if check.token_limit is not None:
            if check.passed is False:
                diff = format_tokens(check.token_count - check.token_limit)
                messages.append(self._colorize(f"Token limit exceeded by {diff}", "red"))
            elif check.token_count < check.token_limit:
                diff = format_tokens(check.token_limit - check.token_count)
                messages.append(self._colorize(f"Token count is {diff} under limit", "green"))

        if check.cost_limit is not None and check.cost is not None:
            if check.cost_passed is False:
                diff = format_cost(check.cost - check.cost_limit)
                messages.append(self._colorize(f"Cost limit exceeded by {diff}", "red"))
            elif check.cost < check.cost_limit:
                diff = format_cost(check.cost_limit - check.cost)
                messages.append(self._colorize(f"Cost is {diff} under limit", "green"))

        if check.warning:
            messages.append(self._colorize("Approaching limit", "yellow"))

        if check.message:
            messages.append(check.message)

        messages.append("")
        return messages

    def _build_rows(self, check: CheckResult) -> List[Tuple[str, str]]:
        rows = [
            ("Model", self.registry.display_name(check.model)),
            ("Token count", format_tokens(check.token_count)),
        ]

        if check.token_limit is not None:
            rows.append(("Token limit", format_tokens(check.token_limit)))

        show_cost = check.show_cost or check.cost_limit is not None
        if show_cost and check.cost is not None:
            rows.append(("Cost", format_cost(check.cost)))

        if check.cost_limit is not None:
            rows.append(("Cost limit", format_cost(check.cost_limit)))

        if len(check.files) == 1:
            rows.append(("File", _relative_path(check.files[0])))
        elif check.files:
            rows.append(("Files", f"{len(check.files)} files"))

        return rows

    def _format_table(self, check: CheckResult) -> List[str]:
        rows = self._build_rows(check)
        label_width = max(len(label) for label, _ in rows) + 1
        value_width = max(len(value) for _, value in rows)

        if check.passed is None and check.cost_passed is None:
            color = None
        elif check.failed:
            color = "red"
        else:
            color = "green"

        lines = []
        for label, value in rows:
            cell = self._colorize(value.ljust(value_width), "bold")
            if color:
                cell = self._colorize(cell, color)
            lines.append(f"{(label + ':').ljust(label_width)}  {cell}")
        return lines

    def _fix_text(self, prefix: str, config: ReporterConfig) -> str:
        if not config.config_path:
            return prefix
        if os.path.basename(config.config_path) == PYPROJECT_FILE:
            section = self._colorize("[tool.token-limit]", "bold")
            return f"{prefix} in {section} section of {self._colorize(config.config_path, 'bold')}"
        return f"{prefix} at {self._colorize(config.config_path, 'bold')}"

    def _colorize(self, text: str, color: str) -> str:
        """Apply ANSI color codes to text if colors are enabled."""
        if not self._colors_enabled:
            return text
        return _wrap(text, color)

    def _colorize_error(self, text: str, color: str) -> str:
        if not self._error_colors_enabled:
            return text
        return _wrap(text, color)


class JsonReporter:
    """Prints results as a JSON array for machine consumption."""

    def __init__(self, stdout: Optional[TextIO] = None):
        self.stdout = stdout or sys.stdout

    def results(self, config: ReporterConfig) -> None:
        self._print([check.to_dict() for check in config.checks])

    def error(self, error: BaseException, debug: bool = False) -> None:
        if debug:
            message = "".join(traceback.format_exception(error)).rstrip()
        else:
            message = str(error) or "Unknown error"
        self._print({"error": message})

    def _print(self, data: object) -> None:
        self.stdout.write(json.dumps(data, indent=2) + "\n")


def _wrap(text: str, color: str) -> str:
    if color not in COLOR_CODES:
        return text
    return f"{COLOR_CODES[color]}{text}{COLOR_CODES['reset']}"


def _relative_path(file_path: str) -> str:
    cwd = os.getcwd()
    if file_path.startswith(cwd + os.sep):
        return file_path[len(cwd) + 1 :]
    return file_path


def create_reporter(
    json_output: bool,
    silent: bool = False,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    registry: Optional[ModelRegistry] = None,
):
    """Create the reporter for the requested output format.

    Args:
        json_output: Print JSON instead of human-readable text
        silent: Only print failed checks (human output only)
        stdout: Stream for results (defaults to sys.stdout)
        stderr: Stream for errors (defaults to sys.stderr)
        registry: Registry used for model display names

    Returns:
        JsonReporter or HumanReporter
    """
    if json_output:
        return JsonReporter(stdout)
    return HumanReporter(silent=silent, stdout=stdout, stderr=stderr, registry=registry)
