"""CLI argument parsing and configuration for token limit."""

import argparse
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from .input import normalize_file_paths

FILES_DEFAULT_MODEL = "gpt-4o"


def _package_version() -> str:
    try:
        return version("token-limit")
    except PackageNotFoundError:
        return "unknown"


@dataclass
class CLIConfig:
    """Configuration parsed from CLI arguments."""

    files: List[str] = field(default_factory=list)
    config_path: Optional[str] = None
    limit: Optional[str] = None
    model: Optional[str] = None
    name: Optional[str] = None
    silent: bool = False
    json_output: bool = False
    hide_passed: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.files and self.config_path:
            raise ValueError("--config cannot be combined with files")
        if self.name is not None and not self.files:
            raise ValueError("--name requires files")

    def build_check(self) -> dict:
        """Build a single raw check from the files given on the command line."""
        check = {
            "path": normalize_file_paths(self.files),
            "model": self.model or FILES_DEFAULT_MODEL,
        }
        if self.limit is not None:
            check["limit"] = self.limit
        if self.name:
            check["name"] = self.name
        return check


class CLIArgumentParser:
    """Handles CLI argument parsing and validation."""

    def __init__(self) -> None:
        """Initialize the argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create and configure the argument parser."""
        parser = argparse.ArgumentParser(
            prog="token-limit",
            description="Check the real token cost of your project files for AI tools",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  token-limit
  token-limit ".context/**/*.md"
  token-limit --limit 1000 CLAUDE.md
  token-limit --model claude-3.5-sonnet docs/*.md
  token-limit --name docs --limit 100k "docs/**/*.md"
  token-limit --json --hide-passed
            """.strip(),
        )

        parser.add_argument(
            "files",
            nargs="*",
            metavar="FILE",
            help="Files or glob patterns to check instead of the configuration",
        )
        parser.add_argument(
            "--config", dest="config_path", metavar="PATH", help="Path to configuration file"
        )
        parser.add_argument(
            "--limit",
            metavar="LIMIT",
            help='Token or cost limit for files, e.g. 1000, "100k", "$0.05"',
        )
        parser.add_argument(
            "--model",
            metavar="MODEL",
            help=f"Model for token calculation (default: {FILES_DEFAULT_MODEL})",
        )
        parser.add_argument(
            "--name", metavar="NAME", help="Name for the check when using files"
        )
        parser.add_argument(
            "--silent", action="store_true", help="Show only failed limits"
        )
        parser.add_argument(
            "--json",
            dest="json_output",
            action="store_true",
            help="Output results in JSON format",
        )
        parser.add_argument(
            "--hide-passed", action="store_true", help="Hide passed checks in output"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Show internal configs and debug logs for issue reports",
        )
        parser.add_argument(
            "--version", action="version", version=f"%(prog)s {_package_version()}"
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> CLIConfig:
        """Parse command line arguments into CLIConfig.

        Args:
            args: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Parsed and validated configuration

        Raises:
            SystemExit: On argument parsing errors or validation failures
        """
        if args is None:
            args = sys.argv[1:]

        try:
            parsed_args = self.parser.parse_args(args)
            return self._build_config(parsed_args)
        except ValueError as e:
            self.parser.error(str(e))

    def _build_config(self, args: argparse.Namespace) -> CLIConfig:
        """Build CLIConfig from parsed arguments."""
        return CLIConfig(
            files=args.files,
            config_path=args.config_path,
            limit=args.limit,
            model=args.model,
            name=args.name,
            silent=args.silent,
            json_output=args.json_output,
            hide_passed=args.hide_passed,
            debug=args.debug,
        )


def parse_cli_args(args: Optional[List[str]] = None) -> CLIConfig:
    """Parse CLI arguments and return configuration.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed and validated configuration

    Raises:
        SystemExit: On argument parsing errors or validation failures
    """
    parser = CLIArgumentParser()
    return parser.parse_args(args)
