"""Main entry point for the token limit CLI."""

import asyncio
import json
import logging
import sys
from typing import List

from dotenv import load_dotenv

from .anthropic_client import AnthropicAPIClient, get_anthropic_config
from .cli import parse_cli_args
from .config import ConfigError, TokenCheck, load_config
from .counting import TokenCounter
from .models import get_default_registry
from .output import create_reporter
from .runner import run_checks
from .validation import validate_config

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CHECK_FAILED = 2


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args: List[str] = None) -> int:
    """Main entry point for the token limit CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=runtime or configuration error, 2=check failed)
    """
    cli_config = parse_cli_args(args)

    load_dotenv(override=False)
    configure_logging(cli_config.debug)

    registry = get_default_registry()
    reporter = create_reporter(
        cli_config.json_output, silent=cli_config.silent, registry=registry
    )

    try:
        if cli_config.files:
            raw_config = [cli_config.build_check()]
            config_path = None
        else:
            loaded = load_config(cli_config.config_path)
            raw_config = loaded.config
            config_path = loaded.config_path
            logger.debug("Loaded configuration: %s", json.dumps(raw_config, indent=2))

        validation = validate_config(raw_config, registry)
        if not validation.is_valid:
            raise ConfigError(validation.format_errors())

        checks = [TokenCheck.from_dict(entry) for entry in raw_config]
        counter = TokenCounter(
            registry, anthropic_client=AnthropicAPIClient(get_anthropic_config())
        )
        results = asyncio.run(run_checks(checks, config_path, counter=counter))
    except Exception as e:
        logger.debug("Token limit run failed", exc_info=True)
        reporter.error(e, debug=cli_config.debug)
        return EXIT_ERROR

    results.hide_passed = cli_config.hide_passed
    reporter.results(results)

    return EXIT_CHECK_FAILED if results.failed else EXIT_SUCCESS


def cli_entry_point() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry_point()
