"""Runs token limit checks concurrently and collects their results."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .budget import CostCalculator, LimitParser, ParsedLimit, check_warning
from .config import TokenCheck
from .counting import TokenCounter
from .input import ContentProvider
from .models import ModelRegistry

logger = logging.getLogger(__name__)

APPROXIMATE_MESSAGE = "Token count is approximate: the tokenizer was unavailable"


@dataclass
class CheckResult:
    """Outcome of a single check.

    passed and cost_passed stay None when no such limit was configured.
    missed means no files matched or the check could not run.
    """

    name: str
    model: str
    files: List[str]
    token_count: int
    cost: Optional[float] = None
    token_limit: Optional[int] = None
    cost_limit: Optional[float] = None
    passed: Optional[bool] = None
    cost_passed: Optional[bool] = None
    warning: Optional[bool] = None
    missed: Optional[bool] = None
    message: Optional[str] = None
    show_cost: bool = False  # display hint, not serialized

    @property
    def failed(self) -> bool:
        return bool(self.missed) or self.passed is False or self.cost_passed is False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output, leaving out unset optional fields."""
        fields = {
            "name": self.name,
            "model": self.model,
            "files": list(self.files),
            "tokenCount": self.token_count,
            "cost": self.cost,
            "tokenLimit": self.token_limit,
            "costLimit": self.cost_limit,
            "passed": self.passed,
            "costPassed": self.cost_passed,
            "warning": self.warning,
            "missed": self.missed,
            "message": self.message,
        }
        return {key: value for key, value in fields.items() if value is not None}


@dataclass
class ReporterConfig:
    """All check results plus display preferences."""

    checks: List[CheckResult] = field(default_factory=list)
    failed: bool = False
    config_path: Optional[str] = None
    hide_passed: bool = False


class CheckRunner:
    """Runs every check as an independent task.

    A failing check never stops its siblings: errors inside a check become a
    missed result carrying the error message.
    """

    def __init__(
        self,
        counter: Optional[TokenCounter] = None,
        content_provider: Optional[ContentProvider] = None,
        registry: Optional[ModelRegistry] = None,
    ):
        self.counter = counter or TokenCounter(registry)
        self.registry = registry or self.counter.registry
        self.content_provider = content_provider or ContentProvider()
        self.limit_parser = LimitParser(self.registry)
        self.cost_calculator = CostCalculator(self.registry)

    async def run_checks(
        self, checks: Sequence[TokenCheck], config_path: Optional[str] = None
    ) -> ReporterConfig:
        """Run all checks and report whether any of them failed.

        Limits are parsed before any check starts, so a malformed limit
        stops the run instead of producing results.

        Raises:
            LimitParseError: If any check has a malformed limit
        """
        parsed_limits = [
            self.limit_parser.parse_limit(check.limit, check.model)
            if check.limit is not None
            else None
            for check in checks
        ]

        outcomes = await asyncio.gather(
            *(
                self.run_check(check, parsed)
                for check, parsed in zip(checks, parsed_limits)
            ),
            return_exceptions=True,
        )

        results = []
        for check, outcome in zip(checks, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Check %r failed unexpectedly: %s", check.name, outcome)
                results.append(_missed_result(check, "Check failed unexpectedly"))
            else:
                results.append(outcome)

        return ReporterConfig(
            checks=results,
            failed=any(result.failed for result in results),
            config_path=config_path,
        )

    async def run_check(
        self, check: TokenCheck, parsed_limit: Optional[ParsedLimit] = None
    ) -> CheckResult:
        try:
            return await self._run_check(check, parsed_limit)
        except Exception as e:
            logger.debug("Check %r failed", check.name, exc_info=True)
            return _missed_result(check, str(e) or "Unknown error")

    async def _run_check(
        self, check: TokenCheck, parsed_limit: Optional[ParsedLimit]
    ) -> CheckResult:
        file_contents = await self.content_provider.get_files_content(check.patterns)
        if not file_contents:
            return _missed_result(check)

        files = [file.file_path for file in file_contents]
        all_content = "\n".join(file.content for file in file_contents)

        counting = await self.counter.count_async(all_content, check.model)
        token_count = counting.input_tokens
        cost = self.cost_calculator.calculate_cost(token_count, check.model)

        result = CheckResult(
            name=check.name or ", ".join(files),
            model=check.model,
            files=files,
            token_count=token_count,
            cost=cost,
            show_cost=check.show_cost,
        )
        if counting.is_approximate:
            result.message = APPROXIMATE_MESSAGE

        if parsed_limit is None:
            return result

        warning = False
        if parsed_limit.tokens is not None:
            result.token_limit = parsed_limit.tokens
            result.passed = token_count <= parsed_limit.tokens
            warning = check_warning(token_count, parsed_limit.tokens, check.warn_threshold)

        if parsed_limit.cost is not None:
            result.cost_limit = parsed_limit.cost
            result.cost_passed = cost <= parsed_limit.cost
            warning = warning or check_warning(
                cost, parsed_limit.cost, check.warn_threshold
            )

        if warning and not result.failed:
            result.warning = True
        return result


def _missed_result(check: TokenCheck, message: Optional[str] = None) -> CheckResult:
    return CheckResult(
        name=check.name or ", ".join(check.patterns),
        model=check.model,
        files=check.patterns,
        token_count=0,
        cost=0.0,
        missed=True,
        message=message,
    )


async def run_checks(
    checks: Sequence[TokenCheck],
    config_path: Optional[str] = None,
    *,
    counter: Optional[TokenCounter] = None,
    registry: Optional[ModelRegistry] = None,
) -> ReporterConfig:
    """Run token limit checks.

    This is a convenience function that creates a CheckRunner instance
    and calls the run_checks method.
    """
    runner = CheckRunner(counter=counter, registry=registry)
    return await runner.run_checks(checks, config_path)
