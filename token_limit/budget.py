"""Limit parsing and cost calculation for token budgets."""

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .models import ModelRegistry, get_default_registry

logger = logging.getLogger(__name__)

LimitExpression = Union[int, float, str, Mapping[str, Union[int, float, str]]]

TOKEN_FORMATS = 'number, "100k", "1.5m", "2b", or model name'
COST_FORMATS = 'number, "$0.05", "5c", "10 cents", or "1 dollar"'

_AMOUNT = r"(?P<amount>\d+(?:\.\d+)?)"

_TOKEN_PATTERN = re.compile(r"^(?P<value>\d+(?:\.\d+)?)\s*(?P<suffix>[bgkmt]?)$")

_SUFFIX_MULTIPLIERS = {
    "": 1,
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
    "g": 1_000_000_000,
    "t": 1_000_000_000_000,
}

# (pattern, amount is in cents); first match wins
_COST_PATTERNS = [
    (re.compile(rf"^\${_AMOUNT}$"), False),
    (re.compile(rf"^{_AMOUNT}c$"), True),
    (re.compile(rf"^{_AMOUNT}\s+cents?$"), True),
    (re.compile(rf"^{_AMOUNT}\s+dollars?$"), False),
    (re.compile(rf"^{_AMOUNT}$"), False),
]

_CURRENCY_MARKER = re.compile(r"\$|^\d+(?:\.\d+)?c$|\bcents?\b|\bdollars?\b")


class LimitParseError(ValueError):
    """Raised when a limit expression cannot be parsed."""


class LimitKind(Enum):
    """Shape of a raw limit expression."""

    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"


@dataclass(frozen=True)
class ParsedLimit:
    """Normalized limit. None means no ceiling of that kind."""

    tokens: Optional[int] = None
    cost: Optional[float] = None


def classify_limit(limit: Any) -> LimitKind:
    """Tag a raw limit expression with its kind.

    Raises:
        LimitParseError: If the value is not a number, string or mapping
    """
    if isinstance(limit, bool):
        raise LimitParseError(
            f"Invalid limit: {limit!r}. Limit must be a number or string."
        )
    if isinstance(limit, (int, float)):
        return LimitKind.NUMBER
    if isinstance(limit, str):
        return LimitKind.STRING
    if isinstance(limit, Mapping):
        return LimitKind.OBJECT
    raise LimitParseError(
        f"Invalid limit: {limit!r}. Expected a number, a string, "
        'or an object with "tokens" and/or "cost".'
    )


class LimitParser:
    """Converts user-supplied limit expressions into a ParsedLimit."""

    def __init__(self, registry: Optional[ModelRegistry] = None):
        self.registry = registry or get_default_registry()

    def parse_limit(self, limit: LimitExpression, model: str) -> ParsedLimit:
        """Parse a limit expression into normalized token and cost ceilings.

        Args:
            limit: A number (tokens), a string such as "100k", "$0.05", "5c"
                or a model name, or a mapping with "tokens" and/or "cost"
            model: Model used to tokenize the checked content

        Returns:
            ParsedLimit with the ceilings that were given

        Raises:
            LimitParseError: If the expression cannot be parsed
        """
        kind = classify_limit(limit)

        if kind == LimitKind.NUMBER:
            return ParsedLimit(tokens=self._parse_token_limit(limit, model))

        if kind == LimitKind.STRING:
            normalized = limit.lower().strip()
            if _CURRENCY_MARKER.search(normalized):
                return ParsedLimit(cost=self._parse_cost_limit(limit))
            return ParsedLimit(tokens=self._parse_token_limit(limit, model))

        if "tokens" not in limit and "cost" not in limit:
            raise LimitParseError(
                f'Invalid limit: {dict(limit)!r}. Expected "tokens" and/or "cost" keys.'
            )

        tokens = None
        cost = None
        if "tokens" in limit:
            tokens = self._parse_token_limit(limit["tokens"], model)
        if "cost" in limit:
            cost = self._parse_cost_limit(limit["cost"])
        return ParsedLimit(tokens=tokens, cost=cost)

    def _parse_token_limit(self, limit: Union[int, float, str], model: str) -> int:
        """Parse a token limit from a number, suffixed string or model name.

        A registered model name stands for that model's context window,
        whatever model the content is counted with.
        """
        kind = classify_limit(limit)

        if kind == LimitKind.NUMBER:
            if (isinstance(limit, float) and not math.isfinite(limit)) or limit < 0:
                raise LimitParseError(
                    f"Invalid token limit: {limit}. Must be a non-negative finite number."
                )
            return math.floor(limit)

        if kind != LimitKind.STRING:
            raise LimitParseError(
                f"Invalid token limit: {limit!r}. Expected formats: {TOKEN_FORMATS}."
            )

        normalized = limit.lower().strip()

        config = self.registry.get_model_config(normalized)
        if config is not None and config.context_window:
            return config.context_window

        match = _TOKEN_PATTERN.match(normalized)
        if match is None:
            raise LimitParseError(
                f'Invalid token limit format: "{limit}". Expected formats: {TOKEN_FORMATS}.'
            )

        value = Decimal(match.group("value")) * _SUFFIX_MULTIPLIERS[match.group("suffix")]
        return int(value)

    def _parse_cost_limit(self, cost: Union[int, float, str]) -> float:
        """Parse a cost limit in USD from a number or currency string."""
        kind = classify_limit(cost)

        if kind == LimitKind.NUMBER:
            if (isinstance(cost, float) and not math.isfinite(cost)) or cost < 0:
                raise LimitParseError(
                    f"Invalid cost limit: {cost}. Must be a non-negative finite number."
                )
            try:
                return float(cost)
            except OverflowError:
                raise LimitParseError(
                    f"Invalid cost limit: {cost}. Too large to represent in USD."
                ) from None

        if kind != LimitKind.STRING:
            raise LimitParseError(
                f"Invalid cost limit: {cost!r}. Expected formats: {COST_FORMATS}."
            )

        normalized = cost.lower().strip()
        for pattern, in_cents in _COST_PATTERNS:
            match = pattern.match(normalized)
            if match is None:
                continue
            amount = Decimal(match.group("amount"))
            if in_cents:
                amount = amount / 100
            return float(amount)

        raise LimitParseError(
            f'Invalid cost limit format: "{cost}". Expected formats: {COST_FORMATS}.'
        )


class CostCalculator:
    """Derives USD cost from token counts and per-model prices."""

    def __init__(self, registry: Optional[ModelRegistry] = None):
        self.registry = registry or get_default_registry()

    def calculate_cost(self, tokens: int, model: str) -> float:
        """Calculate input cost for a token count.

        Args:
            tokens: Number of tokens
            model: Model name to take the price from

        Returns:
            Cost in USD, unrounded; 0 when the model has no known price
        """
        config = self.registry.get_model_config(model)
        if config is None or not config.cost_per_1k_tokens:
            logger.debug('No pricing known for model "%s", cost is 0', model)
            return 0.0

        price = config.cost_per_1k_tokens.input
        if not price:
            return 0.0
        return tokens / 1000 * price


def check_warning(value: float, limit: Optional[float], threshold: float) -> bool:
    """Check whether a value within its limit has reached the warning threshold.

    Args:
        value: Measured token count or cost
        limit: Configured ceiling, or None if there is none
        threshold: Fraction of the limit (0-1) that triggers the warning

    Returns:
        True if the value is within the limit but at or above the threshold
    """
    if limit is None or value > limit:
        return False
    return value >= limit * threshold


def parse_limit(
    limit: LimitExpression, model: str, registry: Optional[ModelRegistry] = None
) -> ParsedLimit:
    """Parse a limit expression into normalized token and cost ceilings.

    This is a convenience function that creates a LimitParser instance
    and calls the parse_limit method.
    """
    parser = LimitParser(registry)
    return parser.parse_limit(limit, model)


def calculate_cost(
    tokens: int, model: str, registry: Optional[ModelRegistry] = None
) -> float:
    """Calculate input cost in USD for a token count.

    This is a convenience function that creates a CostCalculator instance
    and calls the calculate_cost method.
    """
    calculator = CostCalculator(registry)
    return calculator.calculate_cost(tokens, model)
