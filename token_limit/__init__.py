"""Check the real token cost of project files for AI tools."""

from .budget import LimitParseError, ParsedLimit, calculate_cost, parse_limit
from .config import TokenCheck, define_config, load_config
from .counting import count_tokens
from .models import ModelConfig, ModelRegistry
from .runner import CheckResult, ReporterConfig, run_checks

__all__ = [
    "CheckResult",
    "LimitParseError",
    "ModelConfig",
    "ModelRegistry",
    "ParsedLimit",
    "ReporterConfig",
    "TokenCheck",
    "calculate_cost",
    "count_tokens",
    "define_config",
    "load_config",
    "parse_limit",
    "run_checks",
]
