"""Model pricing and context windows from OpenRouter.

Generated by scripts/update_open_router_data.py. Do not edit by hand.
Prices are USD per 1000 tokens.
"""

from typing import Any, Dict

OPEN_ROUTER_MODELS: Dict[str, Dict[str, Any]] = {
    "gpt-3.5-turbo": {
        "canonical_slug": "openai/gpt-3.5-turbo",
        "context_window": 16385,
        "input_cost_per_1k": 0.0005,
        "output_cost_per_1k": 0.0015,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4.1-mini": {
        "canonical_slug": "openai/gpt-4.1-mini-2025-04-14",
        "context_window": 1047576,
        "input_cost_per_1k": 0.0004,
        "output_cost_per_1k": 0.0016,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4.1-nano": {
        "canonical_slug": "openai/gpt-4.1-nano-2025-04-14",
        "context_window": 1047576,
        "input_cost_per_1k": 0.0001,
        "output_cost_per_1k": 0.0004,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4-turbo": {
        "canonical_slug": "openai/gpt-4-turbo",
        "context_window": 128000,
        "input_cost_per_1k": 0.01,
        "output_cost_per_1k": 0.03,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4o-mini": {
        "canonical_slug": "openai/gpt-4o-mini",
        "context_window": 128000,
        "input_cost_per_1k": 0.00015,
        "output_cost_per_1k": 0.0006,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4.1": {
        "canonical_slug": "openai/gpt-4.1-2025-04-14",
        "context_window": 1047576,
        "input_cost_per_1k": 0.002,
        "output_cost_per_1k": 0.008,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "o3-mini": {
        "canonical_slug": "openai/o3-mini-2025-01-31",
        "context_window": 200000,
        "input_cost_per_1k": 0.0011,
        "output_cost_per_1k": 0.0044,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "o1-mini": {
        "canonical_slug": "openai/o1-mini",
        "context_window": 128000,
        "input_cost_per_1k": 0.0011,
        "output_cost_per_1k": 0.0044,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4o": {
        "canonical_slug": "openai/gpt-4o",
        "context_window": 128000,
        "input_cost_per_1k": 0.0025,
        "output_cost_per_1k": 0.01,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-4": {
        "canonical_slug": "openai/gpt-4",
        "context_window": 8191,
        "input_cost_per_1k": 0.03,
        "output_cost_per_1k": 0.06,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "gpt-5": {
        "canonical_slug": "openai/gpt-5-2025-08-07",
        "context_window": 400000,
        "input_cost_per_1k": 0.00125,
        "output_cost_per_1k": 0.01,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "o1": {
        "canonical_slug": "openai/o1-2024-12-17",
        "context_window": 200000,
        "input_cost_per_1k": 0.015,
        "output_cost_per_1k": 0.06,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-3.7-sonnet": {
        "canonical_slug": "anthropic/claude-3-7-sonnet-20250219",
        "context_window": 200000,
        "input_cost_per_1k": 0.003,
        "output_cost_per_1k": 0.015,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-3.5-sonnet": {
        "canonical_slug": "anthropic/claude-3.5-sonnet",
        "context_window": 200000,
        "input_cost_per_1k": 0.003,
        "output_cost_per_1k": 0.015,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-sonnet-4.5": {
        "canonical_slug": "anthropic/claude-4.5-sonnet-20250929",
        "context_window": 1000000,
        "input_cost_per_1k": 0.003,
        "output_cost_per_1k": 0.015,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-3.5-haiku": {
        "canonical_slug": "anthropic/claude-3-5-haiku",
        "context_window": 200000,
        "input_cost_per_1k": 0.0008,
        "output_cost_per_1k": 0.004,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-opus-4.1": {
        "canonical_slug": "anthropic/claude-4.1-opus-20250805",
        "context_window": 200000,
        "input_cost_per_1k": 0.015,
        "output_cost_per_1k": 0.075,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-sonnet-4": {
        "canonical_slug": "anthropic/claude-4-sonnet-20250522",
        "context_window": 1000000,
        "input_cost_per_1k": 0.003,
        "output_cost_per_1k": 0.015,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-3-opus": {
        "canonical_slug": "anthropic/claude-3-opus",
        "context_window": 200000,
        "input_cost_per_1k": 0.015,
        "output_cost_per_1k": 0.075,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
    "claude-opus-4": {
        "canonical_slug": "anthropic/claude-4-opus-20250522",
        "context_window": 200000,
        "input_cost_per_1k": 0.015,
        "output_cost_per_1k": 0.075,
        "last_updated": "2025-09-30T00:00:00Z",
        "source": "openrouter",
    },
}
