"""Shared fixtures for token limit tests."""

import pytest

from token_limit.models import ModelConfig, ModelRegistry, TokenPricing


def make_registry() -> ModelRegistry:
    """Minimal registry with one model per provider plus an unpriced one."""
    return ModelRegistry(
        {
            "openai": {
                "gpt-4o": ModelConfig(
                    name="GPT-4o",
                    provider="openai",
                    encoding="o200k_base",
                    context_window=128000,
                    cost_per_1k_tokens=TokenPricing(input=0.0025, output=0.01),
                ),
                "gpt-4": ModelConfig(
                    name="GPT-4",
                    provider="openai",
                    encoding="cl100k_base",
                    context_window=8191,
                    cost_per_1k_tokens=TokenPricing(input=0.03, output=0.06),
                ),
                "gpt-free": ModelConfig(name="GPT Free", provider="openai"),
            },
            "anthropic": {
                "claude-sonnet-4": ModelConfig(
                    name="Claude Sonnet 4",
                    provider="anthropic",
                    context_window=200000,
                    cost_per_1k_tokens=TokenPricing(input=0.003, output=0.015),
                    api_name="claude-sonnet-4-20250514",
                ),
            },
        }
    )


@pytest.fixture
def registry() -> ModelRegistry:
    return make_registry()
