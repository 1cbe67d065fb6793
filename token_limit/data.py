"""Supported models, grouped by provider.

Provider order matters: unknown model names are matched against this table
provider by provider, and the first provider with a matching name wins.
"""

from typing import Any, Dict

SUPPORTED_MODELS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "openai": {
        "gpt-3.5-turbo": {
            "name": "GPT-3.5 Turbo",
            "encoding": "cl100k_base",
            "max_output": 4096,
            "deprecated": True,
            "capabilities": ["function-calling", "streaming"],
        },
        "gpt-4.1-mini": {
            "name": "GPT-4.1 Mini",
            "encoding": "cl100k_base",
            "max_output": 32768,
            "capabilities": ["vision", "function-calling", "streaming"],
        },
        "gpt-4.1-nano": {
            "name": "GPT-4.1 Nano",
            "encoding": "cl100k_base",
            "max_output": 32768,
            "capabilities": ["vision", "function-calling", "streaming"],
        },
        "gpt-4-turbo": {
            "name": "GPT-4 Turbo",
            "encoding": "cl100k_base",
            "max_output": 4096,
            "capabilities": ["vision", "function-calling", "streaming"],
        },
        "gpt-4o-mini": {
            "name": "GPT-4o Mini",
            "encoding": "o200k_base",
            "max_output": 16384,
            "capabilities": ["vision", "function-calling", "streaming"],
        },
        "gpt-4.1": {
            "name": "GPT-4.1",
            "encoding": "cl100k_base",
            "max_output": 32768,
            "capabilities": ["vision", "function-calling", "streaming"],
        },
        "o3-mini": {
            "name": "O3 Mini",
            "encoding": "o200k_base",
            "max_output": 100000,
            "capabilities": ["reasoning", "function-calling"],
        },
        "o1-mini": {
            "name": "O1 Mini",
            "encoding": "o200k_base",
            "max_output": 65536,
            "capabilities": ["reasoning"],
        },
        "gpt-4o": {
            "name": "GPT-4o",
            "encoding": "o200k_base",
            "max_output": 16384,
            "capabilities": ["vision", "function-calling", "multimodal", "streaming"],
        },
        "gpt-4": {
            "name": "GPT-4",
            "encoding": "cl100k_base",
            "max_output": 4096,
            "capabilities": ["function-calling", "streaming"],
        },
        "gpt-5": {
            "name": "GPT-5",
            "encoding": "o200k_base",
            "max_output": 128000,
            "capabilities": ["reasoning", "vision", "function-calling", "streaming"],
        },
        "o1": {
            "name": "O1",
            "encoding": "o200k_base",
            "max_output": 100000,
            "capabilities": ["reasoning", "vision"],
        },
    },
    "anthropic": {
        "claude-3.7-sonnet": {
            "name": "Claude 3.7 Sonnet",
            "api_name": "claude-3-7-sonnet-20250219",
            "max_output": 64000,
            "capabilities": ["vision", "code", "reasoning", "function-calling"],
        },
        "claude-3.5-sonnet": {
            "name": "Claude 3.5 Sonnet",
            "api_name": "claude-3-5-sonnet-20241022",
            "max_output": 8192,
            "deprecated": True,
            "capabilities": ["vision", "code", "function-calling"],
        },
        "claude-sonnet-4.5": {
            "name": "Claude Sonnet 4.5",
            "api_name": "claude-sonnet-4-5-20250929",
            "max_output": 64000,
            "capabilities": ["vision", "code", "reasoning", "function-calling"],
        },
        "claude-3.5-haiku": {
            "name": "Claude 3.5 Haiku",
            "api_name": "claude-3-5-haiku-20241022",
            "max_output": 8192,
            "capabilities": ["code", "function-calling"],
        },
        "claude-opus-4.1": {
            "name": "Claude Opus 4.1",
            "api_name": "claude-opus-4-1-20250805",
            "max_output": 32000,
            "capabilities": ["vision", "code", "reasoning", "function-calling"],
        },
        "claude-sonnet-4": {
            "name": "Claude Sonnet 4",
            "api_name": "claude-sonnet-4-20250514",
            "max_output": 64000,
            "capabilities": ["vision", "code", "reasoning", "function-calling"],
        },
        "claude-3-opus": {
            "name": "Claude 3 Opus",
            "api_name": "claude-3-opus-20240229",
            "max_output": 4096,
            "deprecated": True,
            "capabilities": ["vision", "code"],
        },
        "claude-opus-4": {
            "name": "Claude Opus 4",
            "api_name": "claude-opus-4-20250514",
            "max_output": 32000,
            "capabilities": ["vision", "code", "reasoning", "function-calling"],
        },
    },
}

# Model used when a check does not name one.
DEFAULT_MODEL = "gpt-4"

# Model whose tokenizer counts text for names no provider recognizes.
FALLBACK_MODEL = "gpt-4"

# Encoding used for OpenAI-family models that do not declare one.
DEFAULT_ENCODING = "cl100k_base"
