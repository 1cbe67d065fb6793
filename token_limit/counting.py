"""Token counting functionality for different model providers."""

import asyncio
import logging
import math
import threading
import unicodedata
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional

import tiktoken
from huggingface_hub import hf_hub_download
from tokenizers import Tokenizer

from .anthropic_client import AnthropicAPIClient
from .data import DEFAULT_ENCODING, FALLBACK_MODEL
from .models import ModelRegistry, get_default_registry

logger = logging.getLogger(__name__)

# Same BPE vocabulary the official Claude tokenizer package ships.
CLAUDE_TOKENIZER_REPO = "Xenova/claude-tokenizer"


@dataclass
class CountingResult:
    """Result of token counting operation."""

    model: str
    input_tokens: int
    error: Optional[str] = None
    is_approximate: bool = False


def approximate_tokens(text: str) -> int:
    """Rough token estimate of four characters per token."""
    return math.ceil(len(text) / 4)


@contextmanager
def encoder_scope(encoding_name: str) -> Iterator[tiktoken.Encoding]:
    """Acquire a tiktoken encoding and release it on every exit path.

    Encoders that expose no release hook are left to the garbage collector.
    A failing release is logged and never replaces the block's outcome.
    """
    encoder = tiktoken.get_encoding(encoding_name)
    try:
        yield encoder
    finally:
        release = getattr(encoder, "free", None)
        if callable(release):
            try:
                release()
            except Exception as e:
                logger.warning("Failed to free tiktoken encoder: %s", e)


_claude_tokenizer_lock = threading.Lock()


@lru_cache(maxsize=1)
def _load_claude_tokenizer() -> Optional[Tokenizer]:
    try:
        tokenizer_file = hf_hub_download(
            repo_id=CLAUDE_TOKENIZER_REPO, filename="tokenizer.json"
        )
        return Tokenizer.from_file(tokenizer_file)
    except Exception as e:
        logger.error("Failed to load Claude tokenizer, token counts will be estimated: %s", e)
        return None


def load_claude_tokenizer() -> Optional[Tokenizer]:
    """Load the Claude tokenizer, downloading it on first use.

    Returns None when it cannot be loaded. A failed load is not retried.
    """
    with _claude_tokenizer_lock:
        return _load_claude_tokenizer()


class TokenCounter:
    """Dispatches token counting to the tokenizer of the model's provider."""

    def __init__(
        self,
        registry: Optional[ModelRegistry] = None,
        anthropic_client: Optional[AnthropicAPIClient] = None,
    ):
        self.registry = registry or get_default_registry()
        self.anthropic_client = anthropic_client

    def count(self, text: str, model: str) -> CountingResult:
        """Count tokens using the tokenizer that fits the model.

        Unknown models are counted with the fallback model's encoding and a
        warning is logged.

        Args:
            text: Text to count
            model: Model name, registered or not

        Returns:
            CountingResult; is_approximate is set when the tokenizer failed
            and the character estimate was used instead
        """
        if not text:
            return CountingResult(model=model, input_tokens=0)

        config = self.registry.get_model_config(model)
        if config is not None:
            provider = config.provider
            encoding = config.encoding
        else:
            provider = self.registry.detect_provider(model)
            encoding = None

        if provider == "openai":
            return self._count_openai_tokens(text, model, encoding or DEFAULT_ENCODING)
        if provider == "anthropic":
            return self._count_claude_tokens(text, model)

        logger.warning(
            'Unknown model "%s", using %s tokenizer as fallback. '
            "This may not accurately represent the actual token count for your model.",
            model,
            FALLBACK_MODEL,
        )
        return self._count_openai_tokens(text, FALLBACK_MODEL, self._fallback_encoding())

    def count_tokens(self, text: str, model: str) -> int:
        return self.count(text, model).input_tokens

    async def count_async(self, text: str, model: str) -> CountingResult:
        """Count tokens, trying the Anthropic API first for Claude models.

        Any API failure, rate-limit rejection or timeout falls back to the
        local tokenizer. Local counting runs in a worker thread, since
        loading a tokenizer may download it.
        """
        if text and self._uses_api(model):
            config = self.registry.get_model_config(model)
            api_model = config.api_name if config and config.api_name else model
            try:
                tokens = await self.anthropic_client.count_tokens(text, api_model)
                return CountingResult(model=model, input_tokens=tokens)
            except Exception as e:
                logger.warning(
                    'Falling back to local Claude tokenizer for "%s": %s', model, e
                )
        return await asyncio.to_thread(self.count, text, model)

    async def count_tokens_async(self, text: str, model: str) -> int:
        result = await self.count_async(text, model)
        return result.input_tokens

    def _uses_api(self, model: str) -> bool:
        return (
            self.anthropic_client is not None
            and self.anthropic_client.is_enabled
            and self.registry.resolve(model) == "anthropic"
        )

    def _fallback_encoding(self) -> str:
        config = self.registry.get_model_config(FALLBACK_MODEL)
        if config is not None and config.encoding:
            return config.encoding
        return DEFAULT_ENCODING

    def _count_openai_tokens(
        self, text: str, model: str, encoding: str
    ) -> CountingResult:
        result = self._encode_with_tiktoken(text, model, encoding)
        if result.error is None:
            return result

        logger.error(
            'Error counting OpenAI tokens for model "%s": %s', model, result.error
        )
        return self._approximate(text, model)

    def _encode_with_tiktoken(
        self, text: str, model: str, encoding: str
    ) -> CountingResult:
        try:
            with encoder_scope(encoding) as encoder:
                token_count = len(encoder.encode(text, disallowed_special=()))
        except Exception as e:
            return CountingResult(model=model, input_tokens=0, error=str(e))
        return CountingResult(model=model, input_tokens=token_count)

    def _count_claude_tokens(self, text: str, model: str) -> CountingResult:
        tokenizer = load_claude_tokenizer()
        if tokenizer is None:
            return self._approximate(text, model)
        try:
            normalized = unicodedata.normalize("NFKC", text)
            token_count = len(tokenizer.encode(normalized).ids)
        except Exception as e:
            logger.error('Error counting Claude tokens for model "%s": %s', model, e)
            return self._approximate(text, model)
        return CountingResult(model=model, input_tokens=token_count)

    def _approximate(self, text: str, model: str) -> CountingResult:
        return CountingResult(
            model=model,
            input_tokens=approximate_tokens(text),
            is_approximate=True,
        )


def count_tokens(
    text: str, model: str, registry: Optional[ModelRegistry] = None
) -> int:
    """Count tokens in text for the specified model.

    This is a convenience function that creates a TokenCounter instance
    and calls the count_tokens method.

    Args:
        text: Text to count
        model: Model name, e.g. "gpt-4o" or "claude-sonnet-4"
        registry: Registry to resolve the model against

    Returns:
        Number of tokens
    """
    counter = TokenCounter(registry)
    return counter.count_tokens(text, model)
