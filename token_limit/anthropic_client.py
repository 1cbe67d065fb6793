"""Anthropic API token counting with caching and rate limiting."""

import hashlib
import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

import anthropic

logger = logging.getLogger(__name__)

CACHE_MAX_AGE_SECONDS = 24 * 60 * 60
RATE_LIMIT_WINDOW_SECONDS = 60


class AnthropicAPIError(RuntimeError):
    """Raised when the API path cannot produce a token count."""


@dataclass
class AnthropicConfig:
    """Settings for API-based token counting."""

    api_key: Optional[str] = None
    enable_api: bool = False
    enable_caching: bool = True
    cache_size: int = 1000
    rate_limit_rpm: int = 60
    timeout: int = 30000  # milliseconds

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.cache_size < 0:
            raise ValueError("Cache size must be non-negative")
        if self.rate_limit_rpm < 1:
            raise ValueError("Rate limit must be at least 1 request per minute")
        if self.timeout < 1000:
            raise ValueError("Timeout must be at least 1000ms")


def get_anthropic_config(env: Optional[Mapping[str, str]] = None) -> AnthropicConfig:
    """Load Anthropic settings from environment variables.

    ANTHROPIC_API_KEY turns the API path on; ANTHROPIC_ENABLE_API can turn
    it back off. Integer settings that do not parse keep their defaults.
    """
    active_env = os.environ if env is None else env
    values: Dict[str, object] = {}

    if "ANTHROPIC_API_KEY" in active_env:
        values["api_key"] = active_env["ANTHROPIC_API_KEY"]
        values["enable_api"] = True

    if active_env.get("ANTHROPIC_ENABLE_API"):
        values["enable_api"] = active_env["ANTHROPIC_ENABLE_API"] == "true"

    if active_env.get("ANTHROPIC_ENABLE_CACHING"):
        values["enable_caching"] = active_env["ANTHROPIC_ENABLE_CACHING"] == "true"

    for env_name, field_name in (
        ("ANTHROPIC_CACHE_SIZE", "cache_size"),
        ("ANTHROPIC_RATE_LIMIT_RPM", "rate_limit_rpm"),
        ("ANTHROPIC_TIMEOUT", "timeout"),
    ):
        raw = active_env.get(env_name)
        if raw:
            try:
                values[field_name] = int(raw)
            except ValueError:
                logger.debug("Ignoring non-integer %s=%r", env_name, raw)

    return AnthropicConfig(**values)


class AnthropicAPIClient:
    """Counts tokens through the Anthropic messages API.

    Results are cached per (model, text) for 24 hours. Once the cache grows
    past its bound the oldest inserted entry is dropped. Requests are limited
    per fixed one-minute window.

    All state is touched from the event loop thread only.
    """

    def __init__(
        self,
        config: AnthropicConfig,
        clock: Callable[[], float] = time.time,
        sdk_client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        self.config = config
        self._clock = clock
        self._cache: Dict[str, Tuple[int, float]] = {}
        self._requests = 0
        self._window_reset = 0.0
        self._client: Optional[anthropic.AsyncAnthropic] = None

        if config.enable_api and (config.api_key or sdk_client is not None):
            self._client = sdk_client or anthropic.AsyncAnthropic(
                api_key=config.api_key,
                timeout=config.timeout / 1000,
                max_retries=0,
            )

    @property
    def is_enabled(self) -> bool:
        return self._client is not None

    async def count_tokens(self, text: str, model: str) -> int:
        """Count tokens for text using the API.

        Args:
            text: Text to count
            model: Model identifier sent to the API

        Returns:
            Number of input tokens reported by the API

        Raises:
            AnthropicAPIError: If the client is disabled or rate limited
            anthropic.APIError: If the request itself fails
        """
        if self._client is None:
            raise AnthropicAPIError("API client not initialized")

        if not text:
            return 0

        if self.config.enable_caching:
            cached = self.get_cached_result(text, model)
            if cached is not None:
                return cached

        if not self.can_make_request():
            raise AnthropicAPIError("Rate limit exceeded")
        # Claim the slot before awaiting so concurrent checks see it.
        self._requests += 1

        try:
            response = await self._client.messages.count_tokens(
                model=model,
                messages=[{"role": "user", "content": text}],
            )
        except Exception as e:
            logger.warning("Anthropic API token counting failed: %s", e)
            raise

        token_count = response.input_tokens
        if self.config.enable_caching:
            self._set_cached_result(text, model, token_count)
        return token_count

    def get_cached_result(self, text: str, model: str) -> Optional[int]:
        """Return a fresh cached count, dropping it if it has expired."""
        key = self._cache_key(text, model)
        entry = self._cache.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        if self._clock() - stored_at < CACHE_MAX_AGE_SECONDS:
            return value

        del self._cache[key]
        return None

    def can_make_request(self) -> bool:
        """Check the request budget, starting a new window when due."""
        now = self._clock()
        if now > self._window_reset:
            self._requests = 0
            self._window_reset = now + RATE_LIMIT_WINDOW_SECONDS
        return self._requests < self.config.rate_limit_rpm

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def _set_cached_result(self, text: str, model: str, tokens: int) -> None:
        self._cache[self._cache_key(text, model)] = (tokens, self._clock())
        if len(self._cache) > self.config.cache_size:
            oldest = next(iter(self._cache))
            del self._cache[oldest]

    def _cache_key(self, text: str, model: str) -> str:
        return hashlib.sha256(f"{model}:{text}".encode("utf-8")).hexdigest()
