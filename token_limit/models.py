"""Model registry and model name resolution."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from .data import SUPPORTED_MODELS
from .pricing_data import OPEN_ROUTER_MODELS


@dataclass(frozen=True)
class TokenPricing:
    """Price in USD per 1000 tokens."""

    input: float
    output: float


@dataclass(frozen=True)
class ModelConfig:
    """Definition of a supported model."""

    name: str
    provider: str
    encoding: Optional[str] = None  # only for tiktoken-based providers
    context_window: Optional[int] = None
    max_output: Optional[int] = None
    cost_per_1k_tokens: Optional[TokenPricing] = None
    deprecated: bool = False
    capabilities: Tuple[str, ...] = field(default_factory=tuple)
    api_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate model definition after initialization."""
        if not self.name:
            raise ValueError("Model name is required")
        if not self.provider:
            raise ValueError(f"Model {self.name} is missing a provider")


class ModelRegistry:
    """Read-only registry of model definitions grouped by provider.

    Providers and their models keep the order they were given in, which is
    also the order used when guessing the provider of an unknown model.
    """

    def __init__(self, models: Mapping[str, Mapping[str, ModelConfig]]):
        """Initialize with model definitions keyed by provider, then model."""
        self._models: Dict[str, Dict[str, ModelConfig]] = {
            provider: dict(entries) for provider, entries in models.items()
        }

    @classmethod
    def default(cls) -> "ModelRegistry":
        """Build the registry from the bundled model and pricing tables."""
        return cls(build_models(SUPPORTED_MODELS, OPEN_ROUTER_MODELS))

    def get_model_config(self, name: str) -> Optional[ModelConfig]:
        """Return the exact registry entry for a model name, if any."""
        for entries in self._models.values():
            if name in entries:
                return entries[name]
        return None

    def get_model(self, name: str) -> ModelConfig:
        """Get model definition by name.

        Raises:
            KeyError: If model name is not found
        """
        config = self.get_model_config(name)
        if config is None:
            raise KeyError(f"Unknown model: {name}")
        return config

    def get_available_models(self) -> List[str]:
        """Get list of available model names in registry order."""
        return [name for entries in self._models.values() for name in entries]

    def get_providers(self) -> List[str]:
        return list(self._models)

    def detect_provider(self, name: str) -> Optional[str]:
        """Guess the provider family of a model name that is not registered.

        Matches the normalized name against every registered name: equal,
        the input extends a registered name, or a registered name extends
        the input. The first provider with any match wins.

        Args:
            name: Model name as written by the user, e.g. "gpt-4-turbo-preview"

        Returns:
            Provider name, or None if nothing matches
        """
        normalized = name.lower().strip()
        if not normalized:
            return None

        for provider, entries in self._models.items():
            for supported in entries:
                candidate = supported.lower()
                if (
                    normalized == candidate
                    or normalized.startswith(candidate)
                    or candidate.startswith(normalized)
                ):
                    return provider
        return None

    def resolve(self, name: str) -> Optional[str]:
        """Return the provider for a model name, exact entries first."""
        config = self.get_model_config(name)
        if config is not None:
            return config.provider
        return self.detect_provider(name)

    def display_name(self, name: str) -> str:
        """Human-readable name of a model, or the name itself if unknown."""
        config = self.get_model_config(name)
        return config.name if config is not None else name


def build_models(
    supported: Mapping[str, Mapping[str, Mapping]],
    pricing: Mapping[str, Mapping],
) -> Dict[str, Dict[str, ModelConfig]]:
    """Merge static model metadata with pricing feed data.

    Args:
        supported: Model metadata keyed by provider, then model name
        pricing: Pricing feed entries keyed by model name

    Returns:
        ModelConfig instances keyed by provider, then model name
    """
    models: Dict[str, Dict[str, ModelConfig]] = {}
    for provider, entries in supported.items():
        models[provider] = {}
        for key, meta in entries.items():
            feed = pricing.get(key, {})
            cost = None
            if "input_cost_per_1k" in feed:
                cost = TokenPricing(
                    input=feed["input_cost_per_1k"],
                    output=feed.get("output_cost_per_1k", 0.0),
                )
            models[provider][key] = ModelConfig(
                name=meta.get("name", key),
                provider=provider,
                encoding=meta.get("encoding"),
                context_window=feed.get("context_window"),
                max_output=meta.get("max_output"),
                cost_per_1k_tokens=cost,
                deprecated=meta.get("deprecated", False),
                capabilities=tuple(meta.get("capabilities", ())),
                api_name=meta.get("api_name"),
            )
    return models


_default_registry: Optional[ModelRegistry] = None


def get_default_registry() -> ModelRegistry:
    """Return the shared registry built from the bundled tables."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ModelRegistry.default()
    return _default_registry
