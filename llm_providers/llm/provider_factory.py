"""
LLM provider factory with singleton pattern.

WHAT: Factory to get the configured LLM provider
WHY: Centralize provider selection and avoid reloading engines per call
HOW: Read LLM_PROVIDER from config, cache one instance per provider name, log selection
"""

from typing import TYPE_CHECKING, Callable

from .types import ConfigurationError

if TYPE_CHECKING:
    from .provider import LLMProvider


def _red_candle() -> "LLMProvider":
    from .red_candle import RedCandleProvider
    return RedCandleProvider()


def _lm_studio() -> "LLMProvider":
    from .lm_studio import LMStudioProvider
    return LMStudioProvider()


# Provider name -> zero-argument constructor
_PROVIDER_REGISTRY: dict[str, Callable[[], "LLMProvider"]] = {
    "red_candle": _red_candle,
    "lm_studio": _lm_studio,
}

# Singleton instances
_provider_instances: dict[str, "LLMProvider"] = {}


def get_provider(name: str | None = None) -> "LLMProvider":
    """
    Get a provider singleton.

    Args:
        name: Provider slug; settings.LLM_PROVIDER when None

    Returns:
        LLMProvider instance

    Raises:
        ConfigurationError: If provider name is unknown
    """
    # Import here to avoid circular dependencies
    from ..core.config import settings
    from ..utils.logger import get_logger

    provider_name = name or settings.LLM_PROVIDER
    if provider_name not in _PROVIDER_REGISTRY:
        available = ", ".join(sorted(_PROVIDER_REGISTRY))
        raise ConfigurationError(f"Unknown LLM provider: {provider_name!r}. Available: {available}")

    if provider_name not in _provider_instances:
        _provider_instances[provider_name] = _PROVIDER_REGISTRY[provider_name]()
        get_logger(__name__).info(f"LLM provider initialized: {provider_name}")

    return _provider_instances[provider_name]


def register_provider(name: str, factory: Callable[[], "LLMProvider"]) -> None:
    """Register a provider constructor under a slug."""
    _PROVIDER_REGISTRY[name] = factory
    _provider_instances.pop(name, None)


def list_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def reset_provider() -> None:
    """Reset the provider singletons (useful for testing)."""
    _provider_instances.clear()
