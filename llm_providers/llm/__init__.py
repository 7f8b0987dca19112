"""LLM provider layer."""

from .types import (
    ChatMessage,
    Chunk,
    Message,
    ModelInfo,
    ConfigurationError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResponseError,
)
from .messages import coerce_messages
from .provider import LLMProvider
from .provider_factory import get_provider, register_provider, reset_provider

__all__ = [
    "ChatMessage",
    "Chunk",
    "Message",
    "ModelInfo",
    "ConfigurationError",
    "ProviderTimeoutError",
    "ProviderUnavailableError",
    "ProviderResponseError",
    "coerce_messages",
    "LLMProvider",
    "get_provider",
    "register_provider",
    "reset_provider",
]
