"""
LLM provider types, dataclasses, and exceptions.

WHAT: Standard type definitions shared by every provider
WHY: Ensure consistent contracts across local and HTTP providers
HOW: Frozen dataclasses for messages/chunks/model info, custom exceptions for errors
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class ChatMessage:
    """
    A normalized chat message.

    `role` is None when the caller supplied no recognizable role; such
    messages are rendered as plain prompt text.
    """
    role: Optional[str]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role or "", "content": self.content}


@dataclass(frozen=True)
class Chunk:
    """Incremental unit of a streamed response."""
    content: str
    model_id: str
    role: str = "assistant"
    finish_reason: Optional[str] = None
    tool_calls: list = field(default_factory=list)


@dataclass(frozen=True)
class Message:
    """Terminal result of a completion."""
    content: str
    model_id: str
    role: str = "assistant"


@dataclass(frozen=True)
class ModelInfo:
    """Static description of a model a provider can serve."""
    id: str
    name: str
    provider: str
    modalities: dict[str, list[str]] = field(
        default_factory=lambda: {"input": ["text"], "output": ["text"]}
    )
    capabilities: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


ChunkCallback = Callable[[Chunk], None]


# Provider exceptions
class ConfigurationError(Exception):
    """Provider is missing a dependency or is misconfigured."""
    pass


class ProviderTimeoutError(Exception):
    """Request to provider timed out."""
    pass


class ProviderUnavailableError(Exception):
    """Provider is not reachable or down."""
    pass


class ProviderResponseError(Exception):
    """Provider returned an invalid or error response."""
    pass
