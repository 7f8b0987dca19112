"""
LLM provider protocol definition.

WHAT: Uniform interface shared by local and HTTP providers
WHY: Decouple calling code from specific provider implementations
HOW: Use Protocol to define completion, listing and endpoint accessors
"""

from typing import Any, Iterable, Protocol

from .types import ChunkCallback, Message, ModelInfo


class LLMProvider(Protocol):
    """Protocol defining the interface all LLM providers must implement."""

    slug: str
    local: bool

    def api_base(self, config: Any = None) -> str | None:
        """Base URL for HTTP providers, None for local ones."""
        ...

    def headers(self, config: Any = None) -> dict[str, str]:
        """Request headers (authentication etc.)."""
        ...

    def configuration_requirements(self) -> list[str]:
        """Settings names that must be set before the provider is usable."""
        ...

    @property
    def capabilities(self) -> Any:
        """Capability lookups for model ids served by this provider."""
        ...

    def complete(
        self,
        messages: str | Iterable[Any],
        *,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        model: str | None = None,
        stream: bool = False,
        schema: dict | None = None,
        connection: Any = None,
        params: dict | None = None,
        on_chunk: ChunkCallback | None = None
    ) -> Message:
        """Run one completion, streaming chunks to on_chunk when stream=True."""
        ...

    def list_models(self) -> list[ModelInfo]:
        """List models this provider can serve."""
        ...

    def completion_url(self) -> str:
        ...

    def models_url(self) -> str:
        ...

    def stream_url(self) -> str:
        ...
