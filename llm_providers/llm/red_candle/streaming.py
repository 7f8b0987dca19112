"""
Streaming support for the red_candle provider.

WHAT: Turn the engine's per-token callbacks into Chunk objects
WHY: Callers consume the same Chunk shape from every provider
HOW: Callable translator that accumulates text and forwards each token at once
"""

from ..types import Chunk, ChunkCallback


class ChunkTranslator:
    """
    Per-token callback handed to the engine's generate_stream.

    Each token is delivered to on_chunk before control returns to the
    engine. `text` is the exact concatenation of emitted chunk contents.
    """

    def __init__(self, model_id: str, on_chunk: ChunkCallback | None = None):
        self.model_id = model_id
        self.on_chunk = on_chunk
        self._parts: list[str] = []

    def __call__(self, token: str) -> None:
        self._parts.append(token)
        chunk = Chunk(content=token, model_id=self.model_id)
        if self.on_chunk is not None:
            self.on_chunk(chunk)

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def chunk_count(self) -> int:
        return len(self._parts)
