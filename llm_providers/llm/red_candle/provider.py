"""
Red candle provider implementation.

WHAT: Local, in-process LLM inference through the candle engine
WHY: Serve chat completions without any HTTP endpoint or external API
HOW: Resolve + load a cached engine handle, format the chat prompt,
     generate synchronously or stream tokens as Chunks
"""

from types import ModuleType
from typing import Any, Iterable

from . import capabilities as candle_capabilities
from . import models as candle_models
from . import structured_generation
from .generation_config import build_generation_config
from .loader import ModelLoader, model_cache, resolve_model
from .runtime import CandleRuntime, EngineHandle
from .streaming import ChunkTranslator
from .templates import format_prompt
from ..messages import coerce_messages
from ..types import ChunkCallback, Message, ModelInfo
from ...core.config import Settings, settings as default_settings
from ...utils.logger import get_logger

logger = get_logger(__name__)

LOCAL_PROVIDER_ERROR = "red_candle is a local provider and doesn't use HTTP endpoints"


class RedCandleProvider:
    """Local candle-engine provider (CPU, Metal or CUDA)."""

    slug = "red_candle"
    local = True

    def __init__(
        self,
        config: Settings | None = None,
        runtime: CandleRuntime | None = None,
        cache: Any = model_cache
    ):
        """
        Initialize provider.

        Args:
            config: Settings (defaults to the process settings)
            runtime: Engine runtime; detected from RED_CANDLE_ENGINE_MODULE when None
            cache: Model cache, shared process-wide by default
        """
        self.config = config or default_settings
        self.runtime = runtime or CandleRuntime.detect(self.config.RED_CANDLE_ENGINE_MODULE)
        self.default_model = self.config.RED_CANDLE_DEFAULT_MODEL
        self.loader = ModelLoader(
            self.runtime,
            device=self.config.RED_CANDLE_DEVICE,
            cache=cache if self.config.RED_CANDLE_CACHE_MODELS else None
        )
        logger.info(
            f"red_candle provider initialized (engine available: {self.runtime.available}, "
            f"device: {self.loader.device_kind})"
        )

    def api_base(self, config: Any = None) -> None:
        return None

    def headers(self, config: Any = None) -> dict[str, str]:
        return {}

    def configuration_requirements(self) -> list[str]:
        # Device and default model are both optional
        return []

    @property
    def capabilities(self) -> ModuleType:
        return candle_capabilities

    def completion_url(self) -> str:
        raise NotImplementedError(LOCAL_PROVIDER_ERROR)

    def models_url(self) -> str:
        raise NotImplementedError(LOCAL_PROVIDER_ERROR)

    def stream_url(self) -> str:
        raise NotImplementedError(LOCAL_PROVIDER_ERROR)

    def parse_streaming_error(self, data: Any) -> None:
        # Engine errors are raised as exceptions, never sent as stream data
        return None

    def list_models(self) -> list[ModelInfo]:
        return candle_models.list_models()

    def resolve_model(self, model: str | None = None) -> str:
        return resolve_model(model, self.default_model)

    def load_model(self, model_id: str) -> EngineHandle:
        return self.loader.load(model_id)

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
        """
        Run one chat completion on the local engine.

        Args:
            messages: Conversation messages or a bare prompt string
            tools: Accepted for interface compatibility, unused
            temperature: Sampling temperature (engine default when None)
            model: Model id (configured default or fallback when None)
            stream: Stream tokens through on_chunk
            schema: JSON schema constraining the output
            connection: Accepted for interface compatibility, unused
            params: Accepted for interface compatibility, unused
            on_chunk: Receives one Chunk per token when stream=True

        Returns:
            Message whose model_id is the loaded model's reported name

        Raises:
            ConfigurationError: candle engine not installed
        """
        self.runtime.ensure_available()
        model_id = self.resolve_model(model)
        llm = self.load_model(model_id)
        config = build_generation_config(self.runtime, temperature, schema=schema, llm=llm)
        prompt = format_prompt(coerce_messages(messages), llm)

        if stream:
            return self._complete_streaming(llm, prompt, config, on_chunk)
        return self._complete_sync(llm, prompt, config)

    def _complete_sync(self, llm: EngineHandle, prompt: str, config: Any) -> Message:
        text = llm.generate(prompt, config=config)
        logger.debug(f"red_candle generate finished (model: {llm.model_name})")
        return Message(content=text, model_id=llm.model_name)

    def _complete_streaming(
        self,
        llm: EngineHandle,
        prompt: str,
        config: Any,
        on_chunk: ChunkCallback | None
    ) -> Message:
        translator = ChunkTranslator(llm.model_name, on_chunk)
        llm.generate_stream(prompt, config=config, on_token=translator)
        logger.debug(
            f"red_candle stream finished (model: {llm.model_name}, {translator.chunk_count} chunks)"
        )
        # The engine's own return value is ignored so content matches the chunks exactly
        return Message(content=translator.text, model_id=llm.model_name)

    def generate_structured(self, prompt: str, schema: dict, model: str | None = None) -> Message:
        """
        Generate JSON matching schema from a raw prompt (no chat template).

        Raises:
            ConfigurationError: candle engine not installed
        """
        self.runtime.ensure_available()
        llm = self.load_model(self.resolve_model(model))
        return structured_generation.generate_structured(llm, prompt, schema)

    def generate_regex(self, prompt: str, pattern: str, model: str | None = None) -> Message:
        """
        Generate text matching pattern from a raw prompt (no chat template).

        Raises:
            ConfigurationError: candle engine not installed
        """
        self.runtime.ensure_available()
        llm = self.load_model(self.resolve_model(model))
        return structured_generation.generate_regex(llm, prompt, pattern)
