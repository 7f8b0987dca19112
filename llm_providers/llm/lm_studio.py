"""
LM Studio provider implementation.

WHAT: Remote LLM inference via LM Studio's OpenAI-compatible HTTP API
WHY: Same Provider interface as the local engine, served over HTTP
HOW: HTTPX client with retries, SSE parsing for streaming
"""

import httpx
import json
import time
from typing import Any, Iterable

from .messages import coerce_messages
from .types import (
    Chunk,
    ChunkCallback,
    Message,
    ModelInfo,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResponseError,
)
from ..core.config import Settings, settings as default_settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class LMStudioCapabilities:
    """Capabilities are decided by the server; report conservative defaults."""

    @staticmethod
    def context_window_for(model_id: str) -> int:
        return 4_096

    @staticmethod
    def supports_vision(model_id: str) -> bool:
        return False

    @staticmethod
    def supports_functions(model_id: str) -> bool:
        return False

    @staticmethod
    def supports_structured_output(model_id: str) -> bool:
        return True

    @staticmethod
    def supports_streaming(model_id: str) -> bool:
        return True


class LMStudioProvider:
    """LM Studio LLM provider with retry logic and streaming."""

    slug = "lm_studio"
    local = False

    def __init__(self, config: Settings | None = None, client: httpx.Client | None = None):
        """Initialize LM Studio provider with httpx client."""
        self.config = config or default_settings
        self.base_url = self.config.LM_STUDIO_BASE_URL.rstrip("/")
        self.default_model = self.config.LM_STUDIO_DEFAULT_MODEL
        self.timeout = self.config.LM_STUDIO_TIMEOUT
        self.max_retries = max(1, self.config.LLM_MAX_RETRIES)
        self.retry_delay = self.config.LLM_RETRY_DELAY

        # Client with connection pooling
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(5.0, read=self.timeout),
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20
            ),
            headers=self.headers()
        )

    def api_base(self, config: Any = None) -> str:
        return self.base_url

    def headers(self, config: Any = None) -> dict[str, str]:
        # LM Studio runs unauthenticated
        return {"Content-Type": "application/json"}

    def configuration_requirements(self) -> list[str]:
        return ["LM_STUDIO_BASE_URL"]

    @property
    def capabilities(self) -> type[LMStudioCapabilities]:
        return LMStudioCapabilities

    def completion_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def stream_url(self) -> str:
        return self.completion_url()

    def models_url(self) -> str:
        return f"{self.base_url}/models"

    def _build_payload(
        self,
        messages: str | Iterable[Any],
        temperature: float | None,
        model: str | None,
        stream: bool,
        schema: dict | None,
        params: dict | None
    ) -> dict:
        model_to_use = model or self.default_model
        logger.debug(f"Using model: {model_to_use} (requested: {model}, default: {self.default_model})")

        payload = {
            "model": model_to_use,
            "messages": [
                {"role": m.role or "user", "content": m.content}
                for m in coerce_messages(messages)
            ],
            "stream": stream,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if schema is not None:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "response", "strict": True, "schema": schema},
            }
        if params:
            payload.update(params)
        return payload

    def _backoff(self, attempt: int) -> None:
        time.sleep(self.retry_delay * (2 ** attempt))

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, retrying timeouts, connection errors and 5xx responses."""
        for attempt in range(self.max_retries):
            try:
                response = self.client.request(method, url, **kwargs)
                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                logger.warning(f"LM Studio timeout (attempt {attempt + 1}/{self.max_retries})")
                if attempt == self.max_retries - 1:
                    raise ProviderTimeoutError(f"Request timed out after {self.max_retries} attempts") from e
                self._backoff(attempt)

            except httpx.ConnectError as e:
                logger.error(f"LM Studio connection refused (attempt {attempt + 1}/{self.max_retries})")
                if attempt == self.max_retries - 1:
                    raise ProviderUnavailableError("LM Studio is not reachable") from e
                self._backoff(attempt)

            except httpx.HTTPStatusError as e:
                if e.response.status_code >= 500:
                    logger.error(f"LM Studio server error {e.response.status_code} (attempt {attempt + 1}/{self.max_retries})")
                    if attempt == self.max_retries - 1:
                        raise ProviderResponseError(f"Server error: {e.response.status_code}") from e
                    self._backoff(attempt)
                else:
                    # Client errors don't retry
                    raise ProviderResponseError(f"HTTP {e.response.status_code}: {e.response.text}") from e

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
        Run one chat completion against LM Studio.

        Raises:
            ProviderTimeoutError: Request timed out
            ProviderUnavailableError: LM Studio not reachable
            ProviderResponseError: Invalid response from LM Studio
        """
        payload = self._build_payload(messages, temperature, model, stream, schema, params)
        if stream:
            return self._complete_streaming(payload, on_chunk)

        response = self._request("POST", self.completion_url(), json=payload)
        try:
            data = response.json()
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, json.JSONDecodeError) as e:
            logger.error(f"Invalid response from LM Studio: {e}")
            raise ProviderResponseError(f"Invalid response format: {e}") from e

        response_model = data.get("model", payload["model"])
        usage = data.get("usage", {})
        logger.info(f"LM Studio generate success (model: {response_model}, tokens: {usage.get('total_tokens', 'unknown')})")
        return Message(content=text, model_id=response_model)

    def _complete_streaming(self, payload: dict, on_chunk: ChunkCallback | None) -> Message:
        parts: list[str] = []
        model_id = payload["model"]

        try:
            with self.client.stream("POST", self.stream_url(), json=payload) as response:
                response.raise_for_status()

                for line in response.iter_lines():
                    line = line.strip()

                    # SSE format: "data: {json}"
                    if not line.startswith("data: "):
                        continue

                    data_str = line[6:]
                    if data_str == "[DONE]":
                        break

                    try:
                        data = json.loads(data_str)
                        choice = data["choices"][0]
                    except (KeyError, IndexError, json.JSONDecodeError) as e:
                        logger.error(f"Invalid SSE chunk: {line[:100]}")
                        raise ProviderResponseError(f"Invalid streaming chunk: {e}") from e

                    model_id = data.get("model", model_id)
                    token = choice.get("delta", {}).get("content") or ""
                    finish_reason = choice.get("finish_reason")
                    if not token and not finish_reason:
                        continue

                    parts.append(token)
                    if on_chunk is not None:
                        on_chunk(Chunk(content=token, model_id=model_id, finish_reason=finish_reason))
                    if finish_reason:
                        break

        except httpx.TimeoutException as e:
            logger.error("LM Studio streaming timeout")
            raise ProviderTimeoutError("Streaming request timed out") from e

        except httpx.ConnectError as e:
            logger.error("LM Studio connection refused during streaming")
            raise ProviderUnavailableError("LM Studio is not reachable") from e

        except httpx.HTTPStatusError as e:
            logger.error(f"LM Studio streaming HTTP error: {e.response.status_code}")
            raise ProviderResponseError(f"HTTP {e.response.status_code}") from e

        logger.info(f"LM Studio stream completed ({len(parts)} chunks)")
        return Message(content="".join(parts), model_id=model_id)

    def list_models(self) -> list[ModelInfo]:
        """List the models loaded in LM Studio."""
        response = self._request("GET", self.models_url(), timeout=5.0)
        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise ProviderResponseError(f"Invalid response format: {e}") from e

        return [
            ModelInfo(
                id=m["id"],
                name=m["id"].split("/")[-1],
                provider=self.slug,
                capabilities=["chat", "completion"],
            )
            for m in data.get("data", [])
            if m.get("id")
        ]

    def close(self):
        """Close the HTTP client."""
        self.client.close()
