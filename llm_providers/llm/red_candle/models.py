"""
Model catalog for the red_candle provider.

WHAT: Fixed list of known-good models plus a GGUF catch-all entry
WHY: Listing models must not require the engine or the network
HOW: Static ids classified into capabilities by name
"""

from ..types import ModelInfo

PROVIDER_SLUG = "red_candle"

SUPPORTED_MODELS = (
    # Mistral models
    "mistralai/Mistral-7B-Instruct-v0.1",
    "mistralai/Mistral-7B-Instruct-v0.2",
    "mistralai/Mistral-7B-Instruct-v0.3",

    # Llama models
    "meta-llama/Llama-2-7b-hf",
    "meta-llama/Llama-2-7b-chat-hf",
    "meta-llama/Llama-2-13b-hf",
    "meta-llama/Llama-2-13b-chat-hf",
    "TinyLlama/TinyLlama-1.1B-Chat-v1.0",

    # Gemma models
    "google/gemma-2b",
    "google/gemma-2b-it",
    "google/gemma-7b",
    "google/gemma-7b-it",

    # Qwen models
    "Qwen/Qwen2-1.5B",
    "Qwen/Qwen2-1.5B-Instruct",
    "Qwen/Qwen2-7B",
    "Qwen/Qwen2-7B-Instruct",
    "Qwen/Qwen2.5-7B-Instruct",

    # Phi models
    "microsoft/phi-2",
    "microsoft/Phi-3-mini-4k-instruct",
    "microsoft/phi-4",
)

GGUF_MODEL_PATTERNS = (
    "TheBloke/*-GGUF",
    "QuantFactory/*-GGUF",
    "bartowski/*-GGUF",
)

GGUF_MODEL_ID = "gguf-models"


def model_capabilities(model_id: str) -> list[str]:
    """Capabilities implied by a model id; chat only for instruction-tuned models."""
    caps = ["completion"]
    lowered = model_id.lower()
    if "chat" in lowered or "instruct" in lowered or lowered.endswith("-it"):
        caps.append("chat")
    caps.append("structured_output")
    return caps


def list_models() -> list[ModelInfo]:
    models = [
        ModelInfo(
            id=model_id,
            name=model_id.split("/")[-1],
            provider=PROVIDER_SLUG,
            capabilities=model_capabilities(model_id),
        )
        for model_id in SUPPORTED_MODELS
    ]

    models.append(
        ModelInfo(
            id=GGUF_MODEL_ID,
            name="GGUF Quantized Models",
            provider=PROVIDER_SLUG,
            capabilities=["chat", "completion"],
            metadata={
                "description": "Supports any GGUF quantized model from HuggingFace",
                "patterns": list(GGUF_MODEL_PATTERNS),
            },
        )
    )
    return models
