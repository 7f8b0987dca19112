"""
Model capabilities and metadata for the red_candle provider.

WHAT: Static lookups keyed on model id patterns
WHY: Callers need context sizes and feature flags without loading a model
HOW: Ordered regex tables, first match wins, case-insensitive
"""

import re
from typing import Any

DEFAULT_CONTEXT_WINDOW = 4_096

# Order matters: the first matching pattern wins
CONTEXT_WINDOWS: list[tuple[str, int]] = [
    (r"llama.*2", 4_096),
    (r"llama.*3", 8_192),
    (r"tinyllama", 2_048),
    (r"gemma.*2b", 8_192),
    (r"gemma.*7b", 8_192),
    (r"qwen2\.5", 32_768),
    (r"qwen2.*7b", 32_768),
    (r"qwen2.*1\.5b", 32_768),
    (r"phi-2", 2_048),
    (r"phi-3", 4_096),
    (r"phi-4", 16_384),
]

MODEL_FAMILIES = ("mistral", "llama", "gemma", "qwen", "phi")

QUANTIZATION_LEVELS: list[tuple[str, dict[str, Any]]] = [
    ("Q8_0", {"level": "Q8_0", "bits": 8, "quality": "highest"}),
    ("Q5_K_M", {"level": "Q5_K_M", "bits": 5, "quality": "very_good"}),
    ("Q4_K_M", {"level": "Q4_K_M", "bits": 4, "quality": "recommended"}),
    ("Q3_K_M", {"level": "Q3_K_M", "bits": 3, "quality": "good"}),
    ("Q2_K", {"level": "Q2_K", "bits": 2, "quality": "acceptable"}),
]

HARDWARE_BY_SIZE = {
    "small": {"min_ram": "4GB", "recommended_ram": "8GB", "gpu_recommended": False},
    "medium": {"min_ram": "8GB", "recommended_ram": "16GB", "gpu_recommended": True},
    "large": {"min_ram": "16GB", "recommended_ram": "32GB", "gpu_recommended": True},
}


def context_window_for(model_id: str) -> int:
    """Context window in tokens for a model id."""
    if re.search(r"mistral", model_id, re.IGNORECASE):
        return 32_768 if "v0.3" in model_id else 8_192
    for pattern, window in CONTEXT_WINDOWS:
        if re.search(pattern, model_id, re.IGNORECASE):
            return window
    return DEFAULT_CONTEXT_WINDOW


def max_tokens_for(model_id: str) -> int:
    """Reasonable generation length default; the engine has no hard limit."""
    if re.search(r"tinyllama", model_id, re.IGNORECASE):
        return 1_024
    if re.search(r"1\.5b|2b", model_id, re.IGNORECASE):
        return 2_048
    return 4_096


def supports_vision(model_id: str) -> bool:
    return False


def supports_functions(model_id: str) -> bool:
    # Function calls go through structured generation
    return True


def supports_structured_output(model_id: str) -> bool:
    return True


def supports_streaming(model_id: str) -> bool:
    return True


def model_family(model_id: str) -> str:
    lowered = model_id.lower()
    for family in MODEL_FAMILIES:
        if family in lowered:
            return family
    return "unknown"


def quantization_info(model_id: str) -> dict[str, Any] | None:
    """Quantization level parsed from a GGUF model id, None for other models."""
    if "GGUF" not in model_id:
        return None
    for marker, info in QUANTIZATION_LEVELS:
        if re.search(marker, model_id, re.IGNORECASE):
            return dict(info)
    return {"level": "unknown", "bits": None, "quality": "unknown"}


def _model_size(model_id: str) -> str:
    lowered = model_id.lower()
    if re.search(r"1\.1b|1\.5b|2b", lowered):
        return "small"
    if "7b" in lowered:
        return "medium"
    if "13b" in lowered:
        return "large"
    return "unknown"


def hardware_requirements(model_id: str) -> dict[str, Any]:
    """Rough memory estimates by parameter count."""
    size = _model_size(model_id)
    if size in HARDWARE_BY_SIZE:
        return dict(HARDWARE_BY_SIZE[size])
    return {"min_ram": "unknown", "recommended_ram": "unknown", "gpu_recommended": None}


def describe_model(model_id: str) -> dict[str, Any]:
    """All capability facts for a model id in one dict."""
    return {
        "context_window": context_window_for(model_id),
        "max_tokens": max_tokens_for(model_id),
        "supports_vision": supports_vision(model_id),
        "supports_functions": supports_functions(model_id),
        "supports_structured_output": supports_structured_output(model_id),
        "supports_streaming": supports_streaming(model_id),
        "model_family": model_family(model_id),
    }
