"""Red candle provider: local in-process inference through the candle engine."""

from .loader import FALLBACK_MODEL, ModelCache, model_cache
from .provider import RedCandleProvider
from .runtime import CandleRuntime

__all__ = [
    "FALLBACK_MODEL",
    "ModelCache",
    "model_cache",
    "RedCandleProvider",
    "CandleRuntime",
]
