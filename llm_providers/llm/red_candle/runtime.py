"""
Candle engine runtime and device selection.

WHAT: Availability check for the optional candle engine, plus device handles
WHY: The engine is an optional import; every entry point must fail loudly
     with install guidance before touching it
HOW: Probe the engine module once at construction and inject the result
"""

import importlib
import importlib.util
from typing import Any, Callable, Protocol

from ..types import ConfigurationError
from ...utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ENGINE_MODULE = "candle"
DEVICE_KINDS = ("cpu", "metal", "cuda")


class EngineHandle(Protocol):
    """Calls issued to a model loaded by the candle engine."""

    model_name: str

    def generate(self, prompt: str, config: Any = None) -> str:
        ...

    def generate_stream(
        self,
        prompt: str,
        config: Any = None,
        on_token: Callable[[str], None] | None = None
    ) -> str:
        ...

    def constraint_from_schema(self, schema: dict) -> Any:
        ...

    def constraint_from_regex(self, pattern: str) -> Any:
        ...

    def generate_structured(self, prompt: str, schema: dict) -> Any:
        ...

    def generate_regex(self, prompt: str, pattern: str) -> str:
        ...


class CandleRuntime:
    """
    Injected availability object for the candle engine.

    `module` is the imported engine (exposing Device, LLM and
    GenerationConfig) or None when it is not installed.
    """

    def __init__(self, module: Any = None, module_name: str = DEFAULT_ENGINE_MODULE):
        self._module = module
        self.module_name = module_name

    @classmethod
    def detect(cls, module_name: str = DEFAULT_ENGINE_MODULE) -> "CandleRuntime":
        """Import the engine module if it is installed."""
        try:
            if importlib.util.find_spec(module_name) is None:
                logger.info(f"Candle engine module '{module_name}' not installed")
                return cls(None, module_name)
            return cls(importlib.import_module(module_name), module_name)
        except ImportError as e:
            logger.warning(f"Candle engine module '{module_name}' could not be imported: {e}")
            return cls(None, module_name)

    @property
    def available(self) -> bool:
        return self._module is not None

    def ensure_available(self) -> None:
        """
        Raise ConfigurationError if the engine is not installed.

        Raises:
            ConfigurationError: Engine module missing
        """
        if self.available:
            return

        raise ConfigurationError(
            f"The candle inference engine ('{self.module_name}' module) is not installed. "
            "To use the red_candle provider, install the candle Python bindings into this "
            f"environment so that `import {self.module_name}` succeeds, or set "
            "RED_CANDLE_ENGINE_MODULE to the module that provides them. "
            "See https://github.com/huggingface/candle for build instructions."
        )

    @property
    def engine(self) -> Any:
        """The engine module (checked)."""
        self.ensure_available()
        return self._module


def normalize_device_kind(kind: str | None) -> str:
    """Map a configured device string onto cpu/metal/cuda."""
    if kind is None:
        return "cpu"
    normalized = str(kind).strip().lower()
    if normalized in DEVICE_KINDS:
        return normalized
    logger.warning(f"Unknown red_candle device '{kind}', falling back to cpu")
    return "cpu"


def select_device(runtime: CandleRuntime, kind: str | None = None) -> Any:
    """
    Build an engine device handle for the configured device kind.

    Args:
        runtime: Engine runtime (availability checked first)
        kind: "cpu", "metal" or "cuda" (case-insensitive); anything else is cpu

    Returns:
        Engine device handle
    """
    runtime.ensure_available()
    device_kind = normalize_device_kind(kind)
    factory = getattr(runtime.engine.Device, device_kind)
    return factory()
