"""
Model resolution and loading for the red_candle provider.

WHAT: Resolve requested model ids and load engine handles
WHY: Engine loads are expensive; repeated per-request loads must be avoided
HOW: Process-wide cache keyed by (model_id, device) with one load in flight per key
"""

import threading
from typing import Any, Callable

from .runtime import CandleRuntime, EngineHandle, normalize_device_kind, select_device
from ...utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_MODEL = "TinyLlama/TinyLlama-1.1B-Chat-v1.0"


def resolve_model(model: str | None, default_model: str | None = None) -> str:
    """
    Pick the model id for a request.

    Args:
        model: Requested model id
        default_model: Configured default model id

    Returns:
        The requested id, else the configured default, else FALLBACK_MODEL
    """
    return model or default_model or FALLBACK_MODEL


class ModelCache:
    """
    Thread-safe cache of loaded engine handles.

    Concurrent requests for the same key wait on that key's lock, so the
    engine constructor runs at most once per key. A failed load leaves the
    key empty and the next caller tries again.
    """

    def __init__(self):
        self._handles: dict[tuple[str, str], Any] = {}
        self._key_locks: dict[tuple[str, str], threading.Lock] = {}
        self._lock = threading.Lock()

    def _lock_for(self, key: tuple[str, str]) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def get_or_load(self, key: tuple[str, str], load: Callable[[], Any]) -> Any:
        handle = self._handles.get(key)
        if handle is not None:
            logger.debug(f"Model cache hit: {key[0]} ({key[1]})")
            return handle

        with self._lock_for(key):
            handle = self._handles.get(key)
            if handle is None:
                handle = load()
                self._handles[key] = handle
            return handle

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def clear(self) -> None:
        # Key locks survive so an in-flight load still excludes new loads of its key
        with self._lock:
            keys = list(self._key_locks)
        for key in keys:
            with self._lock_for(key):
                self._handles.pop(key, None)


# Shared by every provider instance in the process
model_cache = ModelCache()


class ModelLoader:
    """Loads engine handles for a configured device, optionally through a cache."""

    def __init__(
        self,
        runtime: CandleRuntime,
        device: str | None = None,
        cache: ModelCache | None = None
    ):
        self.runtime = runtime
        self.device_kind = normalize_device_kind(device)
        self.cache = cache

    def load(self, model_id: str) -> EngineHandle:
        """
        Load (or reuse) an engine handle for model_id.

        Engine construction errors propagate unchanged.

        Raises:
            ConfigurationError: Engine not installed
        """
        self.runtime.ensure_available()
        if self.cache is None:
            return self._construct(model_id)
        return self.cache.get_or_load(
            (model_id, self.device_kind),
            lambda: self._construct(model_id)
        )

    def _construct(self, model_id: str) -> EngineHandle:
        device = select_device(self.runtime, self.device_kind)
        logger.info(f"Loading red_candle model {model_id} on {self.device_kind}")
        return self.runtime.engine.LLM.from_pretrained(model_id, device=device)
