"""
Fake candle engine module for deterministic testing.

WHAT: Stand-in for the candle engine's Device, LLM and GenerationConfig
WHY: Test the red_candle provider without the real engine or model weights
HOW: Plain classes recording calls, exposed through a namespace object that
     is injected via CandleRuntime(module=...)
"""

import re
import threading
from types import SimpleNamespace
from typing import Callable, Dict, List


class FakeDevice:
    """Device handle recording its kind."""

    def __init__(self, kind: str):
        self.kind = kind

    @classmethod
    def cpu(cls):
        return cls("cpu")

    @classmethod
    def metal(cls):
        return cls("metal")

    @classmethod
    def cuda(cls):
        return cls("cuda")


class FakeGenerationConfig:
    """Records the options it was built with."""

    def __init__(self, **options):
        self.options = options
        self.profile = None

    @classmethod
    def balanced(cls):
        config = cls()
        config.profile = "balanced"
        return config


class FakeLLM:
    """
    Fake loaded model with scripted output.

    Streams `tokens` one at a time and returns `stream_return` (which may
    deliberately differ from the joined tokens).
    """

    def __init__(self, model_name: str, device=None):
        self.model_name = model_name
        self.device = device
        self.tokens: List[str] = ["Generated", " response"]
        self.stream_return: str | None = None
        self.response = "Generated response"
        self.structured_result = {"answer": "yes"}
        self.chat_template: str | None = None
        self.calls: List[Dict] = []

    def generate(self, prompt, config=None):
        self.calls.append({"method": "generate", "prompt": prompt, "config": config})
        return self.response

    def generate_stream(self, prompt, config=None, on_token: Callable[[str], None] | None = None):
        self.calls.append({"method": "generate_stream", "prompt": prompt, "config": config})
        for token in self.tokens:
            if on_token is not None:
                on_token(token)
        return self.stream_return if self.stream_return is not None else "".join(self.tokens)

    def apply_chat_template(self, messages):
        self.calls.append({"method": "apply_chat_template", "messages": messages})
        return self.chat_template or ""

    def constraint_from_schema(self, schema):
        return {"type": "schema", "schema": schema, "model": self.model_name}

    def constraint_from_regex(self, pattern):
        return {"type": "regex", "pattern": pattern, "model": self.model_name}

    def generate_structured(self, prompt, schema):
        self.calls.append({"method": "generate_structured", "prompt": prompt, "schema": schema})
        result = self.structured_result
        enum = schema.get("properties", {}).get("answer", {}).get("enum")
        if isinstance(result, dict) and enum and result.get("answer") not in enum:
            result = {**result, "answer": enum[0]}
        return result

    def generate_regex(self, prompt, pattern):
        self.calls.append({"method": "generate_regex", "prompt": prompt, "pattern": pattern})
        candidate = "555-123-4567"
        return candidate if re.fullmatch(pattern, candidate) else ""


class FakeLLMFactory:
    """`LLM` namespace of the fake engine; counts from_pretrained calls."""

    def __init__(self, fail_with: Exception | None = None, delay: float = 0.0):
        self.loads: List[Dict] = []
        self.instances: List[FakeLLM] = []
        self.fail_with = fail_with
        self.delay = delay
        self.name_override: str | None = None
        self._lock = threading.Lock()

    def from_pretrained(self, model_id, device=None):
        with self._lock:
            self.loads.append({"model_id": model_id, "device": device})
        if self.delay:
            threading.Event().wait(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        llm = FakeLLM(self.name_override or model_id, device)
        self.instances.append(llm)
        return llm


def build_fake_candle(**factory_kwargs) -> SimpleNamespace:
    """Build a fake engine module namespace."""
    return SimpleNamespace(
        Device=FakeDevice,
        GenerationConfig=FakeGenerationConfig,
        LLM=FakeLLMFactory(**factory_kwargs),
    )
