"""
Structured generation for the red_candle provider.

WHAT: Schema- and regex-constrained generation from a raw prompt
WHY: Constrained output bypasses chat formatting entirely
HOW: Call the engine's constrained entry points, wrap results in a Message
"""

import json
from typing import Any

from .runtime import EngineHandle
from ..types import Message


def _as_text(result: Any) -> str:
    if isinstance(result, (dict, list)):
        return json.dumps(result)
    if result is None:
        return ""
    return result if isinstance(result, str) else str(result)


def generate_structured(llm: EngineHandle, prompt: str, schema: dict) -> Message:
    """Schema-constrained generation; structured results become JSON text."""
    result = llm.generate_structured(prompt, schema=schema)
    return Message(content=_as_text(result), model_id=llm.model_name)


def generate_regex(llm: EngineHandle, prompt: str, pattern: str) -> Message:
    """Regex-constrained generation; the result is used as literal text."""
    result = llm.generate_regex(prompt, pattern=pattern)
    return Message(content=_as_text(result), model_id=llm.model_name)
