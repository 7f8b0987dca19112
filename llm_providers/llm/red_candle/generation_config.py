"""
Generation config construction for the red_candle provider.

WHAT: Assemble engine-native generation options for one request
WHY: Constraints are compiled against one loaded model's vocabulary and must
     never leak across requests
HOW: balanced() profile when nothing is set, explicit config otherwise
"""

from typing import Any

from .runtime import CandleRuntime, EngineHandle
from ...utils.logger import get_logger

logger = get_logger(__name__)


def build_generation_config(
    runtime: CandleRuntime,
    temperature: float | None = None,
    schema: dict | None = None,
    pattern: str | None = None,
    llm: EngineHandle | None = None
) -> Any:
    """
    Build a fresh engine GenerationConfig.

    Args:
        runtime: Engine runtime (availability checked first)
        temperature: Sampling temperature, engine default when None
        schema: JSON schema to constrain decoding
        pattern: Regular expression to constrain decoding
        llm: Loaded engine handle; constraints are only attached when given

    Returns:
        Engine GenerationConfig

    Raises:
        ConfigurationError: Engine not installed
        ValueError: Both schema and pattern supplied
    """
    runtime.ensure_available()
    if schema is not None and pattern is not None:
        raise ValueError("Pass either schema or pattern, not both")

    options: dict[str, Any] = {}
    if temperature is not None:
        options["temperature"] = temperature

    if schema is not None or pattern is not None:
        if llm is None:
            logger.debug("No loaded model to compile constraint against, leaving it off")
        elif schema is not None:
            options["constraint"] = llm.constraint_from_schema(schema)
        else:
            options["constraint"] = llm.constraint_from_regex(pattern)

    generation_config = runtime.engine.GenerationConfig
    if options:
        return generation_config(**options)
    return generation_config.balanced()
