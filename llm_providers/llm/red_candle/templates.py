"""
Chat prompt templates for the red_candle provider.

WHAT: Render a message list into the single prompt string the engine accepts
WHY: The engine generates from raw text; chat structure must be encoded in it
HOW: Plain join for role-less input, otherwise the engine's own template,
     a model-family template, or the baseline <|role|> template
"""

from typing import Any, Callable, Sequence

from .capabilities import model_family
from ..types import ChatMessage
from ...utils.logger import get_logger

logger = get_logger(__name__)

ASSISTANT_MARKER = "<|assistant|>"


def role_marker(role: str) -> str:
    return f"<|{role.lower()}|>"


def has_roles(messages: Sequence[ChatMessage]) -> bool:
    return any(m.role for m in messages)


def render_plain(messages: Sequence[ChatMessage]) -> str:
    """Join contents with newlines, no role markers."""
    return "\n".join(m.content for m in messages)


def render_baseline(messages: Sequence[ChatMessage]) -> str:
    """
    Render with <|system|>/<|user|>/<|assistant|> marker lines.

    Ends with exactly one trailing <|assistant|> line to start generation.
    Unknown roles get a generic <|role|> marker.
    """
    lines = []
    for message in messages:
        if message.role:
            lines.append(role_marker(message.role))
        lines.append(message.content)

    prompt = "".join(f"{line}\n" for line in lines)
    if not prompt.endswith(f"{ASSISTANT_MARKER}\n"):
        prompt += f"{ASSISTANT_MARKER}\n"
    return prompt


def render_chatml(messages: Sequence[ChatMessage]) -> str:
    """ChatML turns as used by Qwen models."""
    parts = []
    for message in messages:
        if message.role:
            parts.append(f"<|im_start|>{message.role}\n{message.content}<|im_end|>\n")
        else:
            parts.append(f"{message.content}\n")
    parts.append("<|im_start|>assistant\n")
    return "".join(parts)


def render_gemma(messages: Sequence[ChatMessage]) -> str:
    """Gemma turns; Gemma has no system role so system text opens the next user turn."""
    parts = []
    pending_system = []
    for message in messages:
        if message.role == "system":
            pending_system.append(message.content)
            continue
        if message.role is None:
            parts.append(f"{message.content}\n")
            continue

        role = "model" if message.role == "assistant" else message.role
        content = message.content
        if pending_system and role == "user":
            content = "\n\n".join(pending_system + [content])
            pending_system = []
        parts.append(f"<start_of_turn>{role}\n{content}<end_of_turn>\n")

    if pending_system:
        system_text = "\n\n".join(pending_system)
        parts.append(f"<start_of_turn>user\n{system_text}<end_of_turn>\n")
    parts.append("<start_of_turn>model\n")
    return "".join(parts)


FAMILY_TEMPLATES: dict[str, Callable[[Sequence[ChatMessage]], str]] = {
    "qwen": render_chatml,
    "gemma": render_gemma,
}


def _engine_template(llm: Any, messages: Sequence[ChatMessage]) -> str | None:
    apply = getattr(llm, "apply_chat_template", None)
    if not callable(apply):
        return None
    if not all(m.role for m in messages):
        logger.debug("Role-less message present, skipping engine chat template")
        return None
    rendered = apply([m.to_dict() for m in messages])
    if isinstance(rendered, str) and rendered:
        return rendered
    logger.debug("Engine chat template returned nothing, using built-in template")
    return None


def format_prompt(messages: Sequence[ChatMessage], llm: Any = None) -> str:
    """
    Build the engine prompt for a message list.

    Args:
        messages: Normalized messages in conversation order
        llm: Loaded engine handle, used for its own template and model family

    Returns:
        Prompt string
    """
    if not has_roles(messages):
        return render_plain(messages)

    if llm is not None:
        rendered = _engine_template(llm, messages)
        if rendered:
            return rendered
        template = FAMILY_TEMPLATES.get(model_family(llm.model_name), render_baseline)
        return template(messages)

    return render_baseline(messages)
