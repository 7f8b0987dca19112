"""
Message normalization at the provider boundary.

WHAT: Convert caller-supplied messages into typed ChatMessage values
WHY: Providers should only ever see one canonical message shape
HOW: Accept ChatMessage, mappings, objects with role/content, or plain strings
"""

from enum import Enum
from typing import Any, Iterable, Mapping

from .types import ChatMessage


def _normalize_role(role: Any) -> str | None:
    if isinstance(role, Enum):
        role = role.value
    if role is None:
        return None
    role = str(role).strip().lower()
    return role or None


def coerce_message(message: Any) -> ChatMessage:
    """
    Convert a single message into a ChatMessage.

    Shapes that carry no role or content degrade to a role-less message
    holding the message's string form, so nothing is lost downstream.
    """
    if isinstance(message, ChatMessage):
        return ChatMessage(role=_normalize_role(message.role), content=message.content)

    if isinstance(message, str):
        return ChatMessage(role=None, content=message)

    if not isinstance(message, Mapping) and callable(getattr(message, "to_dict", None)):
        message = message.to_dict()

    if isinstance(message, Mapping):
        content = message.get("content")
        return ChatMessage(
            role=_normalize_role(message.get("role")),
            content="" if content is None else str(content),
        )

    if hasattr(message, "role") or hasattr(message, "content"):
        content = getattr(message, "content", None)
        return ChatMessage(
            role=_normalize_role(getattr(message, "role", None)),
            content="" if content is None else str(content),
        )

    return ChatMessage(role=None, content=str(message))


def coerce_messages(messages: str | Iterable[Any]) -> list[ChatMessage]:
    """
    Convert a message list (or a bare prompt string) into ChatMessages.

    Args:
        messages: Prompt string or iterable of message-like values

    Returns:
        List of ChatMessage in input order
    """
    if isinstance(messages, (str, ChatMessage, Mapping)):
        return [coerce_message(messages)]
    return [coerce_message(m) for m in messages]
