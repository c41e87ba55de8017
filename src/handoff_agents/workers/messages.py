"""Conversion between role/content message dicts and pydantic-ai messages."""

from __future__ import annotations

from typing import Any

from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)


def _content_text(message: dict[str, Any]) -> str:
    content = message.get("content", "")
    if isinstance(content, str):
        return content
    # UI-style messages carry a list of parts
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return str(content)


def dicts_to_model_messages(messages: list[dict[str, Any]]) -> list[ModelMessage]:
    """Convert ``{"role", "content"}`` dicts into pydantic-ai messages.

    ``user`` and ``system`` messages become ``ModelRequest`` entries,
    ``assistant`` messages become ``ModelResponse`` entries. Other roles
    (e.g. ``tool``) have no standalone pydantic-ai equivalent and are skipped.

    Args:
        messages: Message dicts in conversation order.

    Returns:
        Equivalent pydantic-ai message history.
    """
    result: list[ModelMessage] = []
    for message in messages:
        role = message.get("role")
        text = _content_text(message)
        if role == "user":
            result.append(ModelRequest(parts=[UserPromptPart(content=text)]))
        elif role == "system":
            result.append(ModelRequest(parts=[SystemPromptPart(content=text)]))
        elif role == "assistant":
            result.append(ModelResponse(parts=[TextPart(content=text)]))
    return result


def split_prompt(
    messages: list[dict[str, Any]],
) -> tuple[str | None, list[ModelMessage]]:
    """Split provider input into a user prompt and preceding history.

    When the final message is a user message its text becomes the prompt.
    Otherwise the whole list is returned as history and the prompt is
    ``None``, so the run continues from the trailing request.

    Args:
        messages: Message dicts in conversation order.

    Returns:
        Tuple of (user prompt or None, message history).
    """
    if messages and messages[-1].get("role") == "user":
        return _content_text(messages[-1]), dicts_to_model_messages(messages[:-1])
    return None, dicts_to_model_messages(messages)
