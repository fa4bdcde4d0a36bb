"""Conversion helpers between API messages and provider-specific formats."""

from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from .schemas import Message


def build_langchain_messages(
    messages: Sequence[Message],
    system_prompt: str | None,
) -> list[SystemMessage | HumanMessage | AIMessage]:
    """Convert internal Message objects to LangChain message format."""
    lc_messages: list[SystemMessage | HumanMessage | AIMessage] = []

    if system_prompt:
        lc_messages.append(SystemMessage(content=system_prompt))

    for message in messages:
        if message.role == "assistant":
            lc_messages.append(AIMessage(content=message.content))
        else:
            lc_messages.append(HumanMessage(content=message.content))

    return lc_messages


def build_chat_completion_messages(
    messages: Sequence[Message],
    system_prompt: str | None,
) -> list[dict[str, Any]]:
    """Build OpenAI Chat Completions messages (used by the LiteLLM proxy)."""
    chat_messages: list[dict[str, Any]] = []
    if system_prompt:
        chat_messages.append({"role": "system", "content": system_prompt})
    chat_messages.extend({"role": m.role, "content": m.content} for m in messages)
    return chat_messages


def build_responses_input(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Build OpenAI Responses API input items, skipping blank messages."""
    input_messages: list[dict[str, Any]] = []
    for message in messages:
        if not message.content.strip():
            continue
        part_type = "output_text" if message.role == "assistant" else "input_text"
        input_messages.append(
            {"role": message.role, "content": [{"type": part_type, "text": message.content}]}
        )
    return input_messages
