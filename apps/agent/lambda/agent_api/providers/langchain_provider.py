"""LangChain chat-model provider used for the Anthropic and Google backends."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage

from agent_api.cancellation import CancellationToken, run_cancellable
from agent_api.errors import DispatchCancelledError, ProviderError
from agent_api.message_mappers import build_langchain_messages
from agent_api.schemas import Message

from .base import ProviderResponse

logger = logging.getLogger(__name__)


class LangChainChatProvider:
    def __init__(
        self,
        provider: str,
        get_chat_model: Callable[[str], BaseChatModel],
        tools: Sequence[dict[str, Any]] = (),
    ) -> None:
        self._provider = provider
        self._get_chat_model = get_chat_model
        self._tools = list(tools)

    def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model: str,
        use_tools: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> ProviderResponse:
        lc_messages = build_langchain_messages(messages, system_prompt)

        start = time.time()
        try:
            chat_model = self._get_chat_model(model)
            runnable = chat_model.bind_tools(self._tools) if use_tools and self._tools else chat_model
            response: AIMessage = run_cancellable(
                cancellation,
                runnable.invoke,
                lc_messages,
                config={
                    "run_name": "agent_fallback_request",
                    "tags": ["agent-api", self._provider, model],
                    "metadata": {"message_count": len(messages), "use_tools": use_tools},
                },
            )
        except DispatchCancelledError:
            raise
        except Exception as exc:
            raise ProviderError(str(exc) or type(exc).__name__, provider=self._provider) from exc
        duration_ms = int((time.time() - start) * 1000)

        content = ""
        if isinstance(response.content, str):
            content = response.content
        elif isinstance(response.content, list):
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in response.content
            )

        usage = response.usage_metadata
        input_tokens = usage.get("input_tokens") if usage else None
        output_tokens = usage.get("output_tokens") if usage else None
        tool_calls = tuple(
            {"id": call.get("id"), "name": call["name"], "arguments": call["args"]}
            for call in response.tool_calls
        )

        logger.info(
            "Chat response generated",
            extra={
                "provider": self._provider,
                "provider_duration_ms": duration_ms,
                "model": model,
                "usage_prompt_tokens": input_tokens,
                "usage_completion_tokens": output_tokens,
                "response_length": len(content),
                "tool_call_count": len(tool_calls),
                "response_id": response.id,
            },
        )
        return ProviderResponse(
            message=content,
            response_id=response.id or "",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_seconds=round(duration_ms / 1000, 2),
            tool_calls=tool_calls,
        )
