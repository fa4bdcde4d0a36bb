"""LiteLLM proxy provider (OpenAI-compatible endpoint fronting Ollama)."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from openai import OpenAI

from agent_api.cancellation import CancellationToken, run_cancellable
from agent_api.constants import DEFAULT_MAX_OUTPUT_TOKENS, PROXY_PROVIDER
from agent_api.errors import DispatchCancelledError, ProviderError
from agent_api.message_mappers import build_chat_completion_messages
from agent_api.schemas import Message

from .base import ProviderResponse

logger = logging.getLogger(__name__)


class ProxyChatProvider:
    def __init__(
        self,
        get_client: Callable[[], OpenAI],
        tools: Sequence[dict[str, Any]] = (),
        timeout_sec: float = 60,
    ) -> None:
        self._get_client = get_client
        self._tools = list(tools)
        self._timeout_sec = timeout_sec

    def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model: str,
        use_tools: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> ProviderResponse:
        request_params: dict[str, Any] = {
            "model": model,
            "messages": build_chat_completion_messages(messages, system_prompt),
            "max_tokens": DEFAULT_MAX_OUTPUT_TOKENS,
            "timeout": self._timeout_sec,
        }
        if use_tools and self._tools:
            request_params["tools"] = self._tools

        start = time.time()
        try:
            client = self._get_client()
            completion = run_cancellable(
                cancellation, client.chat.completions.create, **request_params
            )
        except DispatchCancelledError:
            raise
        except Exception as exc:
            raise ProviderError(str(exc) or type(exc).__name__, provider=PROXY_PROVIDER) from exc
        duration_ms = int((time.time() - start) * 1000)

        if not completion.choices:
            raise ProviderError("Proxy returned no choices", provider=PROXY_PROVIDER)
        choice_message = completion.choices[0].message
        content = choice_message.content or ""
        tool_calls = tuple(
            {
                "id": tool_call.id,
                "name": tool_call.function.name,
                "arguments": tool_call.function.arguments,
            }
            for tool_call in choice_message.tool_calls or []
        )
        usage = completion.usage

        logger.info(
            "Chat response generated",
            extra={
                "provider": PROXY_PROVIDER,
                "proxy_duration_ms": duration_ms,
                "model": completion.model or model,
                "usage_prompt_tokens": usage.prompt_tokens if usage else None,
                "usage_completion_tokens": usage.completion_tokens if usage else None,
                "response_length": len(content),
                "tool_call_count": len(tool_calls),
                "response_id": completion.id,
            },
        )
        return ProviderResponse(
            message=content,
            response_id=completion.id or "",
            model=completion.model or model,
            input_tokens=usage.prompt_tokens if usage else None,
            output_tokens=usage.completion_tokens if usage else None,
            duration_seconds=round(duration_ms / 1000, 2),
            tool_calls=tool_calls,
        )
