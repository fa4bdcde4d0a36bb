"""OpenAI provider implementation for agent requests."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from langchain_core.runnables import Runnable
from openai import OpenAI

from agent_api.cancellation import CancellationToken, run_cancellable
from agent_api.constants import DEFAULT_MAX_OUTPUT_TOKENS, OPENAI_PROVIDER
from agent_api.errors import DispatchCancelledError, ProviderError
from agent_api.message_mappers import build_responses_input
from agent_api.schemas import Message

from .base import ProviderResponse

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    def __init__(
        self,
        get_openai_client: Callable[[], OpenAI],
        get_responses_runnable: Callable[[], Runnable[dict[str, Any], Any]],
        timeout_sec: float = 60,
    ) -> None:
        self._get_openai_client = get_openai_client
        self._get_responses_runnable = get_responses_runnable
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
            "instructions": system_prompt or None,
            "input": build_responses_input(messages),
            "max_output_tokens": DEFAULT_MAX_OUTPUT_TOKENS,
            "timeout": self._timeout_sec,
        }
        if use_tools:
            request_params["tools"] = [{"type": "web_search"}]

        start = time.time()
        try:
            self._get_openai_client()
            response = run_cancellable(
                cancellation,
                self._get_responses_runnable().invoke,
                request_params,
                config={
                    "run_name": "agent_fallback_request",
                    "tags": ["agent-api", OPENAI_PROVIDER, model],
                    "metadata": {"message_count": len(messages), "use_tools": use_tools},
                },
            )
        except DispatchCancelledError:
            raise
        except Exception as exc:
            raise ProviderError(str(exc) or type(exc).__name__, provider=OPENAI_PROVIDER) from exc
        duration_ms = int((time.time() - start) * 1000)
        content = response.output_text or ""

        logger.info(
            "Chat response generated",
            extra={
                "provider": OPENAI_PROVIDER,
                "openai_duration_ms": duration_ms,
                "model": response.model,
                "usage_prompt_tokens": (response.usage.input_tokens if response.usage else None),
                "usage_completion_tokens": (
                    response.usage.output_tokens if response.usage else None
                ),
                "response_length": len(content),
                "response_id": response.id,
            },
        )
        return ProviderResponse(
            message=content,
            response_id=response.id,
            model=response.model or model,
            input_tokens=response.usage.input_tokens if response.usage else None,
            output_tokens=response.usage.output_tokens if response.usage else None,
            duration_seconds=round(duration_ms / 1000, 2),
        )
