"""Runtime infrastructure helpers for credentials, tracing, and provider handles."""

import logging
import os
from functools import lru_cache
from typing import Any

import boto3
from langchain_anthropic import ChatAnthropic
from langchain_core.runnables import Runnable, RunnableLambda
from langchain_google_genai import ChatGoogleGenerativeAI
from langsmith import traceable
from langsmith.run_trees import get_cached_client
from openai import OpenAI

from agent_api.constants import (
    ANTHROPIC_PROVIDER,
    AWS_REGION,
    DEFAULT_MAX_OUTPUT_TOKENS,
    GOOGLE_PROVIDER,
    LANGSMITH_PROJECT,
    OPENAI_PROVIDER,
    PROXY_PROVIDER,
)
from agent_api.providers.base import AgentProvider
from agent_api.providers.langchain_provider import LangChainChatProvider
from agent_api.providers.openai_provider import OpenAIChatProvider
from agent_api.providers.proxy_provider import ProxyChatProvider
from agent_api.settings import AgentSettings

logger = logging.getLogger(__name__)


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise RuntimeError(f"SSM parameter {parameter_name} has no value")
    return value


@lru_cache(maxsize=1)
def _get_ssm_client() -> Any:
    region = os.environ.get("AWS_REGION") or AWS_REGION
    return boto3.client("ssm", region_name=region)


def read_optional_secure_parameter(parameter_name: str) -> str | None:
    try:
        return _get_secure_parameter(_get_ssm_client(), parameter_name)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None


@lru_cache(maxsize=1)
def get_settings() -> AgentSettings:
    return AgentSettings.from_env(os.environ, read_parameter=read_optional_secure_parameter)


def _get_langsmith_api_key() -> str | None:
    api_key = (os.environ.get("LANGSMITH_API_KEY") or "").strip()
    if api_key:
        return api_key
    parameter_name = (os.environ.get("LANGSMITH_API_KEY_PARAMETER_NAME") or "").strip()
    if not parameter_name:
        return None
    return read_optional_secure_parameter(parameter_name)


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    _configure_langsmith(_get_langsmith_api_key())


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


@lru_cache(maxsize=1)
def get_proxy_client() -> OpenAI:
    """Create an OpenAI-compatible client pointed at the LiteLLM proxy."""
    settings = get_settings()
    return OpenAI(
        base_url=settings.proxy_url,
        api_key=settings.proxy_api_key or "no-key",
        max_retries=0,
    )


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAI:
    """Create an OpenAI client with LangSmith tracing configuration."""
    ensure_langsmith_configured()
    settings = get_settings()
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY is not configured")
    return OpenAI(api_key=settings.openai_api_key, max_retries=0)


@traceable(run_type="llm", name="openai.responses.create")
def _invoke_openai_responses(request_params: dict[str, Any]) -> Any:
    client = get_openai_client()
    return client.responses.create(**request_params)


@lru_cache(maxsize=1)
def get_responses_runnable() -> Runnable[dict[str, Any], Any]:
    return RunnableLambda(_invoke_openai_responses).with_config(
        {"run_name": "agent_openai_responses"}
    )


@lru_cache(maxsize=8)
def _get_anthropic_chat_model(model: str) -> ChatAnthropic:
    settings = get_settings()
    return ChatAnthropic(
        model=model,
        api_key=settings.anthropic_api_key,
        max_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        timeout=settings.timeout_sec,
        max_retries=0,
    )


@lru_cache(maxsize=8)
def _get_google_chat_model(model: str) -> ChatGoogleGenerativeAI:
    settings = get_settings()
    return ChatGoogleGenerativeAI(
        model=model,
        google_api_key=settings.gemini_api_key,
        max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        timeout=settings.timeout_sec,
        max_retries=0,
    )


def build_provider_registry(settings: AgentSettings) -> dict[str, AgentProvider]:
    """Provider table keyed by provider id; clients are created on first use."""
    return {
        PROXY_PROVIDER: ProxyChatProvider(get_proxy_client, timeout_sec=settings.timeout_sec),
        GOOGLE_PROVIDER: LangChainChatProvider(GOOGLE_PROVIDER, _get_google_chat_model),
        ANTHROPIC_PROVIDER: LangChainChatProvider(ANTHROPIC_PROVIDER, _get_anthropic_chat_model),
        OPENAI_PROVIDER: OpenAIChatProvider(
            get_openai_client, get_responses_runnable, timeout_sec=settings.timeout_sec
        ),
    }
