"""Environment-driven settings read once when the fallback chain is built."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .constants import (
    AWS_REGION,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_ORCHESTRATOR,
    DEFAULT_PROXY_URL,
    DEFAULT_TIMEOUT_SEC,
    MAX_TIMEOUT_SEC,
    MIN_TIMEOUT_SEC,
    OrchestratorKind,
)

logger = logging.getLogger(__name__)

ParameterReader = Callable[[str], str | None]


@dataclass(frozen=True)
class AgentSettings:
    proxy_url: str = DEFAULT_PROXY_URL
    proxy_url_configured: bool = False
    proxy_api_key: str | None = None
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    ollama_url: str = DEFAULT_OLLAMA_URL
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    timeout_sec: int = DEFAULT_TIMEOUT_SEC
    orchestrator: OrchestratorKind = DEFAULT_ORCHESTRATOR
    aws_region: str = AWS_REGION

    def credential_for(self, provider: str) -> str | None:
        return {
            "google": self.gemini_api_key,
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }.get(provider)

    def model_for(self, provider: str) -> str | None:
        return {
            "proxy": self.ollama_model,
            "google": self.gemini_model,
            "anthropic": self.anthropic_model,
            "openai": self.openai_model,
        }.get(provider)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str], read_parameter: ParameterReader | None = None
    ) -> "AgentSettings":
        """Build settings from an environment mapping.

        A credential left unset falls back to the SSM parameter named by
        ``<NAME>_PARAMETER_NAME`` when ``read_parameter`` is supplied.
        """

        def _get(name: str) -> str | None:
            value = (environ.get(name) or "").strip()
            return value or None

        def _secret(name: str) -> str | None:
            value = _get(name)
            if value or read_parameter is None:
                return value
            parameter_name = _get(f"{name}_PARAMETER_NAME")
            if not parameter_name:
                return None
            return read_parameter(parameter_name)

        proxy_url = _get("LLM_PROXY_URL")
        return cls(
            proxy_url=(proxy_url or DEFAULT_PROXY_URL).rstrip("/"),
            proxy_url_configured=proxy_url is not None,
            proxy_api_key=_secret("LLM_PROXY_API_KEY"),
            ollama_model=_get("OLLAMA_MODEL") or DEFAULT_OLLAMA_MODEL,
            ollama_url=(_get("OLLAMA_URL") or DEFAULT_OLLAMA_URL).rstrip("/"),
            gemini_api_key=_secret("GEMINI_API_KEY"),
            gemini_model=_get("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            anthropic_api_key=_secret("ANTHROPIC_API_KEY"),
            anthropic_model=_get("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            openai_api_key=_secret("OPENAI_API_KEY"),
            openai_model=_get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            timeout_sec=_parse_timeout(_get("LLM_TIMEOUT_SEC")),
            orchestrator=_parse_orchestrator(_get("AGENT_ORCHESTRATOR")),
            aws_region=_get("AWS_REGION") or AWS_REGION,
        )


def _parse_timeout(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_TIMEOUT_SEC
    try:
        return max(MIN_TIMEOUT_SEC, min(MAX_TIMEOUT_SEC, int(raw)))
    except ValueError:
        logger.warning("Ignoring invalid LLM_TIMEOUT_SEC", extra={"value": raw})
        return DEFAULT_TIMEOUT_SEC


def _parse_orchestrator(raw: str | None) -> OrchestratorKind:
    if raw is None:
        return DEFAULT_ORCHESTRATOR
    value = raw.lower()
    if value == "langgraph":
        return "langgraph"
    if value != "direct":
        logger.warning("Unknown AGENT_ORCHESTRATOR; using direct", extra={"value": raw})
    return "direct"
