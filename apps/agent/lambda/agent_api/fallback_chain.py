"""Ordered provider fallback chain built once from settings and the provider table."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import PROXY_PROVIDER, REMOTE_PROVIDER_PRIORITY
from .providers.base import AgentProvider
from .settings import AgentSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainEntry:
    provider: str
    service: AgentProvider
    model: str


FallbackChain = tuple[ChainEntry, ...]


def build_fallback_chain(
    settings: AgentSettings, registry: Mapping[str, AgentProvider]
) -> FallbackChain:
    """Build the fallback chain: proxy first, then each configured remote vendor.

    The proxy is included whenever the registry has it, even without an explicit
    proxy URL (the local default endpoint is assumed). Remote vendors need both a
    credential and a registered handle.
    """
    entries: list[ChainEntry] = []

    proxy = registry.get(PROXY_PROVIDER)
    if proxy is not None:
        entries.append(ChainEntry(PROXY_PROVIDER, proxy, settings.ollama_model))
        logger.info(
            "Configured Ollama as primary provider",
            extra={
                "provider": PROXY_PROVIDER,
                "model": settings.ollama_model,
                "proxy_url": settings.proxy_url,
                "proxy_url_configured": settings.proxy_url_configured,
            },
        )
    else:
        logger.warning("Proxy service not available; Ollama will not be used as primary provider")

    for provider in REMOTE_PROVIDER_PRIORITY:
        service = registry.get(provider)
        if not settings.credential_for(provider) or service is None:
            if provider == "google":
                logger.warning("Google Gemini API key not configured; not available as fallback")
            continue
        model = settings.model_for(provider)
        if model is None:
            continue
        entries.append(ChainEntry(provider, service, model))
        logger.info(
            "Configured fallback provider",
            extra={"provider": provider, "model": model, "position": len(entries)},
        )

    chain: FallbackChain = tuple(entries)
    if not chain:
        logger.warning("No fallback providers configured. Please set at least one provider.")
    else:
        logger.info(
            "Initialized fallback chain",
            extra={"provider_count": len(chain), "providers": [e.provider for e in chain]},
        )
    return chain
