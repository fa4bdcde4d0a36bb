"""Model listing: fallback default, LiteLLM proxy models, Ollama tags and vendor catalogues."""

import logging
from typing import Any

import httpx

from agent_api.constants import (
    DEFAULT_CONTEXT_WINDOW,
    OLLAMA_TAGS_TIMEOUT_SEC,
    PROVIDER_TITLES,
    PROXY_MODEL_INFO_TIMEOUT_SEC,
    PROXY_PROVIDER,
)
from agent_api.model_registry import VENDOR_CATALOGS
from agent_api.schemas import ModelMetadata, ProviderInfo
from agent_api.settings import AgentSettings

logger = logging.getLogger(__name__)


def list_models(
    settings: AgentSettings, default: ProviderInfo | None, client: httpx.Client
) -> list[ModelMetadata]:
    """List the fallback entry, proxy models and configured vendor catalogues.

    Ollama tags are only consulted when the proxy listing fails, which includes
    non-2xx replies and payloads that are not the expected JSON shape.
    """
    provider = default.provider if default else PROXY_PROVIDER
    models = [
        ModelMetadata(
            provider="fallback",
            name=default.model if default else settings.ollama_model,
            title=f"{PROVIDER_TITLES.get(provider, provider)} (with fallback)",
            context_window=DEFAULT_CONTEXT_WINDOW,
        )
    ]

    try:
        models.extend(fetch_proxy_models(settings, client))
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(
            "Could not fetch models from LiteLLM proxy",
            extra={"proxy_url": settings.proxy_url, "error": str(exc)},
        )
        try:
            ollama_models = fetch_ollama_models(settings, client)
        except (httpx.HTTPError, ValueError) as ollama_exc:
            logger.warning(
                "Could not fetch models from Ollama",
                extra={"ollama_url": settings.ollama_url, "error": str(ollama_exc)},
            )
        else:
            for model in ollama_models:
                if not any(m.name == model.name or m.title == model.title for m in models):
                    models.append(model)

    for vendor, catalog in VENDOR_CATALOGS.items():
        if not settings.credential_for(vendor):
            continue
        models.extend(
            ModelMetadata(
                provider=entry.provider,
                name=entry.name,
                title=entry.title,
                context_window=entry.context_window,
            )
            for entry in catalog
        )
    return models


def fetch_proxy_models(settings: AgentSettings, client: httpx.Client) -> list[ModelMetadata]:
    response = client.get(
        f"{settings.proxy_url}/model/info", timeout=PROXY_MODEL_INFO_TIMEOUT_SEC
    )
    response.raise_for_status()
    payload: Any = response.json()
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise ValueError("Unexpected /model/info payload")

    models: list[ModelMetadata] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        params = item.get("litellm_params")
        if not isinstance(params, dict):
            params = {}
        model_name = item.get("model_name")
        if not isinstance(model_name, str):
            model_name = None
        name = params.get("model") or model_name
        if not isinstance(name, str) or not name:
            continue
        models.append(
            ModelMetadata(
                provider=PROXY_PROVIDER,
                name=name,
                title=model_name or name or "Unknown",
                context_window=DEFAULT_CONTEXT_WINDOW,
            )
        )
    return models


def fetch_ollama_models(settings: AgentSettings, client: httpx.Client) -> list[ModelMetadata]:
    response = client.get(f"{settings.ollama_url}/api/tags", timeout=OLLAMA_TAGS_TIMEOUT_SEC)
    response.raise_for_status()
    payload: Any = response.json()
    tags = payload.get("models") if isinstance(payload, dict) else None
    if not isinstance(tags, list):
        raise ValueError("Unexpected /api/tags payload")
    return [
        ModelMetadata(
            provider=PROXY_PROVIDER,
            name=f"ollama/{tag['name']}",
            title=tag["name"],
            context_window=DEFAULT_CONTEXT_WINDOW,
        )
        for tag in tags
        if isinstance(tag, dict) and isinstance(tag.get("name"), str) and tag["name"]
    ]
