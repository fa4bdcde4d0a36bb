"""Agent API backend using FastAPI + Mangum for AWS Lambda."""

import asyncio
import logging
from functools import lru_cache

import httpx
from fastapi import APIRouter, FastAPI, HTTPException, Request
from mangum import Mangum

from agent_api.cancellation import CancellationToken
from agent_api.constants import DISCONNECT_POLL_INTERVAL_SEC
from agent_api.errors import DispatchCancelledError, FallbackExhaustedError
from agent_api.infra.runtime import (
    build_provider_registry,
    ensure_langsmith_configured,
    flush_langsmith_traces,
    get_settings,
)
from agent_api.orchestration.base import FallbackOrchestrator
from agent_api.orchestration.direct import DirectFallbackOrchestrator
from agent_api.orchestration.langgraph_flow import LangGraphFallbackOrchestrator
from agent_api.schemas import GenerateRequest, GenerateResponse, ModelMetadata, ProvidersResponse
from agent_api.services.agent_service import AgentFallbackService
from agent_api.services.model_catalog import list_models

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Non-standard "client closed request" status used for caller-side aborts.
CANCELLED_STATUS_CODE = 499

app = FastAPI()
router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_agent_service() -> AgentFallbackService:
    settings = get_settings()
    orchestrator: FallbackOrchestrator
    if settings.orchestrator == "langgraph":
        orchestrator = LangGraphFallbackOrchestrator()
    else:
        orchestrator = DirectFallbackOrchestrator()
    return AgentFallbackService.from_settings(
        settings, build_provider_registry(settings), orchestrator
    )


async def cancel_on_disconnect(request: Request, cancellation: CancellationToken) -> None:
    """Fire the token once the client goes away."""
    while not cancellation.cancelled:
        if await request.is_disconnected():
            cancellation.cancel("Client disconnected")
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL_SEC)


def _handle_generate(payload: GenerateRequest, cancellation: CancellationToken) -> GenerateResponse:
    ensure_langsmith_configured()
    return get_agent_service().handle_generate(payload, cancellation)


@router.post("/generate", response_model=GenerateResponse)
async def generate(payload: GenerateRequest, request: Request) -> GenerateResponse:
    """Route the request across the provider fallback chain."""
    cancellation = CancellationToken()
    watcher = asyncio.create_task(cancel_on_disconnect(request, cancellation))
    try:
        return await asyncio.to_thread(_handle_generate, payload, cancellation)
    except DispatchCancelledError as e:
        raise HTTPException(status_code=CANCELLED_STATUS_CODE, detail=str(e)) from e
    except FallbackExhaustedError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except Exception as e:
        logger.exception("Generate request failed")
        raise HTTPException(status_code=502, detail=str(e)) from e
    finally:
        watcher.cancel()
        flush_langsmith_traces()


@router.get("/providers", response_model=ProvidersResponse)
def providers() -> ProvidersResponse:
    """Current routing state: chain head and the whole chain."""
    service = get_agent_service()
    return ProvidersResponse(
        default=service.get_default_model(),
        available=service.get_available_providers(),
    )


@router.get("/models", response_model=list[ModelMetadata])
def models() -> list[ModelMetadata]:
    service = get_agent_service()
    with httpx.Client() as client:
        return list_models(get_settings(), service.get_default_model(), client)


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
