"""Application service routing generation requests across the fallback chain."""

import logging
from collections.abc import Mapping, Sequence

from agent_api.cancellation import CancellationToken
from agent_api.fallback_chain import FallbackChain, build_fallback_chain
from agent_api.orchestration.base import DispatchOutcome, DispatchRequest, FallbackOrchestrator
from agent_api.providers.base import AgentProvider, ProviderResponse
from agent_api.schemas import GenerateRequest, GenerateResponse, Message, ProviderInfo
from agent_api.settings import AgentSettings

logger = logging.getLogger(__name__)


class AgentFallbackService:
    """Entry point for generation requests.

    The chain is replaced wholesale on reconfiguration; each dispatch reads it
    once, so in-flight calls keep the chain they started with.
    """

    def __init__(self, chain: FallbackChain, orchestrator: FallbackOrchestrator) -> None:
        self._chain = chain
        self._orchestrator = orchestrator

    @classmethod
    def from_settings(
        cls,
        settings: AgentSettings,
        registry: Mapping[str, AgentProvider],
        orchestrator: FallbackOrchestrator,
    ) -> "AgentFallbackService":
        return cls(build_fallback_chain(settings, registry), orchestrator)

    @property
    def chain(self) -> FallbackChain:
        return self._chain

    def reconfigure(self, settings: AgentSettings, registry: Mapping[str, AgentProvider]) -> None:
        chain = build_fallback_chain(settings, registry)
        self._chain = chain
        logger.info("Fallback chain reconfigured", extra={"provider_count": len(chain)})

    def dispatch(self, request: DispatchRequest) -> DispatchOutcome:
        return self._orchestrator.run(request, self._chain)

    def generate_message(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model: str | None = None,
        use_tools: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> ProviderResponse:
        """Dispatch and unwrap: raises FallbackExhaustedError or DispatchCancelledError."""
        request = DispatchRequest(
            system_prompt=system_prompt,
            messages=tuple(messages),
            model=model,
            use_tools=use_tools,
            cancellation=cancellation,
        )
        return self.dispatch(request).unwrap()

    def handle_generate(
        self, request: GenerateRequest, cancellation: CancellationToken | None = None
    ) -> GenerateResponse:
        logger.info(
            "Generate request received",
            extra={"message_count": len(request.messages), "requested_model": request.model},
        )
        outcome = self.dispatch(
            DispatchRequest(
                system_prompt=request.system_prompt,
                messages=tuple(request.messages),
                model=request.model,
                use_tools=request.use_tools,
                cancellation=cancellation,
            )
        )
        response = outcome.unwrap()
        return GenerateResponse(
            message=response.message,
            response_id=response.response_id,
            provider=outcome.provider or "",
            model=outcome.model or response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            duration_seconds=response.duration_seconds,
        )

    def get_default_model(self) -> ProviderInfo | None:
        chain = self._chain
        if not chain:
            return None
        return ProviderInfo(provider=chain[0].provider, model=chain[0].model)

    def get_available_providers(self) -> list[ProviderInfo]:
        return [ProviderInfo(provider=entry.provider, model=entry.model) for entry in self._chain]
