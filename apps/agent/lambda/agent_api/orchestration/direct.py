"""Sequential fallback dispatch orchestration."""

from agent_api.fallback_chain import FallbackChain
from agent_api.model_resolver import resolve_provider_for_model
from agent_api.orchestration.base import (
    DispatchAttempt,
    DispatchOutcome,
    DispatchRequest,
    FallbackOrchestrator,
    ProviderFailure,
    attempt_entry,
    exhausted_outcome,
    succeeded_outcome,
)


class DirectFallbackOrchestrator(FallbackOrchestrator):
    def run(self, request: DispatchRequest, chain: FallbackChain) -> DispatchOutcome:
        attempts: list[DispatchAttempt] = []

        if request.model:
            preferred = resolve_provider_for_model(request.model, chain)
            if preferred is not None:
                response, attempt = attempt_entry(
                    preferred, request, request.model, preferred=True
                )
                attempts.append(attempt)
                if response is not None:
                    return succeeded_outcome(response, attempt, attempts)

        # The preferred provider is walked again here with its own default model.
        failures: list[ProviderFailure] = []
        for entry in chain:
            response, attempt = attempt_entry(entry, request, entry.model, preferred=False)
            attempts.append(attempt)
            if response is not None:
                return succeeded_outcome(response, attempt, attempts)
            failures.append(ProviderFailure(entry.provider, attempt.error or "Unknown error"))

        return exhausted_outcome(failures, attempts)
