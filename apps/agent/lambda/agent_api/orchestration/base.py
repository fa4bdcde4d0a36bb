"""Dispatch request/outcome types and the per-attempt step shared by orchestrators."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from agent_api.cancellation import CancellationToken
from agent_api.errors import DispatchCancelledError, FallbackExhaustedError, NoProvidersConfiguredError
from agent_api.fallback_chain import ChainEntry, FallbackChain
from agent_api.providers.base import ProviderResponse
from agent_api.schemas import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchRequest:
    system_prompt: str
    messages: tuple[Message, ...]
    model: str | None = None
    use_tools: bool = True
    cancellation: CancellationToken | None = None


@dataclass(frozen=True)
class ProviderFailure:
    provider: str
    message: str


@dataclass(frozen=True)
class DispatchAttempt:
    provider: str
    model: str
    preferred: bool
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DispatchOutcome:
    response: ProviderResponse | None
    provider: str | None = None
    model: str | None = None
    failures: tuple[ProviderFailure, ...] = ()
    attempts: tuple[DispatchAttempt, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.response is not None

    def unwrap(self) -> ProviderResponse:
        """Return the response or raise the combined failure."""
        if self.response is not None:
            return self.response
        # Every chain attempt either succeeds or records a failure, so no
        # failures means the chain was empty.
        if not self.failures:
            raise NoProvidersConfiguredError()
        raise FallbackExhaustedError(self.failures)


class FallbackOrchestrator(Protocol):
    def run(self, request: DispatchRequest, chain: FallbackChain) -> DispatchOutcome:
        """Route the request across the chain until one provider succeeds."""


def attempt_entry(
    entry: ChainEntry, request: DispatchRequest, model: str, *, preferred: bool
) -> tuple[ProviderResponse | None, DispatchAttempt]:
    """Invoke one provider; cancellation propagates, any other failure is returned."""
    cancellation = request.cancellation
    if cancellation is not None:
        cancellation.raise_if_cancelled()

    logger.debug(
        "Attempting to generate message",
        extra={"provider": entry.provider, "model": model, "preferred": preferred},
    )
    try:
        response = entry.service.generate(
            request.system_prompt,
            request.messages,
            model,
            request.use_tools,
            cancellation,
        )
    except DispatchCancelledError:
        logger.info("Dispatch cancelled", extra={"provider": entry.provider, "model": model})
        raise
    except Exception as exc:
        if cancellation is not None and cancellation.cancelled:
            logger.info("Dispatch cancelled", extra={"provider": entry.provider, "model": model})
            raise DispatchCancelledError() from exc
        message = str(exc) or "Unknown error"
        if preferred:
            logger.warning(
                "Failed to use requested model; falling back to chain",
                extra={"provider": entry.provider, "model": model, "error": message},
            )
        else:
            logger.warning(
                "Provider failed; trying next provider",
                extra={"provider": entry.provider, "model": model, "error": message},
            )
        return None, DispatchAttempt(entry.provider, model, preferred, error=message)

    logger.info(
        "Successfully generated message",
        extra={"provider": entry.provider, "model": model, "preferred": preferred},
    )
    return response, DispatchAttempt(entry.provider, model, preferred)


def succeeded_outcome(
    response: ProviderResponse, attempt: DispatchAttempt, attempts: Sequence[DispatchAttempt]
) -> DispatchOutcome:
    return DispatchOutcome(
        response=response,
        provider=attempt.provider,
        model=attempt.model,
        attempts=tuple(attempts),
    )


def exhausted_outcome(
    failures: Sequence[ProviderFailure], attempts: Sequence[DispatchAttempt]
) -> DispatchOutcome:
    outcome = DispatchOutcome(response=None, failures=tuple(failures), attempts=tuple(attempts))
    if failures:
        logger.error(str(FallbackExhaustedError(outcome.failures)))
    else:
        logger.error(str(NoProvidersConfiguredError()))
    return outcome
