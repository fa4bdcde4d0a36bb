"""Domain-level exceptions for the agent API."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agent_api.orchestration.base import ProviderFailure


class ProviderError(Exception):
    """Raised by a provider handle for any recoverable backend failure.

    Auth errors, rate limits, timeouts and malformed responses all land here so
    the fallback chain can move on to the next provider.
    """

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class DispatchCancelledError(Exception):
    """Raised when the caller aborts a dispatch. Never retried or aggregated."""

    def __init__(self, message: str = "Dispatch cancelled by caller") -> None:
        super().__init__(message)


class FallbackExhaustedError(RuntimeError):
    """Raised when every provider in the fallback chain has failed."""

    def __init__(self, failures: Sequence["ProviderFailure"]) -> None:
        self.failures: tuple["ProviderFailure", ...] = tuple(failures)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        errors = "; ".join(f"{failure.provider}: {failure.message}" for failure in self.failures)
        return f"All fallback providers failed. Errors: {errors}"


class NoProvidersConfiguredError(FallbackExhaustedError):
    """Raised when a dispatch runs against an empty fallback chain."""

    def __init__(self) -> None:
        super().__init__(())

    def _build_message(self) -> str:
        return "No fallback providers configured. Please set at least one provider."
