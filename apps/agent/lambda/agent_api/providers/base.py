"""Provider interfaces and shared response model."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from agent_api.cancellation import CancellationToken
from agent_api.schemas import Message


@dataclass(frozen=True)
class ProviderResponse:
    message: str
    response_id: str
    model: str
    input_tokens: int | None
    output_tokens: int | None
    duration_seconds: float
    tool_calls: tuple[dict[str, Any], ...] = field(default_factory=tuple)


class AgentProvider(Protocol):
    def generate(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        model: str,
        use_tools: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> ProviderResponse:
        """Generate one completion.

        Raises ProviderError for backend failures (including its own timeout) and
        DispatchCancelledError when the cancellation token fires.
        """
        ...
