"""LangGraph-based fallback dispatch orchestration."""

from typing import Literal, NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from agent_api.fallback_chain import ChainEntry, FallbackChain
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
from agent_api.providers.base import ProviderResponse

# resolve + preferred attempt + one step per chain entry, plus headroom
_FIXED_GRAPH_STEPS = 5


class FallbackGraphState(TypedDict):
    request: DispatchRequest
    chain: FallbackChain
    index: int
    failures: list[ProviderFailure]
    attempts: list[DispatchAttempt]
    preferred: NotRequired[ChainEntry | None]
    response: NotRequired[ProviderResponse | None]


class LangGraphFallbackOrchestrator(FallbackOrchestrator):
    def __init__(self) -> None:
        graph = StateGraph(FallbackGraphState)
        graph.add_node("resolve_preferred", self._resolve_preferred)
        graph.add_node("attempt_preferred", self._attempt_preferred)
        graph.add_node("attempt_chain", self._attempt_chain)
        graph.add_edge(START, "resolve_preferred")
        graph.add_conditional_edges("resolve_preferred", self._after_resolve)
        graph.add_conditional_edges("attempt_preferred", self._after_attempt)
        graph.add_conditional_edges("attempt_chain", self._after_attempt)
        self._graph = graph.compile()

    def _resolve_preferred(self, state: FallbackGraphState) -> dict[str, ChainEntry | None]:
        model = state["request"].model
        if not model:
            return {"preferred": None}
        return {"preferred": resolve_provider_for_model(model, state["chain"])}

    def _attempt_preferred(self, state: FallbackGraphState) -> dict[str, object]:
        entry = state.get("preferred")
        model = state["request"].model
        if entry is None or not model:
            raise RuntimeError("Preferred attempt scheduled without a resolved provider")
        response, attempt = attempt_entry(entry, state["request"], model, preferred=True)
        return {"response": response, "attempts": [*state["attempts"], attempt]}

    def _attempt_chain(self, state: FallbackGraphState) -> dict[str, object]:
        index = state["index"]
        entry = state["chain"][index]
        response, attempt = attempt_entry(entry, state["request"], entry.model, preferred=False)
        update: dict[str, object] = {
            "index": index + 1,
            "response": response,
            "attempts": [*state["attempts"], attempt],
        }
        if response is None:
            failure = ProviderFailure(entry.provider, attempt.error or "Unknown error")
            update["failures"] = [*state["failures"], failure]
        return update

    def _after_resolve(
        self, state: FallbackGraphState
    ) -> Literal["attempt_preferred", "attempt_chain", "__end__"]:
        if state.get("preferred") is not None:
            return "attempt_preferred"
        return "attempt_chain" if state["chain"] else END

    def _after_attempt(self, state: FallbackGraphState) -> Literal["attempt_chain", "__end__"]:
        if state.get("response") is not None:
            return END
        return "attempt_chain" if state["index"] < len(state["chain"]) else END

    def run(self, request: DispatchRequest, chain: FallbackChain) -> DispatchOutcome:
        initial_state: FallbackGraphState = {
            "request": request,
            "chain": chain,
            "index": 0,
            "failures": [],
            "attempts": [],
        }
        result = cast(
            "FallbackGraphState",
            self._graph.invoke(
                initial_state, config={"recursion_limit": len(chain) + _FIXED_GRAPH_STEPS}
            ),
        )
        attempts = result.get("attempts", [])
        response = result.get("response")
        if response is not None:
            return succeeded_outcome(response, attempts[-1], attempts)
        return exhausted_outcome(result.get("failures", []), attempts)
