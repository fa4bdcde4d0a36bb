"""Model-name to chain-entry resolution.

The rules are string heuristics applied in a fixed order; the first rule that
matches decides. Reordering them changes which provider a request is routed to.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .constants import ANTHROPIC_PROVIDER, GOOGLE_PROVIDER, OPENAI_PROVIDER, PROXY_PROVIDER
from .fallback_chain import ChainEntry


@dataclass(frozen=True)
class ExactMatch:
    """The model equals an entry's default model."""

    def matches(self, model: str, entry: ChainEntry) -> bool:
        return model == entry.model


@dataclass(frozen=True)
class ProviderSubstring:
    """The model name contains an entry's provider id."""

    def matches(self, model: str, entry: ChainEntry) -> bool:
        return entry.provider in model


@dataclass(frozen=True)
class FamilyKeyword:
    """The model name mentions a vendor family keyword mapped to one provider."""

    keywords: tuple[str, ...]
    target: str

    def applies(self, model: str) -> bool:
        return any(keyword in model for keyword in self.keywords)

    def match(self, chain: Sequence[ChainEntry]) -> ChainEntry | None:
        return next((entry for entry in chain if entry.provider == self.target), None)


EntryRule = ExactMatch | ProviderSubstring
ResolutionRule = EntryRule | FamilyKeyword

MODEL_RESOLUTION_RULES: tuple[ResolutionRule, ...] = (
    ExactMatch(),
    ProviderSubstring(),
    FamilyKeyword(("ollama",), PROXY_PROVIDER),
    FamilyKeyword(("gemini", "google"), GOOGLE_PROVIDER),
    FamilyKeyword(("claude", "anthropic"), ANTHROPIC_PROVIDER),
    FamilyKeyword(("gpt", "openai"), OPENAI_PROVIDER),
)


def resolve_provider_for_model(model: str, chain: Sequence[ChainEntry]) -> ChainEntry | None:
    entry_rules = [rule for rule in MODEL_RESOLUTION_RULES if not isinstance(rule, FamilyKeyword)]
    # Entry rules are checked together per entry, so chain position beats rule order.
    for entry in chain:
        if any(rule.matches(model, entry) for rule in entry_rules):
            return entry

    for rule in MODEL_RESOLUTION_RULES:
        # The first family keyword found in the name decides, even when its
        # provider is missing from the chain.
        if isinstance(rule, FamilyKeyword) and rule.applies(model):
            return rule.match(chain)
    return None
