import unittest

from agent_api.fallback_chain import ChainEntry
from agent_api.model_resolver import (
    MODEL_RESOLUTION_RULES,
    ExactMatch,
    FamilyKeyword,
    ProviderSubstring,
    resolve_provider_for_model,
)


class NullProvider:
    def generate(self, system_prompt, messages, model, use_tools=True, cancellation=None):
        raise AssertionError("resolver must not invoke providers")


def entry(provider: str, model: str) -> ChainEntry:
    return ChainEntry(provider, NullProvider(), model)


class ModelResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proxy = entry("proxy", "ollama/llama3.1")
        self.google = entry("google", "gemini-2.0-flash-exp")
        self.anthropic = entry("anthropic", "claude-3-5-sonnet-20241022")
        self.openai = entry("openai", "gpt-4o")
        self.chain = (self.proxy, self.google, self.anthropic, self.openai)

    def test_exact_default_model_match(self) -> None:
        self.assertIs(resolve_provider_for_model("gpt-4o", self.chain), self.openai)
        self.assertIs(resolve_provider_for_model("ollama/llama3.1", self.chain), self.proxy)

    def test_provider_id_substring_match(self) -> None:
        self.assertIs(resolve_provider_for_model("anthropic/custom", self.chain), self.anthropic)
        self.assertIs(resolve_provider_for_model("proxy-model", self.chain), self.proxy)

    def test_earlier_substring_match_wins_over_later_exact_match(self) -> None:
        proxy = entry("proxy", "m1")
        google = entry("google", "proxy-large")

        resolved = resolve_provider_for_model("proxy-large", (proxy, google))

        self.assertIs(resolved, proxy)

    def test_earlier_exact_match_wins_over_later_substring_match(self) -> None:
        google = entry("google", "anthropic-compatible")
        anthropic = entry("anthropic", "claude-3-opus")

        resolved = resolve_provider_for_model("anthropic-compatible", (google, anthropic))

        self.assertIs(resolved, google)

    def test_substring_match_wins_over_family_keyword(self) -> None:
        # "gpt" would point at openai, but the provider id "google" appears first
        resolved = resolve_provider_for_model("google/gpt-oss", self.chain)

        self.assertIs(resolved, self.google)

    def test_family_keywords(self) -> None:
        self.assertIs(resolve_provider_for_model("ollama/qwen2.5", self.chain), self.proxy)
        self.assertIs(resolve_provider_for_model("gemini-1.5-pro", self.chain), self.google)
        self.assertIs(resolve_provider_for_model("claude-3-opus", self.chain), self.anthropic)
        self.assertIs(resolve_provider_for_model("gpt-4.1-mini", self.chain), self.openai)

    def test_family_keyword_order_is_fixed(self) -> None:
        self.assertIs(resolve_provider_for_model("gemini-vs-gpt", self.chain), self.google)
        self.assertIs(resolve_provider_for_model("claude-gpt-merge", self.chain), self.anthropic)

    def test_family_target_missing_from_chain_resolves_to_none(self) -> None:
        chain = (self.proxy, self.google)

        self.assertIsNone(resolve_provider_for_model("claude-3-opus", chain))

    def test_unknown_model_resolves_to_none(self) -> None:
        self.assertIsNone(resolve_provider_for_model("mistral-large", self.chain))
        self.assertIsNone(resolve_provider_for_model("gpt-4o", ()))

    def test_resolution_is_deterministic(self) -> None:
        for model in ("gpt-4o", "gemini-pro", "claude", "mystery", "ollama/x"):
            first = resolve_provider_for_model(model, self.chain)
            for _ in range(5):
                self.assertIs(resolve_provider_for_model(model, self.chain), first)

    def test_rule_list_order(self) -> None:
        self.assertEqual(
            MODEL_RESOLUTION_RULES,
            (
                ExactMatch(),
                ProviderSubstring(),
                FamilyKeyword(("ollama",), "proxy"),
                FamilyKeyword(("gemini", "google"), "google"),
                FamilyKeyword(("claude", "anthropic"), "anthropic"),
                FamilyKeyword(("gpt", "openai"), "openai"),
            ),
        )


if __name__ == "__main__":
    unittest.main()
