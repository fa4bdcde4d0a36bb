import unittest

import httpx

from agent_api.schemas import ProviderInfo
from agent_api.services.model_catalog import list_models
from agent_api.settings import AgentSettings

PROXY_MODEL_INFO = {
    "data": [
        {"model_name": "local-llama", "litellm_params": {"model": "ollama/llama3.1"}},
        {"model_name": "gemini-flash", "litellm_params": {}},
    ]
}

OLLAMA_TAGS = {"models": [{"name": "llama3.1"}, {"name": "qwen2.5"}]}


def make_client(
    proxy_up: bool, ollama_up: bool, proxy_payload: object = PROXY_MODEL_INFO
) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/model/info":
            if not proxy_up:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=proxy_payload)
        if request.url.path == "/api/tags":
            if not ollama_up:
                return httpx.Response(503)
            return httpx.Response(200, json=OLLAMA_TAGS)
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(handler))


class ModelCatalogTests(unittest.TestCase):
    def test_lists_fallback_then_proxy_models(self) -> None:
        default = ProviderInfo(provider="proxy", model="ollama/llama3.1")

        with make_client(proxy_up=True, ollama_up=True) as client:
            models = list_models(AgentSettings(), default, client)

        self.assertEqual(models[0].provider, "fallback")
        self.assertEqual(models[0].name, "ollama/llama3.1")
        self.assertEqual(models[0].title, "Ollama (with fallback)")
        self.assertEqual(
            [(m.provider, m.name, m.title) for m in models[1:]],
            [
                ("proxy", "ollama/llama3.1", "local-llama"),
                ("proxy", "gemini-flash", "gemini-flash"),
            ],
        )

    def test_falls_back_to_ollama_tags_and_skips_duplicates(self) -> None:
        with make_client(proxy_up=False, ollama_up=True) as client:
            models = list_models(AgentSettings(), None, client)

        names = [m.name for m in models]
        self.assertEqual(names, ["ollama/llama3.1", "ollama/qwen2.5"])
        self.assertEqual(models[1].provider, "proxy")
        self.assertEqual(models[1].context_window, 128000)

    def test_unexpected_proxy_payload_falls_back_to_ollama(self) -> None:
        payload = [{"model_name": "x"}]

        with make_client(proxy_up=True, ollama_up=True, proxy_payload=payload) as client:
            models = list_models(AgentSettings(), None, client)

        self.assertEqual([m.name for m in models], ["ollama/llama3.1", "ollama/qwen2.5"])

    def test_malformed_proxy_entries_are_skipped(self) -> None:
        payload = {
            "data": [
                "not-an-object",
                {"model_name": "broken", "litellm_params": "ollama/x"},
                {"model_name": 42},
            ]
        }

        with make_client(proxy_up=True, ollama_up=True, proxy_payload=payload) as client:
            models = list_models(AgentSettings(), None, client)

        self.assertEqual([(m.provider, m.name) for m in models[1:]], [("proxy", "broken")])

    def test_unreachable_backends_leave_fallback_entry(self) -> None:
        with make_client(proxy_up=False, ollama_up=False) as client:
            with self.assertLogs("agent_api.services.model_catalog", level="WARNING") as logs:
                models = list_models(AgentSettings(), None, client)

        self.assertEqual([m.provider for m in models], ["fallback"])
        self.assertEqual(len(logs.records), 2)

    def test_vendor_catalogs_follow_credentials(self) -> None:
        settings = AgentSettings(gemini_api_key="g", openai_api_key="o")
        default = ProviderInfo(provider="google", model="gemini-2.0-flash-exp")

        with make_client(proxy_up=False, ollama_up=False) as client:
            models = list_models(settings, default, client)

        providers = {m.provider for m in models}
        self.assertEqual(models[0].title, "Google Gemini (with fallback)")
        self.assertIn("openai", providers)
        self.assertIn("google", providers)
        self.assertNotIn("anthropic", providers)


if __name__ == "__main__":
    unittest.main()
