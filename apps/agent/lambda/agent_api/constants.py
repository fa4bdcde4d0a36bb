"""Shared constants and literal types for the agent Lambda."""

from typing import Literal

ProviderId = Literal["proxy", "google", "anthropic", "openai"]

PROXY_PROVIDER: ProviderId = "proxy"
GOOGLE_PROVIDER: ProviderId = "google"
ANTHROPIC_PROVIDER: ProviderId = "anthropic"
OPENAI_PROVIDER: ProviderId = "openai"

# Remote vendors in fallback priority order; the proxy always comes first.
REMOTE_PROVIDER_PRIORITY: tuple[ProviderId, ...] = (
    GOOGLE_PROVIDER,
    ANTHROPIC_PROVIDER,
    OPENAI_PROVIDER,
)

PROVIDER_TITLES: dict[str, str] = {
    PROXY_PROVIDER: "Ollama",
    GOOGLE_PROVIDER: "Google Gemini",
    ANTHROPIC_PROVIDER: "Anthropic",
    OPENAI_PROVIDER: "OpenAI",
}

DEFAULT_PROXY_URL = "http://localhost:4000"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "ollama/llama3.1"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_OPENAI_MODEL = "gpt-4o"

AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "agent-fallback"
DEFAULT_TIMEOUT_SEC = 60
MIN_TIMEOUT_SEC = 5
MAX_TIMEOUT_SEC = 300
DEFAULT_MAX_OUTPUT_TOKENS = 4096
DEFAULT_CONTEXT_WINDOW = 128_000

PROXY_MODEL_INFO_TIMEOUT_SEC = 5.0
OLLAMA_TAGS_TIMEOUT_SEC = 3.0

CANCELLATION_POLL_INTERVAL_SEC = 0.1
DISCONNECT_POLL_INTERVAL_SEC = 0.5

OrchestratorKind = Literal["direct", "langgraph"]
DEFAULT_ORCHESTRATOR: OrchestratorKind = "direct"
