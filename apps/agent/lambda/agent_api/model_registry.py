"""Static model catalogue for the remote vendors."""

from dataclasses import dataclass

from .constants import ANTHROPIC_PROVIDER, GOOGLE_PROVIDER, OPENAI_PROVIDER


@dataclass(frozen=True)
class CatalogModel:
    provider: str
    name: str
    title: str
    context_window: int


ANTHROPIC_MODELS: tuple[CatalogModel, ...] = (
    CatalogModel(ANTHROPIC_PROVIDER, "claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 200_000),
    CatalogModel(ANTHROPIC_PROVIDER, "claude-3-5-haiku-20241022", "Claude 3.5 Haiku", 200_000),
    CatalogModel(ANTHROPIC_PROVIDER, "claude-3-opus-20240229", "Claude 3 Opus", 200_000),
)

OPENAI_MODELS: tuple[CatalogModel, ...] = (
    CatalogModel(OPENAI_PROVIDER, "gpt-4o", "GPT-4o", 128_000),
    CatalogModel(OPENAI_PROVIDER, "gpt-4o-mini", "GPT-4o mini", 128_000),
    CatalogModel(OPENAI_PROVIDER, "gpt-4.1", "GPT-4.1", 1_047_576),
)

GOOGLE_MODELS: tuple[CatalogModel, ...] = (
    CatalogModel(GOOGLE_PROVIDER, "gemini-2.0-flash-exp", "Gemini 2.0 Flash", 1_048_576),
    CatalogModel(GOOGLE_PROVIDER, "gemini-1.5-pro", "Gemini 1.5 Pro", 2_097_152),
    CatalogModel(GOOGLE_PROVIDER, "gemini-1.5-flash", "Gemini 1.5 Flash", 1_048_576),
)

# Appended to the model listing when the vendor's credential is configured.
VENDOR_CATALOGS: dict[str, tuple[CatalogModel, ...]] = {
    ANTHROPIC_PROVIDER: ANTHROPIC_MODELS,
    OPENAI_PROVIDER: OPENAI_MODELS,
    GOOGLE_PROVIDER: GOOGLE_MODELS,
}
