"""Pydantic schemas for the agent API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    system_prompt: str = Field(default="", alias="systemPrompt")
    messages: list[Message] = Field(min_length=1)
    model: str | None = None
    use_tools: bool = Field(default=True, alias="useTools")

    @field_validator("model")
    @classmethod
    def normalize_model(cls, model: str | None) -> str | None:
        if model is None:
            return None
        return model.strip() or None


class GenerateResponse(BaseModel):
    message: str
    response_id: str = Field(serialization_alias="responseId")
    provider: str
    model: str
    input_tokens: int | None = Field(default=None, serialization_alias="inputTokens")
    output_tokens: int | None = Field(default=None, serialization_alias="outputTokens")
    duration_seconds: float = Field(serialization_alias="durationSeconds")


class ProviderInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str
    model: str


class ProvidersResponse(BaseModel):
    default: ProviderInfo | None
    available: list[ProviderInfo]


class ModelMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str
    name: str
    title: str
    context_window: int = Field(alias="contextWindow")
