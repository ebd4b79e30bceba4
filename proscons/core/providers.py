from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ProviderEndpoint:
    name: str
    api_url: str
    api_key_field: str
    # OpenRouter's free tier wants HTTP-Referer / X-Title on every call
    attribution: bool = False


PROVIDER_ENDPOINTS: dict[str, ProviderEndpoint] = {
    "openrouter": ProviderEndpoint(
        name="openrouter",
        api_url="https://openrouter.ai/api/v1/chat/completions",
        api_key_field="OPENROUTER_API_KEY",
        attribution=True,
    ),
    "mistral": ProviderEndpoint(
        name="mistral",
        api_url="https://api.mistral.ai/v1/chat/completions",
        api_key_field="MISTRAL_API_KEY",
    ),
}


class ProviderConfig(BaseModel):
    """One row of the provider priority table (provider + model id)."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider: str
    model_id: str = Field(validation_alias=AliasChoices("model", "model_id"))

    @field_validator("provider")
    @classmethod
    def _known_provider(cls, v: str) -> str:
        name = (v or "").lower().strip()
        if name not in PROVIDER_ENDPOINTS:
            raise ValueError(
                f"Unsupported llm provider: {v}. Use one of: {', '.join(PROVIDER_ENDPOINTS)}"
            )
        return name

    @property
    def endpoint(self) -> ProviderEndpoint:
        return PROVIDER_ENDPOINTS[self.provider]


DEFAULT_MODELS: tuple[ProviderConfig, ...] = (
    ProviderConfig(provider="openrouter", model="tngtech/deepseek-r1t2-chimera:free"),
    ProviderConfig(provider="mistral", model="mistral-small-latest"),
)
