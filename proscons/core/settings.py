from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from proscons.core.providers import DEFAULT_MODELS, ProviderConfig


def _load_yaml_config() -> dict:
    root = Path(__file__).resolve().parents[2]  # project root
    cfg_path = root / "config.yaml"
    if not cfg_path.exists():
        return {}
    with open(cfg_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _yaml_overrides(cfg: dict) -> dict[str, Any]:
    """Flatten the config.yaml sections into Settings field names.

    Only keys actually present are returned so the environment still wins
    for anything the file leaves out.
    """
    llm = cfg.get("llm") or {}
    app = cfg.get("app") or {}

    mapping = {
        "llm_models": llm.get("models"),
        "llm_stream": llm.get("stream"),
        "llm_request_timeout_s": llm.get("request_timeout_s"),
        "app_title": app.get("title"),
        "app_referer": app.get("referer"),
        "log_level": app.get("log_level"),
    }
    return {k: v for k, v in mapping.items() if v is not None}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # LLM
    llm_models: list[ProviderConfig] = list(DEFAULT_MODELS)
    llm_stream: bool = True
    llm_request_timeout_s: Optional[float] = None

    # API keys (optional; a missing key only disables that provider)
    OPENROUTER_API_KEY: Optional[str] = None
    MISTRAL_API_KEY: Optional[str] = None

    # App
    app_title: str = "Pros & Cons App"
    app_referer: str = "https://pros-cons.vercel.app"
    log_level: str = "INFO"

    def __init__(self, **kwargs):
        cfg = _load_yaml_config()
        super().__init__(**{**_yaml_overrides(cfg), **kwargs})

    @property
    def provider_configs(self) -> tuple[ProviderConfig, ...]:
        return tuple(self.llm_models)

    def api_key_for(self, cfg: ProviderConfig) -> Optional[str]:
        key = getattr(self, cfg.endpoint.api_key_field, None)
        return key or None

    def has_any_credentials(self) -> bool:
        return any(self.api_key_for(c) for c in self.provider_configs)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
