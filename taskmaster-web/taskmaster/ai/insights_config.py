from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from taskmaster.config_utils import env_bool, env_first


@dataclass(frozen=True)
class InsightConfig:
    """Config for the text-generation service behind insights, suggestions and coaching.

    Each setting accepts an INSIGHTS_* name and falls back to the generic
    Ollama/API_KEY variable:
    - INSIGHTS_BASE_URL / OLLAMA_BASE_URL
    - INSIGHTS_MODEL / OLLAMA_MODEL
    - INSIGHTS_TEMPERATURE / OLLAMA_TEMPERATURE
    - INSIGHTS_API_KEY / API_KEY (sent as a bearer token for hosted endpoints)
    - INSIGHTS_ENABLED / OLLAMA_ENABLED (false = always use the offline fallbacks)
    """

    base_url: str
    model: str
    temperature: float
    api_key: Optional[str]
    enabled: bool

    DEFAULT_BASE_URL: str = "http://localhost:11434"
    DEFAULT_MODEL: str = "llama3.2"
    DEFAULT_TEMPERATURE: float = 0.4
    DEFAULT_ENABLED: bool = True

    @classmethod
    def from_env(cls) -> "InsightConfig":
        base_url = env_first("INSIGHTS_BASE_URL", "OLLAMA_BASE_URL", default=cls.DEFAULT_BASE_URL)
        model = env_first("INSIGHTS_MODEL", "OLLAMA_MODEL", default=cls.DEFAULT_MODEL)

        raw_temp = env_first("INSIGHTS_TEMPERATURE", "OLLAMA_TEMPERATURE", default=str(cls.DEFAULT_TEMPERATURE))
        try:
            temp = float(raw_temp)
        except Exception:
            temp = cls.DEFAULT_TEMPERATURE

        api_key = env_first("INSIGHTS_API_KEY", "API_KEY")

        if env_first("INSIGHTS_ENABLED") is not None:
            enabled = env_bool("INSIGHTS_ENABLED", cls.DEFAULT_ENABLED)
        else:
            enabled = env_bool("OLLAMA_ENABLED", cls.DEFAULT_ENABLED)

        return cls(base_url=base_url, model=model, temperature=temp, api_key=api_key, enabled=enabled)
