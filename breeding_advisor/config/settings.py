from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "INFO"
    environment: str = "dev"
    # OpenAI advisory provider (disabled when no key is configured)
    openai_api_key: SecretStr | None = None
    advisory_model: str = "gpt-4o"
    advisory_temperature: float = 0.2
    advisory_timeout_seconds: float = 20.0
    # Evaluation history
    history_path: str | None = "ai-history.json"  # empty -> in-memory only
    history_capacity: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("history_capacity")
    @classmethod
    def ensure_capacity_range(cls, value: int) -> int:
        if value < 1 or value > 1000:
            raise ValueError("history_capacity must be between 1 and 1000")
        return value

    @field_validator("advisory_timeout_seconds")
    @classmethod
    def ensure_positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("advisory_timeout_seconds must be positive")
        return value

    @field_validator("history_path")
    @classmethod
    def blank_path_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def advisory_enabled(self) -> bool:
        """True when an OpenAI key is present and non-empty"""
        if self.openai_api_key is None:
            return False
        return bool(self.openai_api_key.get_secret_value().strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
