"""Configuration management for the question orchestrator."""

from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ProviderId


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    env: str = "development"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False

    # Gemini (generateContent API, key passed as query parameter)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Groq (OpenAI-compatible chat/completions)
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.3-70b-versatile"
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # OpenRouter (OpenAI-compatible chat/completions)
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "qwen/qwen-2.5-7b-instruct"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_referer: str = "https://arphysicslab.com"
    openrouter_title: str = "AR Physics Lab"

    # Failover ordering
    provider_priority: List[ProviderId] = [
        ProviderId.GEMINI,
        ProviderId.GROQ,
        ProviderId.OPENROUTER,
    ]
    privileged_start_provider: ProviderId = ProviderId.GEMINI
    default_start_provider: ProviderId = ProviderId.GROQ

    # Request tuning
    question_timeout_seconds: float = 40.0
    explanation_timeout_seconds: float = 20.0
    question_temperature: float = 0.8
    question_max_tokens: int = 4000
    explanation_max_tokens: int = 300

    # Finalizer defaults
    default_points: int = 10
    default_time_limit: int = 60
    anonymous_author_id: str = "AI"

    @field_validator("provider_priority")
    @classmethod
    def validate_provider_priority(cls, v: List[ProviderId]) -> List[ProviderId]:
        """Priority list must be non-empty and free of duplicates."""
        if not v:
            raise ValueError("provider_priority must name at least one provider")
        if len(set(v)) != len(v):
            raise ValueError("provider_priority must not contain duplicates")
        return v

    @field_validator("question_timeout_seconds", "explanation_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeouts must be positive."""
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @model_validator(mode="after")
    def validate_start_providers(self) -> "Settings":
        """Start providers must be members of the priority list."""
        for name in ("privileged_start_provider", "default_start_provider"):
            provider = getattr(self, name)
            if provider not in self.provider_priority:
                raise ValueError(
                    f"{name}={provider.value} is not in provider_priority"
                )
        return self


# Global settings instance
settings = Settings()
