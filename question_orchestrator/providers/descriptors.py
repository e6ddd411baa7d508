"""Static descriptions of the LLM backends."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import Settings
from ..models import PayloadShape, ProviderId


@dataclass(frozen=True)
class ProviderDescriptor:
    """Endpoint, credential and envelope shape for one provider.

    Attributes:
        provider: Provider identifier
        shape: Request/response envelope family
        base_url: API base URL (without the method path)
        model: Model name sent with each request
        api_key: Credential; ``None`` means the provider is not configured
        extra_headers: Additional request headers
        question_timeout: Seconds allowed for a question batch call
        explanation_timeout: Seconds allowed for an explanation call
    """

    provider: ProviderId
    shape: PayloadShape
    base_url: str
    model: str
    api_key: Optional[str] = field(default=None, repr=False)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    question_timeout: float = 40.0
    explanation_timeout: float = 20.0

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


def build_provider_descriptors(
    settings: Settings,
) -> Dict[ProviderId, ProviderDescriptor]:
    """Build the descriptor for every known provider from settings.

    Args:
        settings: Application settings

    Returns:
        Mapping of provider id to descriptor
    """
    timeouts = {
        "question_timeout": settings.question_timeout_seconds,
        "explanation_timeout": settings.explanation_timeout_seconds,
    }
    return {
        ProviderId.GEMINI: ProviderDescriptor(
            provider=ProviderId.GEMINI,
            shape=PayloadShape.GEMINI,
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            **timeouts,
        ),
        ProviderId.GROQ: ProviderDescriptor(
            provider=ProviderId.GROQ,
            shape=PayloadShape.OPENAI_CHAT,
            base_url=settings.groq_base_url,
            model=settings.groq_model,
            api_key=settings.groq_api_key,
            **timeouts,
        ),
        ProviderId.OPENROUTER: ProviderDescriptor(
            provider=ProviderId.OPENROUTER,
            shape=PayloadShape.OPENAI_CHAT,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            api_key=settings.openrouter_api_key,
            extra_headers={
                "HTTP-Referer": settings.openrouter_referer,
                "X-Title": settings.openrouter_title,
            },
            **timeouts,
        ),
    }
