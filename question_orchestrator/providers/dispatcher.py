"""Single-call dispatch to an LLM provider.

One ``call`` is one HTTPS request to one provider for one purpose. The
request envelope is chosen by the descriptor's payload shape:

- ``gemini``: generateContent REST call made with httpx, API key passed as
  the ``key`` query parameter.
- ``openai_chat``: chat/completions through the OpenAI SDK pointed at the
  provider's base URL (Groq, OpenRouter), bearer-token auth.

Every transport failure is converted to ``TransportError``; the caller
decides whether to move on to the next provider.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..error_classifier import ErrorClassifier
from ..errors import ParseError, TransportError
from ..models import PayloadShape, ProviderId, Purpose
from ..prompts import QUESTION_SYSTEM_PROMPT
from ..text_utils import preview
from .descriptors import ProviderDescriptor

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_TEMPERATURE = 0.8
DEFAULT_QUESTION_MAX_TOKENS = 4000
DEFAULT_EXPLANATION_MAX_TOKENS = 300


class ProviderDispatcher:
    """Performs one request against one provider and returns its text."""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        question_temperature: float = DEFAULT_QUESTION_TEMPERATURE,
        question_max_tokens: int = DEFAULT_QUESTION_MAX_TOKENS,
        explanation_max_tokens: int = DEFAULT_EXPLANATION_MAX_TOKENS,
    ):
        """Initialize the dispatcher.

        Args:
            http_client: Shared async HTTP client (created and owned if omitted)
            question_temperature: Sampling temperature for question batches
            question_max_tokens: Output token cap for question batches
            explanation_max_tokens: Output token cap for explanations
        """
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._openai_clients: Dict[ProviderId, AsyncOpenAI] = {}
        self.question_temperature = question_temperature
        self.question_max_tokens = question_max_tokens
        self.explanation_max_tokens = explanation_max_tokens

    async def call(
        self, descriptor: ProviderDescriptor, purpose: Purpose, prompt: str
    ) -> str:
        """Send a prompt to a provider and return the assistant text.

        Args:
            descriptor: Provider to call
            purpose: Question batch or explanation
            prompt: Prompt text

        Returns:
            Assistant output (empty string if the envelope carried none)

        Raises:
            TransportError: Missing credential, timeout, network failure or
                non-2xx status
            ParseError: 2xx response whose body is not JSON
        """
        if not descriptor.is_configured:
            raise TransportError(
                f"No API key configured for {descriptor.name}",
                provider=descriptor.name,
                classified_error=ErrorClassifier.not_configured(descriptor.name),
            )

        timeout = (
            descriptor.question_timeout
            if purpose == Purpose.QUESTIONS
            else descriptor.explanation_timeout
        )
        logger.debug(
            f"Calling {descriptor.name} ({descriptor.model}) for {purpose.value} "
            f"with timeout {timeout}s"
        )

        if descriptor.shape == PayloadShape.GEMINI:
            return await self._call_gemini(descriptor, purpose, prompt, timeout)
        if descriptor.shape == PayloadShape.OPENAI_CHAT:
            return await self._call_openai_chat(descriptor, purpose, prompt, timeout)
        raise ValueError(f"Unsupported payload shape: {descriptor.shape}")

    async def _call_gemini(
        self,
        descriptor: ProviderDescriptor,
        purpose: Purpose,
        prompt: str,
        timeout: float,
    ) -> str:
        url = f"{descriptor.base_url.rstrip('/')}/models/{descriptor.model}:generateContent"
        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }
        if purpose == Purpose.QUESTIONS:
            body["generationConfig"] = {
                "temperature": self.question_temperature,
                "maxOutputTokens": self.question_max_tokens,
            }

        try:
            response = await self._http_client.post(
                url,
                params={"key": descriptor.api_key},
                json=body,
                headers=descriptor.extra_headers,
                timeout=timeout,
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise self._transport_error(descriptor, e) from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise ParseError(
                f"{descriptor.name} returned a non-JSON body",
                provider=descriptor.name,
                preview=preview(response.text),
            ) from e

        return self._extract_gemini_text(envelope)

    @staticmethod
    def _extract_gemini_text(envelope: Any) -> str:
        """Return ``candidates[0].content.parts[0].text`` or an empty string."""
        try:
            text = envelope["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return ""
        return text if isinstance(text, str) else ""

    async def _call_openai_chat(
        self,
        descriptor: ProviderDescriptor,
        purpose: Purpose,
        prompt: str,
        timeout: float,
    ) -> str:
        client = self._get_openai_client(descriptor)

        messages: List[Dict[str, str]] = []
        params: Dict[str, Any]
        if purpose == Purpose.QUESTIONS:
            messages.append({"role": "system", "content": QUESTION_SYSTEM_PROMPT})
            params = {
                "temperature": self.question_temperature,
                "max_tokens": self.question_max_tokens,
            }
        else:
            params = {"max_tokens": self.explanation_max_tokens}
        messages.append({"role": "user", "content": prompt})

        try:
            response = await client.chat.completions.create(
                model=descriptor.model,
                messages=messages,
                timeout=timeout,
                **params,
            )
        except openai.APIError as e:
            raise self._transport_error(descriptor, e) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _get_openai_client(self, descriptor: ProviderDescriptor) -> AsyncOpenAI:
        """Get or create the SDK client for an OpenAI-compatible provider."""
        client = self._openai_clients.get(descriptor.provider)
        if client is None:
            # No SDK retries; failover moves on to the next provider
            client = AsyncOpenAI(
                api_key=descriptor.api_key,
                base_url=descriptor.base_url,
                max_retries=0,
                default_headers=descriptor.extra_headers or None,
                http_client=self._http_client,
            )
            self._openai_clients[descriptor.provider] = client
        return client

    @staticmethod
    def _transport_error(
        descriptor: ProviderDescriptor, error: Exception
    ) -> TransportError:
        """Classify a transport failure, keeping the API key out of messages."""
        classified = ErrorClassifier.classify_error(error, descriptor.name)
        detail = str(error) or type(error).__name__
        if descriptor.api_key:
            detail = detail.replace(descriptor.api_key, "***")
        return TransportError(
            f"{descriptor.name} request failed: {detail}",
            provider=descriptor.name,
            classified_error=classified,
        )

    async def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        self._openai_clients.clear()
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "ProviderDispatcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
