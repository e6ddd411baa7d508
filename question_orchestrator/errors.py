"""Failure types raised while talking to LLM providers.

Per-provider failures (``TransportError``, ``ParseError``, ``EmptyResult``)
never leave the orchestrator; they mark an attempt as failed so the next
provider in the sequence is tried. ``AllProvidersExhausted`` is the terminal
failure once the whole sequence has been walked.
"""

from typing import List, Optional

from .error_classifier import ClassifiedError
from .models import ProviderAttempt, Purpose


class ProviderError(Exception):
    """Base class for a failed attempt against a single provider.

    Attributes:
        provider: Provider name, when known
        message: Human-readable description
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class TransportError(ProviderError):
    """Non-2xx status, timeout, network failure, or missing credentials."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        classified_error: Optional[ClassifiedError] = None,
    ):
        self.classified_error = classified_error
        super().__init__(message, provider)


class ParseError(ProviderError):
    """Response text could not be reduced to the expected structure.

    Attributes:
        preview: Leading slice of the offending text for diagnosis
    """

    def __init__(
        self, message: str, provider: Optional[str] = None, preview: str = ""
    ):
        self.preview = preview
        super().__init__(message, provider)


class EmptyResult(ProviderError):
    """Response was well-formed but carried nothing usable."""


class AllProvidersExhausted(Exception):
    """Every provider in the failover sequence failed."""

    def __init__(self, purpose: Purpose, attempts: List[ProviderAttempt]):
        self.purpose = purpose
        self.attempts = attempts
        tried = ", ".join(a.provider.value for a in attempts) or "none"
        super().__init__(
            f"All providers failed for {purpose.value} (tried: {tried})"
        )
