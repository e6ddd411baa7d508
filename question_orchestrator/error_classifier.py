"""Error classification for LLM provider failures.

Classifies transport-level failures from the different provider families
(httpx for Gemini, the OpenAI SDK for chat/completions backends) into a
common category and severity, which drives how loudly a failed attempt is
logged.
"""

import re
from enum import Enum
from typing import Optional

import httpx
import openai


class ErrorCategory(Enum):
    """Categories of API errors."""

    BILLING_QUOTA = "billing_quota"  # Insufficient funds, quota exceeded
    RATE_LIMIT = "rate_limit"  # Rate limit/throttling errors
    AUTHENTICATION = "authentication"  # API key invalid or expired
    INVALID_REQUEST = "invalid_request"  # Malformed request or invalid parameters
    SERVER_ERROR = "server_error"  # Provider server errors (5xx)
    NETWORK_ERROR = "network_error"  # Connection/timeout errors
    MODEL_ERROR = "model_error"  # Model not found or unavailable
    NOT_CONFIGURED = "not_configured"  # No credential configured locally
    UNKNOWN = "unknown"  # Unclassified errors


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    CRITICAL = "critical"  # Requires immediate attention (e.g., billing)
    HIGH = "high"  # Important but not blocking (e.g., rate limits)
    MEDIUM = "medium"  # Should be addressed (e.g., invalid requests)
    LOW = "low"  # Informational (e.g., temporary network issues)


class ClassifiedError:
    """A classified API error with category and severity."""

    def __init__(
        self,
        category: ErrorCategory,
        severity: ErrorSeverity,
        provider: str,
        original_error: str,
        message: str,
        is_retryable: bool = False,
        status_code: Optional[int] = None,
    ):
        """Initialize classified error.

        Args:
            category: Error category
            severity: Error severity level
            provider: Provider name (gemini, groq, openrouter)
            original_error: Original error type name
            message: Human-readable error message
            is_retryable: Whether the error is transient
            status_code: HTTP status code, when the provider answered
        """
        self.category = category
        self.severity = severity
        self.provider = provider
        self.original_error = original_error
        self.message = message
        self.is_retryable = is_retryable
        self.status_code = status_code

    def __str__(self) -> str:
        """String representation of classified error."""
        return (
            f"[{self.severity.value.upper()}] {self.provider}: "
            f"{self.category.value} - {self.message}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "provider": self.provider,
            "original_error": self.original_error,
            "message": self.message,
            "is_retryable": self.is_retryable,
            "status_code": self.status_code,
        }


class ErrorClassifier:
    """Classifies API errors from the supported LLM providers."""

    # Patterns for billing/quota errors
    BILLING_PATTERNS = [
        r"insufficient.*funds",
        r"quota.*exceeded",
        r"insufficient.*quota",
        r"credit.*balance",
        r"payment.*required",
        r"resource.*exhausted",
    ]

    # Patterns for rate limit errors
    RATE_LIMIT_PATTERNS = [
        r"rate.*limit",
        r"too.*many.*requests",
        r"throttl",
    ]

    # Patterns for authentication errors
    AUTH_PATTERNS = [
        r"invalid.*api.*key",
        r"api.*key.*not.*valid",
        r"authentication.*failed",
        r"unauthorized",
        r"permission.*denied",
    ]

    # Patterns for model errors
    MODEL_PATTERNS = [
        r"model.*not.*found",
        r"invalid.*model",
        r"model.*decommissioned",
        r"model.*unavailable",
    ]

    # Patterns for network errors
    NETWORK_PATTERNS = [
        r"connection.*error",
        r"timed?.*out",
        r"network.*error",
        r"connection.*refused",
        r"connection.*reset",
    ]

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        """Extract the HTTP status code from an httpx or OpenAI SDK error."""
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code
        if isinstance(error, openai.APIStatusError):
            return error.status_code
        return None

    @staticmethod
    def classify_error(error: Exception, provider: str) -> ClassifiedError:
        """Classify a provider failure.

        Status codes are authoritative when the provider answered; message
        patterns are used otherwise.

        Args:
            error: The exception that was raised
            provider: Provider name

        Returns:
            ClassifiedError with category and severity
        """
        error_str = str(error).lower()
        error_type = type(error).__name__
        status_code = ErrorClassifier.get_status_code(error)

        def _classified(
            category: ErrorCategory,
            severity: ErrorSeverity,
            message: str,
            is_retryable: bool = False,
        ) -> ClassifiedError:
            return ClassifiedError(
                category=category,
                severity=severity,
                provider=provider,
                original_error=error_type,
                message=message,
                is_retryable=is_retryable,
                status_code=status_code,
            )

        if isinstance(
            error, (httpx.TimeoutException, openai.APITimeoutError)
        ) or (
            status_code is None
            and isinstance(error, (httpx.TransportError, openai.APIConnectionError))
        ):
            return _classified(
                ErrorCategory.NETWORK_ERROR,
                ErrorSeverity.LOW,
                "Network connectivity issue or timeout. This may be temporary.",
                is_retryable=True,
            )

        if status_code == 402 or ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.BILLING_PATTERNS
        ):
            return _classified(
                ErrorCategory.BILLING_QUOTA,
                ErrorSeverity.CRITICAL,
                f"Billing or quota issue detected. Please check your {provider} "
                f"account balance and usage limits.",
            )

        if status_code in (401, 403) or ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.AUTH_PATTERNS
        ):
            return _classified(
                ErrorCategory.AUTHENTICATION,
                ErrorSeverity.CRITICAL,
                f"Authentication failed. Please verify your {provider} API key "
                f"is valid and has not expired.",
            )

        if status_code == 429 or ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.RATE_LIMIT_PATTERNS
        ):
            return _classified(
                ErrorCategory.RATE_LIMIT,
                ErrorSeverity.HIGH,
                f"Rate limit exceeded for {provider}.",
                is_retryable=True,
            )

        if status_code == 404 or ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.MODEL_PATTERNS
        ):
            return _classified(
                ErrorCategory.MODEL_ERROR,
                ErrorSeverity.MEDIUM,
                f"Model configuration issue with {provider}. "
                f"Verify model name/availability.",
            )

        if status_code is not None and status_code >= 500:
            return _classified(
                ErrorCategory.SERVER_ERROR,
                ErrorSeverity.MEDIUM,
                f"{provider} server error ({status_code}). This may be temporary.",
                is_retryable=True,
            )

        if ErrorClassifier._match_patterns(
            error_str, ErrorClassifier.NETWORK_PATTERNS
        ):
            return _classified(
                ErrorCategory.NETWORK_ERROR,
                ErrorSeverity.LOW,
                "Network connectivity issue or timeout. This may be temporary.",
                is_retryable=True,
            )

        if status_code is not None and 400 <= status_code < 500:
            return _classified(
                ErrorCategory.INVALID_REQUEST,
                ErrorSeverity.MEDIUM,
                f"Invalid request to {provider}. Check request parameters.",
            )

        return _classified(
            ErrorCategory.UNKNOWN,
            ErrorSeverity.MEDIUM,
            f"Unclassified error from {provider}: {str(error)[:100]}",
        )

    @staticmethod
    def not_configured(provider: str) -> ClassifiedError:
        """Classification for a provider that has no API key set."""
        return ClassifiedError(
            category=ErrorCategory.NOT_CONFIGURED,
            severity=ErrorSeverity.LOW,
            provider=provider,
            original_error="MissingCredential",
            message=f"No API key configured for {provider}.",
        )

    @staticmethod
    def _match_patterns(text: str, patterns: list[str]) -> bool:
        """Check if text matches any of the given regex patterns."""
        for pattern in patterns:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False

    @staticmethod
    def should_alert(classified_error: ClassifiedError) -> bool:
        """Determine if an error needs operator attention.

        Args:
            classified_error: The classified error

        Returns:
            True for critical errors and non-retryable high-severity errors
        """
        if classified_error.severity == ErrorSeverity.CRITICAL:
            return True

        if (
            classified_error.severity == ErrorSeverity.HIGH
            and not classified_error.is_retryable
        ):
            return True

        return False
