"""Tests for provider error classification."""

import httpx
import openai
import pytest

from question_orchestrator.error_classifier import (
    ClassifiedError,
    ErrorCategory,
    ErrorClassifier,
    ErrorSeverity,
)

URL = "https://api.groq.com/openai/v1/chat/completions"


def _http_status_error(status_code):
    request = httpx.Request("POST", URL)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("failed", request=request, response=response)


def _sdk_status_error(status_code, message="failed"):
    request = httpx.Request("POST", URL)
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(message, response=response, body=None)


class TestClassifyByStatus:
    """Tests for classification driven by HTTP status."""

    @pytest.mark.parametrize(
        "status_code,category,severity,retryable",
        [
            (401, ErrorCategory.AUTHENTICATION, ErrorSeverity.CRITICAL, False),
            (403, ErrorCategory.AUTHENTICATION, ErrorSeverity.CRITICAL, False),
            (402, ErrorCategory.BILLING_QUOTA, ErrorSeverity.CRITICAL, False),
            (429, ErrorCategory.RATE_LIMIT, ErrorSeverity.HIGH, True),
            (404, ErrorCategory.MODEL_ERROR, ErrorSeverity.MEDIUM, False),
            (500, ErrorCategory.SERVER_ERROR, ErrorSeverity.MEDIUM, True),
            (503, ErrorCategory.SERVER_ERROR, ErrorSeverity.MEDIUM, True),
            (400, ErrorCategory.INVALID_REQUEST, ErrorSeverity.MEDIUM, False),
        ],
    )
    def test_httpx_status(self, status_code, category, severity, retryable):
        """Test httpx status errors from the Gemini path."""
        classified = ErrorClassifier.classify_error(
            _http_status_error(status_code), "gemini"
        )

        assert classified.category == category
        assert classified.severity == severity
        assert classified.is_retryable is retryable
        assert classified.status_code == status_code
        assert classified.provider == "gemini"

    @pytest.mark.parametrize(
        "status_code,category",
        [
            (401, ErrorCategory.AUTHENTICATION),
            (429, ErrorCategory.RATE_LIMIT),
            (502, ErrorCategory.SERVER_ERROR),
        ],
    )
    def test_sdk_status(self, status_code, category):
        """Test OpenAI SDK status errors from the chat path."""
        classified = ErrorClassifier.classify_error(
            _sdk_status_error(status_code), "groq"
        )

        assert classified.category == category
        assert classified.original_error == "APIStatusError"

    def test_quota_message_overrides_rate_limit_status(self):
        """Test that a 429 about exhausted quota is a billing problem."""
        error = _sdk_status_error(429, "Monthly quota exceeded for this key")

        classified = ErrorClassifier.classify_error(error, "openrouter")

        assert classified.category == ErrorCategory.BILLING_QUOTA


class TestClassifyTransport:
    """Tests for failures without a response."""

    def test_httpx_timeout(self):
        """Test that an httpx timeout is a retryable network error."""
        error = httpx.ReadTimeout("timed out", request=httpx.Request("POST", URL))

        classified = ErrorClassifier.classify_error(error, "gemini")

        assert classified.category == ErrorCategory.NETWORK_ERROR
        assert classified.severity == ErrorSeverity.LOW
        assert classified.is_retryable is True
        assert classified.status_code is None

    def test_httpx_connect_error(self):
        """Test that a refused connection is a network error."""
        error = httpx.ConnectError("refused", request=httpx.Request("POST", URL))

        classified = ErrorClassifier.classify_error(error, "gemini")

        assert classified.category == ErrorCategory.NETWORK_ERROR

    def test_sdk_timeout(self):
        """Test that an SDK timeout is a network error."""
        error = openai.APITimeoutError(request=httpx.Request("POST", URL))

        classified = ErrorClassifier.classify_error(error, "groq")

        assert classified.category == ErrorCategory.NETWORK_ERROR

    def test_sdk_connection_error(self):
        """Test that an SDK connection failure is a network error."""
        error = openai.APIConnectionError(request=httpx.Request("POST", URL))

        classified = ErrorClassifier.classify_error(error, "groq")

        assert classified.category == ErrorCategory.NETWORK_ERROR


class TestClassifyByMessage:
    """Tests for pattern-based classification."""

    @pytest.mark.parametrize(
        "message,category",
        [
            ("Insufficient funds in account", ErrorCategory.BILLING_QUOTA),
            ("Invalid API key provided", ErrorCategory.AUTHENTICATION),
            ("Rate limit reached", ErrorCategory.RATE_LIMIT),
            ("The model `llama-2` has been decommissioned", ErrorCategory.MODEL_ERROR),
            ("connection reset by peer", ErrorCategory.NETWORK_ERROR),
            ("something odd happened", ErrorCategory.UNKNOWN),
        ],
    )
    def test_patterns(self, message, category):
        """Test classification of plain exceptions by message."""
        classified = ErrorClassifier.classify_error(Exception(message), "groq")

        assert classified.category == category


class TestNotConfigured:
    """Tests for missing credentials."""

    def test_not_configured(self):
        """Test the classification of a provider without a key."""
        classified = ErrorClassifier.not_configured("openrouter")

        assert classified.category == ErrorCategory.NOT_CONFIGURED
        assert classified.severity == ErrorSeverity.LOW
        assert classified.is_retryable is False
        assert "openrouter" in classified.message


class TestShouldAlert:
    """Tests for should_alert."""

    def _classified(self, severity, is_retryable=False):
        return ClassifiedError(
            category=ErrorCategory.UNKNOWN,
            severity=severity,
            provider="groq",
            original_error="Exception",
            message="test",
            is_retryable=is_retryable,
        )

    def test_critical_alerts(self):
        """Test that critical errors always alert."""
        assert ErrorClassifier.should_alert(self._classified(ErrorSeverity.CRITICAL))

    def test_high_non_retryable_alerts(self):
        """Test that non-retryable high severity errors alert."""
        assert ErrorClassifier.should_alert(self._classified(ErrorSeverity.HIGH))

    def test_high_retryable_does_not_alert(self):
        """Test that rate limits do not alert."""
        assert not ErrorClassifier.should_alert(
            self._classified(ErrorSeverity.HIGH, is_retryable=True)
        )

    @pytest.mark.parametrize("severity", [ErrorSeverity.MEDIUM, ErrorSeverity.LOW])
    def test_lower_severities_do_not_alert(self, severity):
        """Test that medium and low severity errors do not alert."""
        assert not ErrorClassifier.should_alert(self._classified(severity))


def test_to_dict_and_str():
    """Test serialization of a classified error."""
    classified = ErrorClassifier.classify_error(_http_status_error(429), "groq")

    data = classified.to_dict()

    assert data["category"] == "rate_limit"
    assert data["severity"] == "high"
    assert data["status_code"] == 429
    assert str(classified).startswith("[HIGH] groq: rate_limit")
