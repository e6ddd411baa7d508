"""AI question generation orchestrator for the AR Physics Lab app."""

from question_orchestrator.errors import (
    AllProvidersExhausted,
    EmptyResult,
    ParseError,
    ProviderError,
    TransportError,
)
from question_orchestrator.models import ProviderId, Purpose, Question
from question_orchestrator.orchestrator import QuestionOrchestrator

__version__ = "0.1.0"

__all__ = [
    "AllProvidersExhausted",
    "EmptyResult",
    "ParseError",
    "ProviderError",
    "ProviderId",
    "Purpose",
    "Question",
    "QuestionOrchestrator",
    "TransportError",
]
