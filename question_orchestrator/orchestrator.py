"""Failover orchestration across LLM providers.

This module implements the question orchestrator: it walks an ordered
sequence of providers, one at a time, until one of them produces a usable
question batch or explanation.
"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .config import Settings, settings as default_settings
from .error_classifier import ErrorClassifier
from .errors import AllProvidersExhausted, EmptyResult, ProviderError, TransportError
from .extraction import parse_question_batch
from .finalizer import finalize_questions
from .models import ProviderAttempt, ProviderId, ProviderResult, Purpose, Question
from .prompts import build_explanation_prompt, build_question_prompt
from .providers.descriptors import ProviderDescriptor, build_provider_descriptors
from .providers.dispatcher import ProviderDispatcher
from .randomizer import randomize_batch
from .sanitizer import EXPLANATION_FALLBACK, sanitize_explanation

logger = logging.getLogger(__name__)

T = TypeVar("T")

AuthorLookup = Callable[[], Optional[str]]


def rotate_sequence(sequence: Sequence[T], start: T) -> List[T]:
    """Rotate ``sequence`` so that ``start`` comes first.

    Items keep their relative order and none are dropped. If ``start`` is not
    in the sequence it is returned unrotated.
    """
    items = list(sequence)
    if start not in items:
        return items
    idx = items.index(start)
    return items[idx:] + items[:idx]


def dedupe_sequence(sequence: Sequence[T]) -> List[T]:
    """Remove repeated items, keeping the first occurrence of each."""
    seen = set()
    result = []
    for item in sequence:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class QuestionOrchestrator:
    """Generates question batches and explanations with provider failover.

    Providers are attempted strictly one after another; a later provider is
    only called once the earlier one has failed. The only state kept across
    requests is ``last_successful_provider``, an ordering hint for
    explanation requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        descriptors: Optional[Dict[ProviderId, ProviderDescriptor]] = None,
        dispatcher: Optional[ProviderDispatcher] = None,
        author_lookup: Optional[AuthorLookup] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Application settings (global settings if not provided)
            descriptors: Provider descriptors (built from settings if not provided)
            dispatcher: Provider dispatcher (created from settings if not provided)
            author_lookup: Returns the signed-in author id, if any
            rng: Random source for answer shuffling
        """
        self.settings = settings or default_settings
        self.descriptors = (
            descriptors
            if descriptors is not None
            else build_provider_descriptors(self.settings)
        )
        self.priority: List[ProviderId] = [
            p for p in self.settings.provider_priority if p in self.descriptors
        ]
        if not self.priority:
            raise ValueError("No provider in provider_priority has a descriptor")

        self.dispatcher = dispatcher or ProviderDispatcher(
            question_temperature=self.settings.question_temperature,
            question_max_tokens=self.settings.question_max_tokens,
            explanation_max_tokens=self.settings.explanation_max_tokens,
        )
        self._author_lookup = author_lookup
        self._rng = rng or random.Random()
        self.last_successful_provider: ProviderId = self.priority[0]

        configured = [p.value for p in self.priority if self.descriptors[p].is_configured]
        logger.info(
            f"QuestionOrchestrator initialized with priority "
            f"{[p.value for p in self.priority]} (configured: {configured})"
        )

    def provider_sequence(self, start: ProviderId) -> List[ProviderId]:
        """Priority list rotated to begin at ``start``."""
        return rotate_sequence(self.priority, start)

    def start_provider(self, is_privileged: bool) -> ProviderId:
        """Provider a batch request starts with for this kind of caller."""
        if is_privileged:
            return self.settings.privileged_start_provider
        return self.settings.default_start_provider

    def explanation_sequence(self) -> List[ProviderId]:
        """Last successful provider first, then the fixed priority order."""
        return dedupe_sequence([self.last_successful_provider, *self.priority])

    async def _run_sequence(
        self,
        purpose: Purpose,
        sequence: List[ProviderId],
        prompt: str,
        handle: Callable[[str, ProviderId], T],
    ) -> ProviderResult[T]:
        """Try each provider in order until ``handle`` accepts a response.

        Args:
            purpose: What the calls are for
            sequence: Providers in the order they should be tried
            prompt: Prompt sent to every provider
            handle: Turns raw text into a result; raises ProviderError to reject it

        Returns:
            The first accepted result and the provider that produced it

        Raises:
            AllProvidersExhausted: If every provider failed
        """
        attempts: List[ProviderAttempt] = []
        for attempt_number, provider in enumerate(sequence, start=1):
            descriptor = self.descriptors[provider]
            log_extra = {
                "provider": provider.value,
                "purpose": purpose.value,
                "attempt": attempt_number,
            }
            logger.info(f"Trying {provider.value} for {purpose.value}", extra=log_extra)

            try:
                raw_text = await self.dispatcher.call(descriptor, purpose, prompt)
                value = handle(raw_text, provider)
            except ProviderError as e:
                if e.provider is None:
                    e.provider = provider.value
                attempts.append(ProviderAttempt(provider=provider, error=e))
                self._log_failed_attempt(provider, purpose, e, log_extra)
                continue

            self.last_successful_provider = provider
            return ProviderResult(provider=provider, value=value)

        logger.error(
            f"All providers failed for {purpose.value}: "
            + "; ".join(str(a) for a in attempts)
        )
        raise AllProvidersExhausted(purpose, attempts)

    @staticmethod
    def _log_failed_attempt(
        provider: ProviderId,
        purpose: Purpose,
        error: ProviderError,
        log_extra: Dict[str, Any],
    ) -> None:
        message = (
            f"{provider.value} failed for {purpose.value}: "
            f"{type(error).__name__}: {error}"
        )
        if isinstance(error, TransportError) and error.classified_error is not None:
            classified = error.classified_error
            message += f" (category={classified.category.value})"
            if ErrorClassifier.should_alert(classified):
                logger.error(message, extra=log_extra)
                return
        logger.warning(message, extra=log_extra)

    async def generate_batch(
        self,
        topic: str,
        difficulty: str,
        count: int,
        is_privileged: bool = False,
    ) -> ProviderResult[List[Question]]:
        """Generate a randomized, finalized batch of questions.

        Args:
            topic: Syllabus topic
            difficulty: Difficulty label
            count: Number of questions to request (must be positive)
            is_privileged: Whether the caller is signed in

        Returns:
            Winning provider and its questions

        Raises:
            ValueError: If count is not positive
            AllProvidersExhausted: If no provider produced a valid batch
        """
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        start = self.start_provider(is_privileged)
        sequence = self.provider_sequence(start)
        logger.info(
            f"Generating {count} questions ({topic}, {difficulty}) - "
            f"starting with {start.value}"
        )
        prompt = build_question_prompt(topic, difficulty, count)

        def _handle(raw_text: str, provider: ProviderId) -> List[Question]:
            return parse_question_batch(raw_text, provider=provider.value)

        result = await self._run_sequence(Purpose.QUESTIONS, sequence, prompt, _handle)

        author_id = self._author_lookup() if self._author_lookup else None
        questions = finalize_questions(
            randomize_batch(result.value, self._rng),
            topic=topic,
            difficulty=difficulty,
            author_id=author_id,
            points=self.settings.default_points,
            time_limit=self.settings.default_time_limit,
            anonymous_author_id=self.settings.anonymous_author_id,
        )
        if len(questions) != count:
            logger.info(
                f"{result.provider.value} returned {len(questions)} questions "
                f"(requested {count})"
            )
        logger.info(
            f"{result.provider.value} succeeded: {len(questions)} questions"
        )
        return ProviderResult(provider=result.provider, value=questions)

    async def generate_questions(
        self,
        topic: str,
        difficulty: str,
        count: int,
        is_privileged: bool = False,
    ) -> Optional[List[Question]]:
        """Generate questions, returning ``None`` when every provider fails.

        Callers are expected to fall back to local question content on
        ``None``.
        """
        try:
            result = await self.generate_batch(topic, difficulty, count, is_privileged)
        except AllProvidersExhausted:
            return None
        return result.value

    async def get_explanation(
        self, question_text: str, correct_answer_text: str
    ) -> str:
        """Fetch a sanitized explanation of why an answer is correct.

        Always returns a string: the fixed fallback message when no provider
        produced usable text.
        """
        prompt = build_explanation_prompt(question_text, correct_answer_text)

        def _handle(raw_text: str, provider: ProviderId) -> str:
            cleaned = sanitize_explanation(raw_text)
            if not cleaned:
                raise EmptyResult(
                    "Explanation was empty after sanitization",
                    provider=provider.value,
                )
            return cleaned

        try:
            result = await self._run_sequence(
                Purpose.EXPLANATION, self.explanation_sequence(), prompt, _handle
            )
        except AllProvidersExhausted:
            return EXPLANATION_FALLBACK
        except Exception as e:
            logger.exception(f"Explanation request failed unexpectedly: {e}")
            return EXPLANATION_FALLBACK
        return result.value

    async def cleanup(self) -> None:
        """Release network resources held by the dispatcher."""
        logger.debug("Cleaning up question orchestrator resources")
        await self.dispatcher.close()

    async def __aenter__(self) -> "QuestionOrchestrator":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit - ensures cleanup is called."""
        await self.cleanup()
