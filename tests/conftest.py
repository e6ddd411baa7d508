"""Pytest configuration and shared fixtures for question orchestrator tests."""

import json
from typing import Any, Dict, List

import pytest

from question_orchestrator.config import Settings
from question_orchestrator.providers.descriptors import build_provider_descriptors


def make_question_dict(n: int = 1, correct_index: int = 1) -> Dict[str, Any]:
    """Build a question object the way a model is prompted to emit it."""
    return {
        "questionText": f"Question {n}: which statement about forces is true?",
        "options": [
            f"A: Option {n}-a",
            f"B: Option {n}-b",
            f"C: Option {n}-c",
            f"D: Option {n}-d",
        ],
        "correctAnswerIndex": correct_index,
        "explanation": f"Explanation for question {n}.",
        "hint1": "First hint.",
        "hint2": None,
    }


def make_batch_json(count: int) -> str:
    """JSON array text holding ``count`` valid question objects."""
    return json.dumps([make_question_dict(n) for n in range(1, count + 1)])


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every provider configured and no .env lookup."""
    return Settings(
        _env_file=None,
        gemini_api_key="gemini-test-key",
        groq_api_key="gsk-test-key",
        openrouter_api_key="sk-or-test-key",
    )


@pytest.fixture
def descriptors(test_settings):
    """Provider descriptors built from the test settings."""
    return build_provider_descriptors(test_settings)


@pytest.fixture
def sample_question_dict() -> Dict[str, Any]:
    """A single valid question object."""
    return make_question_dict()


@pytest.fixture
def sample_batch_json() -> str:
    """A five-question JSON array."""
    return make_batch_json(5)


@pytest.fixture
def gemini_envelope():
    """Factory for a generateContent response body."""

    def _envelope(text: str) -> Dict[str, Any]:
        return {
            "candidates": [
                {"content": {"role": "model", "parts": [{"text": text}]}}
            ]
        }

    return _envelope


@pytest.fixture
def chat_envelope():
    """Factory for a chat/completions response body."""

    def _envelope(text: str) -> Dict[str, Any]:
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "test-model",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": text},
                    "finish_reason": "stop",
                }
            ],
        }

    return _envelope


@pytest.fixture
def option_texts() -> List[str]:
    """Four distinct prefixed options."""
    return [
        "A: Newton",
        "B: Joule",
        "C: Watt",
        "D: Pascal",
    ]


@pytest.fixture
def question_factory():
    """Factory for single question objects."""
    return make_question_dict


@pytest.fixture
def batch_factory():
    """Factory for JSON array text with a given number of questions."""
    return make_batch_json
