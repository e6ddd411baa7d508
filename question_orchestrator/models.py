"""Data models for generated questions and provider results."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .errors import ProviderError

T = TypeVar("T")

OPTION_COUNT = 4
OPTION_LETTERS = ("A", "B", "C", "D")

# Letter prefix a model puts in front of an option, e.g. "B: " or "c) "
OPTION_PREFIX_PATTERN = re.compile(r"^[A-D][.:)]\s*")


def strip_option_prefix(option: str) -> str:
    """Remove a leading "A:"/"B."/"C)" style label from an option."""
    return OPTION_PREFIX_PATTERN.sub("", option).strip()


class ProviderId(str, Enum):
    """LLM backends the orchestrator can fail over between."""

    GEMINI = "gemini"
    GROQ = "groq"
    OPENROUTER = "openrouter"


class PayloadShape(str, Enum):
    """Request/response envelope family spoken by a provider."""

    GEMINI = "gemini"  # generateContent: contents/parts -> candidates/parts
    OPENAI_CHAT = "openai_chat"  # chat/completions: messages -> choices


class Purpose(str, Enum):
    """What a provider call is for."""

    QUESTIONS = "questions"
    EXPLANATION = "explanation"


class Question(BaseModel):
    """A multiple-choice question as delivered to the quiz UI.

    Field aliases match the camelCase records the app stores and the
    models are prompted to emit.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field("", description="Opaque identifier")
    question_text: str = Field(..., alias="questionText", min_length=1)
    options: List[str] = Field(
        ..., min_length=OPTION_COUNT, max_length=OPTION_COUNT
    )
    correct_index: int = Field(0, alias="correctAnswerIndex")
    explanation: str = ""
    hint1: str = ""
    hint2: str = ""
    module_id: str = Field("", alias="moduleId")
    difficulty: str = ""
    teacher_id: str = Field("", alias="teacherId")
    points: int = 10
    time_limit: int = Field(60, alias="timeLimit")

    @field_validator(
        "id",
        "explanation",
        "hint1",
        "hint2",
        "module_id",
        "difficulty",
        "teacher_id",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Models emit null for optional text; records never carry None."""
        return "" if v is None else v

    @field_validator("question_text")
    @classmethod
    def validate_question_text(cls, v: str) -> str:
        """Question text must contain more than whitespace."""
        if not v.strip():
            raise ValueError("questionText must not be blank")
        return v.strip()

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: List[str]) -> List[str]:
        """Every option must carry some text."""
        if any(not isinstance(opt, str) or not opt.strip() for opt in v):
            raise ValueError("options must be non-blank strings")
        return v

    @property
    def correct_option(self) -> str:
        """Text of the correct option without its letter prefix."""
        index = min(max(self.correct_index, 0), len(self.options) - 1)
        return strip_option_prefix(self.options[index])


@dataclass
class ProviderResult(Generic[T]):
    """Successful outcome of a failover sequence."""

    provider: ProviderId
    value: T


@dataclass
class ProviderAttempt:
    """A failed attempt against one provider."""

    provider: ProviderId
    error: "ProviderError"

    def __str__(self) -> str:
        return f"{self.provider.value}: {type(self.error).__name__}: {self.error}"
