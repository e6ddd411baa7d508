"""Extraction of question batches from raw model output.

Models are told to answer with a bare JSON array but routinely wrap it in
code fences or a sentence of prose. The extractor tolerates both, then
validates each entry against the ``Question`` model.
"""

import json
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .errors import EmptyResult, ParseError
from .models import Question
from .text_utils import preview, strip_code_fences

logger = logging.getLogger(__name__)


def _slice_json_array(text: str) -> str:
    """Slice from the first '[' to the last ']' inclusive, if both exist."""
    start = text.find("[")
    end = text.rfind("]")
    if start >= 0 and end > start:
        return text[start : end + 1]
    return text


def parse_question_batch(
    raw_text: Optional[str], provider: Optional[str] = None
) -> List[Question]:
    """Parse raw model output into a validated list of questions.

    Args:
        raw_text: Assistant text returned by a provider
        provider: Provider name, used only for error context

    Returns:
        Non-empty list of validated questions

    Raises:
        ParseError: If the text is blank, not JSON, or not a JSON array
        EmptyResult: If the array holds no valid question objects
    """
    if raw_text is None or not raw_text.strip():
        raise ParseError("Response text is empty", provider=provider)

    text = _slice_json_array(strip_code_fences(raw_text))

    try:
        data: Any = json.loads(text)
    except (ValueError, RecursionError) as e:
        # RecursionError is raised for deeply nested arrays
        logger.error(f"JSON parse failed: {e}\nPreview: {preview(text)}")
        raise ParseError(
            f"Response is not valid JSON: {e}",
            provider=provider,
            preview=preview(text),
        ) from e

    if not isinstance(data, list):
        logger.error(
            f"Expected a JSON array, got {type(data).__name__}\n"
            f"Preview: {preview(text)}"
        )
        raise ParseError(
            f"Expected a JSON array of questions, got {type(data).__name__}",
            provider=provider,
            preview=preview(text),
        )

    questions: List[Question] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(
                f"Skipping entry {i + 1} in batch: expected an object, "
                f"got {type(item).__name__}"
            )
            continue
        try:
            questions.append(Question.model_validate(item))
        except ValidationError as e:
            logger.warning(
                f"Skipping entry {i + 1} in batch: {e.error_count()} validation "
                f"error(s): {e.errors()[0]['msg']}"
            )

    if not questions:
        raise EmptyResult(
            f"No valid questions in response ({len(data)} entries)",
            provider=provider,
        )

    return questions
