"""Answer position randomization.

Models tend to favour certain positions for the correct answer. The options
of each question are shuffled, and the correct index follows the correct
option's text rather than its old position.
"""

import logging
import random
from typing import List, Optional

from .models import OPTION_LETTERS, Question, strip_option_prefix

logger = logging.getLogger(__name__)


def _shuffle(items: List[str], rng: random.Random) -> None:
    """Fisher-Yates shuffle in place, swapping each slot with one in [i, n)."""
    n = len(items)
    for i in range(n):
        j = rng.randrange(i, n)
        items[i], items[j] = items[j], items[i]


def randomize_answers(
    question: Question, rng: Optional[random.Random] = None
) -> Question:
    """Shuffle a question's options, keeping the correct text correct.

    Args:
        question: Question as parsed from the model
        rng: Random source (a fresh ``random.Random`` when omitted)

    Returns:
        A new question whose ``options[correct_index]`` holds the same text
        the model marked as correct, with "A: ".."D: " prefixes matching the
        new positions
    """
    rng = rng or random.Random()
    options = question.options
    if not options:
        return question

    valid_index = min(max(question.correct_index, 0), len(options) - 1)
    if valid_index != question.correct_index:
        logger.warning(
            f"correctAnswerIndex {question.correct_index} out of range for "
            f"{len(options)} options; clamped to {valid_index}"
        )

    correct_text = strip_option_prefix(options[valid_index])
    plain = [strip_option_prefix(opt) for opt in options]

    if len(set(plain)) != len(plain):
        logger.warning(
            f"Duplicate option text in question {question.question_text[:50]!r}; "
            f"correct answer may be ambiguous"
        )

    _shuffle(plain, rng)

    try:
        new_index = plain.index(correct_text)
    except ValueError:
        logger.warning(
            f"Correct option {correct_text!r} not found after shuffle; "
            f"defaulting to index 0"
        )
        new_index = 0

    labelled = [
        f"{OPTION_LETTERS[i]}: {text}" if i < len(OPTION_LETTERS) else text
        for i, text in enumerate(plain)
    ]
    return question.model_copy(
        update={"options": labelled, "correct_index": new_index}
    )


def randomize_batch(
    questions: List[Question], rng: Optional[random.Random] = None
) -> List[Question]:
    """Apply ``randomize_answers`` to every question in a batch."""
    return [randomize_answers(q, rng) for q in questions]
