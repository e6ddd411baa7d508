"""Stamping of provenance and quiz defaults onto a generated batch."""

import uuid
from typing import List, Optional

from .models import Question

ANONYMOUS_AUTHOR_ID = "AI"
DEFAULT_POINTS = 10
DEFAULT_TIME_LIMIT = 60


def finalize_questions(
    questions: List[Question],
    topic: str,
    difficulty: str,
    author_id: Optional[str] = None,
    points: int = DEFAULT_POINTS,
    time_limit: int = DEFAULT_TIME_LIMIT,
    anonymous_author_id: str = ANONYMOUS_AUTHOR_ID,
) -> List[Question]:
    """Stamp module, difficulty, authorship and scoring defaults.

    Args:
        questions: Randomized questions from a single provider
        topic: Topic the batch was requested for (becomes ``module_id``)
        difficulty: Difficulty label the batch was requested for
        author_id: Signed-in author, if any
        points: Points awarded per question
        time_limit: Seconds allowed per question
        anonymous_author_id: ``teacher_id`` used when there is no author

    Returns:
        New question records; the inputs are not modified
    """
    teacher_id = author_id or anonymous_author_id
    return [
        q.model_copy(
            update={
                "id": q.id or uuid.uuid4().hex,
                "module_id": topic,
                "difficulty": difficulty,
                "teacher_id": teacher_id,
                "points": points,
                "time_limit": time_limit,
                "hint1": q.hint1 or "",
                "hint2": q.hint2 or "",
            }
        )
        for q in questions
    ]
