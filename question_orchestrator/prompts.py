"""Prompt templates for question and explanation generation.

The same prompt text is sent to every provider; only the envelope around it
differs (see ``providers.dispatcher``).
"""

# System message for chat/completions providers on question requests
QUESTION_SYSTEM_PROMPT = (
    "Output ONLY a valid JSON array of question objects. "
    "No extra text or markdown."
)

QUESTION_PROMPT_TEMPLATE = """
You are an expert Physics teacher creating questions for the Kenyan KCSE exam.

Generate EXACTLY {count} multiple-choice questions on the following:

Topic: {topic}
Difficulty Level: {difficulty}

YOUR RESPONSE MUST BE ONLY A VALID JSON ARRAY OF COMPLETE QUESTION OBJECTS.

Correct example (you must follow this structure exactly):

[
  {{
    "questionText": "What is the main characteristic of transverse waves?",
    "options": [
      "A: Particles vibrate parallel to the wave direction",
      "B: Particles vibrate perpendicular to the wave direction",
      "C: They cannot travel through a vacuum",
      "D: They require a medium only"
    ],
    "correctAnswerIndex": 1,
    "explanation": "In transverse waves, particle vibration is perpendicular to the direction of wave propagation.",
    "hint1": "Think about a rope wave.",
    "hint2": "Compare with sound waves which are longitudinal."
  }}
]

MANDATORY RULES - DO NOT BREAK ANY:
- Output ONLY the JSON array above. Nothing else.
- NO explanatory text, NO introductions, NO numbering.
- NO markdown code blocks (no ```json or ```).
- NEVER output just a list of options like ["A: ...", "B: ..."]
- Every object MUST have these exact fields: questionText, options (4 strings starting with A:, B:, C:, D:), correctAnswerIndex (0-3, randomized), explanation, hint1, hint2.
- The entire response must be directly parsable as a JSON array of objects.

Generate the {count} questions now in this exact format only."""

EXPLANATION_PROMPT_TEMPLATE = """
You are a KCSE Physics tutor.
Question: '{question_text}'
Correct Answer: '{correct_answer}'

Explain why the answer is correct.
Keep it under 100 words.
IMPORTANT:
- Output PLAIN TEXT ONLY.
- DO NOT use any tags (no HTML, no Markdown).
- DO NOT add a header like 'AI Explanation:'. Start directly with the explanation.
"""


def build_question_prompt(topic: str, difficulty: str, count: int) -> str:
    """Build the prompt asking for ``count`` questions on a topic.

    Args:
        topic: Syllabus topic (e.g. "Forces")
        difficulty: Difficulty label (e.g. "Form 2")
        count: Number of questions to request

    Returns:
        Prompt text
    """
    return QUESTION_PROMPT_TEMPLATE.format(
        topic=topic, difficulty=difficulty, count=count
    )


def build_explanation_prompt(question_text: str, correct_answer: str) -> str:
    """Build the prompt asking why ``correct_answer`` answers the question."""
    return EXPLANATION_PROMPT_TEMPLATE.format(
        question_text=question_text, correct_answer=correct_answer
    )
