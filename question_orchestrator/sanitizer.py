"""Cleanup of free-text explanations before display."""

import re

EXPLANATION_HEADER = "AI Explanation:"
EXPLANATION_FALLBACK = "Sorry, explanation unavailable."

_TAG_PATTERN = re.compile(r"<[^>]*>")
_EMPHASIS_PATTERN = re.compile(r"\*\*|__|\*")
_LABEL_ONLY_PATTERN = re.compile(
    r"^(AI\s*)?(Explanation|Answer)\s*:?\s*$", re.IGNORECASE
)
# Whole words only: "Answering" and "Answers" are left alone
_LEADING_LABEL_PATTERN = re.compile(
    r"^(AI\s*)?(Explanation|Answer)\b\s*:?\s*", re.IGNORECASE
)


def sanitize_explanation(raw_text: str) -> str:
    """Strip markup and duplicate labels from a model explanation.

    Removes markup tags, bold and emphasis markers, and any "Explanation:" or
    "Answer:" labels the model added, then prepends a single header.

    Args:
        raw_text: Explanation text as returned by a provider

    Returns:
        Header plus cleaned body, or an empty string when no content survives
    """
    text = _TAG_PATTERN.sub("", raw_text or "")
    text = _EMPHASIS_PATTERN.sub("", text)

    lines = []
    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed or _LABEL_ONLY_PATTERN.match(trimmed):
            continue
        trimmed = _LEADING_LABEL_PATTERN.sub("", trimmed, count=1).strip()
        if trimmed:
            lines.append(trimmed)

    body = "\n".join(lines).strip()
    if not body:
        return ""
    return f"{EXPLANATION_HEADER}\n{body}"
