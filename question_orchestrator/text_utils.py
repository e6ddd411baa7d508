"""Shared text utility functions for handling raw model output."""

import re

PREVIEW_LENGTH = 300

# ```json, ```JSON or bare ``` anywhere in the text
_CODE_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text.

    LLMs often wrap JSON responses in markdown code blocks like:
    ```json
    [...]
    ```

    Unlike a boundary-anchored match, every marker is removed wherever it
    occurs, so fences preceded or followed by prose are handled too.

    Args:
        text: Raw text that may contain code fence markers

    Returns:
        Text with all fence markers removed and surrounding whitespace trimmed
    """
    if not text:
        return text
    return _CODE_FENCE_PATTERN.sub("", text.strip()).strip()


def preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """Bounded leading slice of text for log messages."""
    return (text or "")[:limit]
