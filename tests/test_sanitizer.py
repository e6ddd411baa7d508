"""Tests for explanation sanitization."""

import pytest

from question_orchestrator.sanitizer import EXPLANATION_HEADER, sanitize_explanation


class TestSanitizeExplanation:
    """Tests for sanitize_explanation."""

    def test_plain_text_gets_single_header(self):
        """Test that clean text is returned under one header."""
        result = sanitize_explanation("Force equals mass times acceleration.")

        assert result == f"{EXPLANATION_HEADER}\nForce equals mass times acceleration."

    def test_tags_are_removed(self):
        """Test that markup tags are stripped unconditionally."""
        raw = "<color=cyan><b>Inertia</b></color> resists changes in motion.<br/>"

        result = sanitize_explanation(raw)

        assert "<" not in result and ">" not in result
        assert result.endswith("Inertia resists changes in motion.")

    def test_emphasis_markers_are_removed(self):
        """Test that bold and emphasis markers are stripped."""
        result = sanitize_explanation("**Weight** is a *force* measured in __newtons__.")

        assert result.endswith("Weight is a force measured in newtons.")

    @pytest.mark.parametrize(
        "label", ["Explanation:", "AI Explanation:", "Answer:", "answer", "AI Explanation"]
    )
    def test_label_only_lines_are_dropped(self, label):
        """Test that bare label lines are removed."""
        raw = f"{label}\nThe net force is zero."

        assert sanitize_explanation(raw) == f"{EXPLANATION_HEADER}\nThe net force is zero."

    def test_inline_labels_are_stripped(self):
        """Test that a leading label on a content line is removed."""
        raw = "Explanation: The object floats.\nAnswer: B is correct."

        result = sanitize_explanation(raw)

        assert result == f"{EXPLANATION_HEADER}\nThe object floats.\nB is correct."

    @pytest.mark.parametrize(
        "raw",
        ["Explanation The net force is zero.", "AI Explanation The net force is zero."],
    )
    def test_inline_labels_without_colon_are_stripped(self, raw):
        """Test that a leading label is removed even when the colon is missing."""
        assert sanitize_explanation(raw) == f"{EXPLANATION_HEADER}\nThe net force is zero."

    @pytest.mark.parametrize(
        "raw",
        ["Answering requires Newton's second law.", "Answers depend on the mass."],
    )
    def test_words_starting_with_label_survive(self, raw):
        """Test that longer words beginning with a label word are kept intact."""
        assert sanitize_explanation(raw) == f"{EXPLANATION_HEADER}\n{raw}"

    def test_duplicate_header_from_model_collapses(self):
        """Test that a model-supplied header does not produce two headers."""
        raw = "<b>AI Explanation:</b>\n**AI Explanation:** Pressure is force per area."

        result = sanitize_explanation(raw)

        assert result.count(EXPLANATION_HEADER) == 1
        assert result == f"{EXPLANATION_HEADER}\nPressure is force per area."

    def test_blank_lines_are_dropped(self):
        """Test that empty and whitespace lines are removed."""
        raw = "\n\n  First line.  \n\n\r\nSecond line.\n"

        assert sanitize_explanation(raw) == f"{EXPLANATION_HEADER}\nFirst line.\nSecond line."

    @pytest.mark.parametrize("raw", ["", "   \n", "<b></b>", "Explanation:\nAnswer:"])
    def test_nothing_usable_returns_empty(self, raw):
        """Test that text without content yields an empty string."""
        assert sanitize_explanation(raw) == ""
