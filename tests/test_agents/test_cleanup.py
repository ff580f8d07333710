"""Tests for output cleanup."""

from study_royale.agents.cleanup import clean_fill_output, clean_primary_output
from study_royale.models.quiz import QuestionType


class TestCleanPrimaryOutput:
    """Test primary output cleanup."""

    def test_removes_intro(self):
        """Test that a leading intro sentence is dropped."""
        text = "Here are 2 questions:\nQ: What is 2+2?\nA: 4"

        assert clean_primary_output(text) == "Q: What is 2+2?\nA: 4"

    def test_leaves_questions_alone(self):
        """Test that clean output is unchanged."""
        text = "Q: What is 2+2?\nA: 4"

        assert clean_primary_output(text) == text


class TestCleanFillOutput:
    """Test secondary output cleanup."""

    def test_removes_intro_and_headers(self):
        """Test that intros and section headers anywhere are dropped."""
        text = (
            "Here are the 2 missing questions:\n"
            "Multiple Choice Questions\n"
            "Q: Pick\nA) 1\nB) 2\nC) 3\nD) 4\nCorrect: A"
        )

        assert clean_fill_output(text, QuestionType.MULTIPLE_CHOICE) == (
            "Q: Pick\nA) 1\nB) 2\nC) 3\nD) 4\nCorrect: A"
        )

    def test_adds_matching_header(self):
        """Test that matching output gets its header back."""
        cleaned = clean_fill_output("RIP | Distance vector\nOSPF | Link state", QuestionType.MATCHING)

        assert cleaned.splitlines()[0] == "Column A | Column B"
        assert len(cleaned.splitlines()) == 3

    def test_keeps_existing_matching_header(self):
        """Test that a present header is not duplicated."""
        text = "Column A | Column B\nRIP | Distance vector"

        assert clean_fill_output(text, QuestionType.MATCHING) == text

    def test_empty_output(self):
        """Test that empty output stays empty."""
        assert clean_fill_output("  ", QuestionType.MATCHING) == ""
