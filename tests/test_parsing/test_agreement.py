"""Tests that counting and parsing agree on the same text."""

import pytest

from study_royale.models.quiz import QuestionType
from study_royale.parsing.parser import parse
from study_royale.parsing.validator import validate

ALL_TYPES = [t for t in QuestionType if t != QuestionType.FLASHCARD]

SAMPLES = {
    "broken choice": "Q: Pick one\nA) one\nB) two\nC) three\nCorrect: A\nQ: Next?\nA: yes",
    "duplicate option labels": "Q: Pick\nA) 1\nA) 2\nB) 3\nC) 4\nD) 5\nCorrect: A",
    "short answer then choice": "Q: Who?\nA: Me\nQ: Which?\nA) a\nB) b\nC) c\nD) d\nCorrect: A",
    "half roman block": "Statement: X\nI. one\nA) a\nB) b\nC) c\nD) d\nCorrect: A",
    "stray pipes": "Q: a | b\nA) x | y\nTerm | Definition\n| orphan\nleft |",
    "case study missing answer": "Scenario: s\nQuestion: q\n1. Scenario: t\nQuestion: q\nModelAnswer: m",
}


class TestValidatorParserAgreement:
    """Validator counts equal parser counts for every type."""

    def _assert_agree(self, text: str):
        validation = validate(text, ALL_TYPES, 10)
        parsed = parse(text, ALL_TYPES).counts_by_type()

        for question_type in QuestionType:
            assert validation.counts_by_type[question_type] == parsed[question_type], question_type

    def test_mixed_text(self, mixed_quiz_text):
        """Test agreement on well-formed mixed text."""
        self._assert_agree(mixed_quiz_text)

    @pytest.mark.parametrize("name", sorted(SAMPLES))
    def test_malformed_text(self, name: str):
        """Test agreement on malformed blocks."""
        self._assert_agree(SAMPLES[name])

    @pytest.mark.parametrize(
        "text",
        [
            "Front: TCP | UDP\nBack: Transport protocols",
            "Front: RIP\nBack: Distance vector\nFront: Hop | Metric\nBack: Count of routers",
        ],
    )
    def test_flashcard_request_with_pipe(self, text: str):
        """Test that a pipe in a card never turns it into a matching pair."""
        validation = validate(text, [QuestionType.FLASHCARD], 2)
        parsed = parse(text, [QuestionType.FLASHCARD]).counts_by_type()

        assert validation.counts_by_type == parsed
        assert validation.counts_by_type[QuestionType.MATCHING] == 0
