"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from study_royale.models.quiz import (
    AssociationQuestion,
    ChoiceQuestion,
    Deficit,
    GenerationRequest,
    MatchingPair,
    MatchingQuestion,
    ParseResult,
    ParseStatus,
    QuestionType,
    ScoreReport,
    TrueFalseVariant,
    ValidationResult,
    distribute_count,
)


class TestDistributeCount:
    """Test splitting a total across question types."""

    @pytest.mark.parametrize("total", [1, 2, 7, 10, 23, 50])
    @pytest.mark.parametrize("buckets", [1, 2, 3, 4, 11])
    def test_sum_equals_total(self, total: int, buckets: int):
        """Test that per-type counts always add up to the total."""
        assert sum(distribute_count(total, buckets)) == total

    def test_remainder_goes_to_first_types(self):
        """Test that the first total % n types get one extra."""
        assert distribute_count(10, 3) == [4, 3, 3]
        assert distribute_count(11, 4) == [3, 3, 3, 2]

    def test_more_types_than_questions(self):
        """Test that later types can get zero questions."""
        assert distribute_count(2, 3) == [1, 1, 0]

    def test_zero_buckets_rejected(self):
        """Test that at least one bucket is required."""
        with pytest.raises(ValueError):
            distribute_count(5, 0)


class TestChoiceQuestion:
    """Test the four-option question model."""

    def test_valid_question(self):
        """Test creating a valid choice question."""
        question = ChoiceQuestion(
            prompt="What is the capital of France?",
            options={"A": "London", "B": "Paris", "C": "Berlin", "D": "Madrid"},
            correct_label="b",
        )

        assert question.correct_label == "B"
        assert question.question_type == QuestionType.MULTIPLE_CHOICE
        assert question.answer_text == "B) Paris"

    def test_options_must_be_a_to_d(self):
        """Test that options need exactly keys A-D."""
        with pytest.raises(ValidationError):
            ChoiceQuestion(
                prompt="Pick one",
                options={"A": "1", "B": "2", "C": "3"},
                correct_label="A",
            )

    def test_empty_option_rejected(self):
        """Test that option text cannot be blank."""
        with pytest.raises(ValidationError):
            ChoiceQuestion(
                prompt="Pick one",
                options={"A": "1", "B": " ", "C": "3", "D": "4"},
                correct_label="A",
            )

    def test_correct_label_must_be_a_to_d(self):
        """Test that the correct label is one of A-D."""
        with pytest.raises(ValidationError):
            ChoiceQuestion(
                prompt="Pick one",
                options={"A": "1", "B": "2", "C": "3", "D": "4"},
                correct_label="E",
            )

    def test_association_text_lists_items(self):
        """Test that association questions show both Roman-numeral items."""
        question = AssociationQuestion(
            statement="Uses hop count as its metric",
            item_i="RIP",
            item_ii="OSPF",
            options={
                "A": 'If "I" is associated',
                "B": 'If "II" is associated',
                "C": "If both are associated",
                "D": "Neither are associated",
            },
            correct_label="A",
        )

        assert question.text == "Uses hop count as its metric\nI. RIP\nII. OSPF"


class TestMatchingQuestion:
    """Test matching blocks."""

    def test_units_count_pairs(self):
        """Test that a matching block counts once per pair."""
        question = MatchingQuestion(
            pairs=[MatchingPair(left="RIP", right="Distance vector"), MatchingPair(left="OSPF", right="Link state")]
        )

        assert question.units == 2

    def test_needs_at_least_one_pair(self):
        """Test that an empty block is rejected."""
        with pytest.raises(ValidationError):
            MatchingQuestion(pairs=[])


class TestParseResult:
    """Test the parse result wrapper."""

    def test_empty_result_is_unparseable(self):
        """Test that no questions flags the result."""
        result = ParseResult(questions=[])

        assert result.status == ParseStatus.UNPARSEABLE
        assert result.is_unparseable

    def test_questions_parse_ok(self):
        """Test that a result with questions is ok."""
        result = ParseResult(
            questions=[{"type": "identification", "prompt": "What is 2+2?", "reference_answer": "4"}]
        )

        assert result.status == ParseStatus.OK
        assert result.counts_by_type()[QuestionType.IDENTIFICATION] == 1


class TestGenerationRequest:
    """Test generation request validation."""

    def test_defaults(self):
        """Test default count, instructions and variant."""
        request = GenerationRequest(source_text="notes", requested_types=["multiple-choice"])

        assert request.total_count == 10
        assert request.special_instructions == ""
        assert request.true_false_variant == TrueFalseVariant.TRADITIONAL

    def test_duplicate_types_removed(self):
        """Test that repeated types keep their first position."""
        request = GenerationRequest(
            source_text="notes",
            requested_types=["matching", "identification", "matching"],
        )

        assert request.requested_types == [QuestionType.MATCHING, QuestionType.IDENTIFICATION]

    def test_flashcard_cannot_mix(self):
        """Test that flashcard is exclusive with other types."""
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="notes", requested_types=["flashcard", "matching"])

    def test_count_bounds(self):
        """Test that the total must be between 1 and 50."""
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="notes", requested_types=["matching"], total_count=0)
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="notes", requested_types=["matching"], total_count=51)

    def test_requires_a_type(self):
        """Test that at least one type is required."""
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="notes", requested_types=[])

    def test_conditional_variant_resolves_true_false(self):
        """Test that the conditional variant swaps the true-false type."""
        request = GenerationRequest(
            source_text="notes",
            requested_types=["true-false", "identification"],
            true_false_variant="conditional",
        )

        assert request.effective_types == [
            QuestionType.TRUE_FALSE_CONDITIONAL,
            QuestionType.IDENTIFICATION,
        ]

    def test_expected_counts_in_request_order(self):
        """Test the per-type distribution."""
        request = GenerationRequest(
            source_text="notes",
            requested_types=["identification", "multiple-choice", "matching"],
            total_count=10,
        )

        assert list(request.expected_counts().items()) == [
            (QuestionType.IDENTIFICATION, 4),
            (QuestionType.MULTIPLE_CHOICE, 3),
            (QuestionType.MATCHING, 3),
        ]


class TestValidationResult:
    """Test validation result helpers."""

    def test_complete_without_deficits(self):
        """Test that no deficits means complete."""
        result = ValidationResult(counts_by_type={QuestionType.MATCHING: 3})

        assert result.is_complete
        assert result.total == 3
        assert result.missing == 0

    def test_missing_sums_deficits(self):
        """Test that missing adds up every shortfall."""
        result = ValidationResult(
            deficits=[
                Deficit(question_type=QuestionType.MULTIPLE_CHOICE, expected=5, actual=2),
                Deficit(question_type=QuestionType.MATCHING, expected=5, actual=4),
            ]
        )

        assert not result.is_complete
        assert result.missing == 4


class TestScoreReport:
    """Test score percentages and messages."""

    @pytest.mark.parametrize(
        ("correct", "message"),
        [
            (10, "Outstanding! You've mastered this material!"),
            (9, "Outstanding! You've mastered this material!"),
            (8, "Excellent work! You have a strong understanding!"),
            (7, "Good job! Review the explanations to improve further."),
            (6, "Keep practicing! Check the explanations below."),
            (5, "Don't give up! Review and try again."),
        ],
    )
    def test_message_tiers(self, correct: int, message: str):
        """Test the encouragement message for each score band."""
        assert ScoreReport(correct=correct, total=10).message == message

    def test_percentage_rounded(self):
        """Test that the percentage has one decimal."""
        assert ScoreReport(correct=2, total=3).percentage == 66.7

    def test_empty_quiz(self):
        """Test that an empty quiz scores zero."""
        assert ScoreReport(correct=0, total=0).percentage == 0.0
