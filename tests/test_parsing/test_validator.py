"""Tests for question-count validation."""

from study_royale.models.quiz import QuestionType
from study_royale.parsing.validator import count_questions, expected_counts, validate


class TestExpectedCounts:
    """Test per-type expected counts."""

    def test_distribution_in_request_order(self):
        """Test floor plus remainder distribution."""
        counts = expected_counts(
            [QuestionType.MATCHING, QuestionType.IDENTIFICATION, QuestionType.TRUE_FALSE], 10
        )

        assert list(counts.values()) == [4, 3, 3]
        assert list(counts) == [
            QuestionType.MATCHING,
            QuestionType.IDENTIFICATION,
            QuestionType.TRUE_FALSE,
        ]

    def test_sum_matches_total(self):
        """Test that expected counts add up to the total for every type count."""
        types = list(QuestionType)
        for n in range(1, len(types) + 1):
            for total in (1, 5, 10, 17, 50):
                assert sum(expected_counts(types[:n], total).values()) == total


class TestValidate:
    """Test validation of generated text."""

    def test_single_identification(self):
        """Test a one-question identification quiz."""
        result = validate("Q: What is 2+2?\nA: 4\n", [QuestionType.IDENTIFICATION], 1)

        assert result.counts_by_type[QuestionType.IDENTIFICATION] == 1
        assert result.is_complete

    def test_reports_deficit(self, quiz_text):
        """Test that 6 of 10 multiple choice questions leaves a deficit of 4."""
        result = validate(quiz_text.multiple_choice(6), [QuestionType.MULTIPLE_CHOICE], 10)

        assert not result.is_complete
        assert len(result.deficits) == 1
        deficit = result.deficits[0]
        assert deficit.question_type == QuestionType.MULTIPLE_CHOICE
        assert deficit.expected == 10
        assert deficit.actual == 6
        assert deficit.needed == 4

    def test_deficits_follow_request_order(self):
        """Test that every short type is reported in request order."""
        result = validate("", [QuestionType.MATCHING, QuestionType.CASE_STUDY], 4)

        assert [d.question_type for d in result.deficits] == [
            QuestionType.MATCHING,
            QuestionType.CASE_STUDY,
        ]
        assert result.missing == 4

    def test_extra_questions_are_not_a_deficit(self, quiz_text):
        """Test that surplus questions still validate."""
        result = validate(quiz_text.multiple_choice(7), [QuestionType.MULTIPLE_CHOICE], 5)

        assert result.is_complete
        assert result.counts_by_type[QuestionType.MULTIPLE_CHOICE] == 7

    def test_matching_counts_pairs(self, quiz_text):
        """Test that each pair counts and the header does not."""
        result = validate(quiz_text.matching(5), [QuestionType.MATCHING], 5)

        assert result.counts_by_type[QuestionType.MATCHING] == 5
        assert result.is_complete

    def test_association_missing_second_item(self):
        """Test that a Statement block without II. counts as nothing."""
        text = (
            "Statement: Uses hop count as its metric\n"
            "I. RIP\n"
            'A) If "I" is associated\n'
            'B) If "II" is associated\n'
            "C) If both are associated\n"
            "D) Neither are associated\n"
            "Correct: A\n"
        )
        result = validate(text, [QuestionType.ASSOCIATION], 1)

        assert result.counts_by_type[QuestionType.ASSOCIATION] == 0
        assert result.counts_by_type[QuestionType.TRUE_FALSE] == 0
        assert result.counts_by_type[QuestionType.TRUE_FALSE_CONDITIONAL] == 0

    def test_malformed_choice_not_counted(self):
        """Test that a question with three options is not counted."""
        text = "Q: Pick one\nA) one\nB) two\nC) three\nCorrect: A\n"

        assert validate(text, [QuestionType.MULTIPLE_CHOICE], 1).counts_by_type[
            QuestionType.MULTIPLE_CHOICE
        ] == 0

    def test_never_raises_on_garbage(self):
        """Test that unrecognisable text just counts zero."""
        result = validate("lorem ipsum\n| | |\nA)\nCorrect:", [QuestionType.MULTIPLE_CHOICE], 3)

        assert result.total == 0
        assert result.missing == 3


class TestCountQuestions:
    """Test counting across all types."""

    def test_counts_every_type(self, mixed_quiz_text):
        """Test counts for text holding several types."""
        counts = count_questions(mixed_quiz_text)

        assert counts[QuestionType.MULTIPLE_CHOICE] == 2
        assert counts[QuestionType.IDENTIFICATION] == 2
        assert counts[QuestionType.TRUE_FALSE] == 1
        assert counts[QuestionType.MATCHING] == 3
        assert counts[QuestionType.CASE_STUDY] == 1
        assert counts[QuestionType.EXCEPT_QUESTIONS] == 1
        assert counts[QuestionType.ENUMERATION] == 0

    def test_identification_then_choice_kept_apart(self, quiz_text):
        """Test that a short answer does not borrow the next question's options."""
        text = quiz_text.identification(1) + "\n\n" + quiz_text.multiple_choice(1)
        counts = count_questions(text)

        assert counts[QuestionType.IDENTIFICATION] == 1
        assert counts[QuestionType.MULTIPLE_CHOICE] == 1
