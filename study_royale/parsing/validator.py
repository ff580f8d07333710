"""Question-count validation of generated quiz text."""

import logging
from collections.abc import Sequence

from study_royale.models.quiz import (
    Deficit,
    QuestionType,
    ValidationResult,
    distribute_count,
)
from study_royale.parsing.grammar import GrammarContext, prepare_lines, scan
from study_royale.parsing.parser import parse_flashcards

logger = logging.getLogger(__name__)


def expected_counts(
    expected_types: Sequence[QuestionType], expected_total_count: int
) -> dict[QuestionType, int]:
    """
    Per-type expected counts for a request.

    Args:
        expected_types: Requested types in request order
        expected_total_count: Total number of questions requested

    Returns:
        Mapping of type to count, in request order
    """
    types = list(dict.fromkeys(QuestionType(t) for t in expected_types))
    if not types:
        return {}
    return dict(zip(types, distribute_count(expected_total_count, len(types))))


def count_questions(
    raw_text: str, expected_types: Sequence[QuestionType] | None = None
) -> dict[QuestionType, int]:
    """
    Count well-formed questions of every type in raw text.

    Flashcard requests are counted with the flashcard scanner the parser
    uses for them, so a card with a pipe in it is never read as matching.
    """
    counts = {question_type: 0 for question_type in QuestionType}
    if QuestionType.FLASHCARD in [QuestionType(t) for t in expected_types or ()]:
        counts[QuestionType.FLASHCARD] = len(parse_flashcards(raw_text).questions)
        return counts
    context = GrammarContext.for_types(expected_types)
    for match in scan(prepare_lines(raw_text), context):
        if match.question is not None:
            counts[match.question_type] += match.units
    return counts


def validate(
    raw_text: str,
    expected_types: Sequence[QuestionType],
    expected_total_count: int,
) -> ValidationResult:
    """
    Count the questions in generated text against what was requested.

    Never raises: text with no recognisable questions simply yields zero
    counts, which shows up as a full deficit for every requested type.

    Args:
        raw_text: Concatenated model output
        expected_types: Requested types in request order
        expected_total_count: Total number of questions requested

    Returns:
        ValidationResult with counts for every type and per-type deficits
    """
    counts = count_questions(raw_text or "", expected_types)

    deficits = []
    for question_type, expected in expected_counts(expected_types, expected_total_count).items():
        actual = counts[question_type]
        if actual < expected:
            deficits.append(Deficit(question_type=question_type, expected=expected, actual=actual))
            logger.debug("%s: %d/%d", question_type.value, actual, expected)
        else:
            logger.debug("%s: %d/%d ok", question_type.value, actual, expected)

    return ValidationResult(counts_by_type=counts, deficits=deficits)
