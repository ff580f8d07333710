"""Turn generated quiz text into typed question records."""

import logging
from collections.abc import Sequence

from study_royale.models.quiz import (
    FlashcardQuestion,
    ParsedQuestion,
    ParseResult,
    QuestionType,
)
from study_royale.parsing.grammar import GrammarContext, prepare_lines, scan, strip_label

logger = logging.getLogger(__name__)


def parse_flashcards(raw_text: str) -> ParseResult:
    """
    Scan ``Front:``/``Back:`` pairs.

    Flashcard quizzes never mix with other types, so they skip the full
    grammar. A front without a following back line gets an empty back.
    """
    lines = [line.strip() for line in (raw_text or "").splitlines() if line.strip()]
    cards = []
    for i, line in enumerate(lines):
        if not line.startswith("Front:"):
            continue
        front = strip_label(line, "Front:")
        if not front:
            continue
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        back = strip_label(next_line, "Back:") if next_line.startswith("Back:") else ""
        cards.append(FlashcardQuestion(front=front, back=back))
    return ParseResult(questions=cards)


def parse(raw_text: str, requested_types: Sequence[QuestionType] | None = None) -> ParseResult:
    """
    Parse generated text into questions, in text order.

    Unrecognised lines are skipped. When nothing parses the result is flagged
    ``UNPARSEABLE`` so callers can offer a retry instead of an empty quiz.

    Args:
        raw_text: Concatenated model output
        requested_types: Types the quiz was generated for; used to route
            flashcard quizzes and to tell association from conditional
            true/false blocks

    Returns:
        ParseResult with the questions and a status
    """
    types = [QuestionType(t) for t in requested_types or ()]
    if QuestionType.FLASHCARD in types:
        result = parse_flashcards(raw_text)
    else:
        questions: list[ParsedQuestion] = [
            match.question
            for match in scan(prepare_lines(raw_text or ""), GrammarContext.for_types(types))
            if match.question is not None
        ]
        result = ParseResult(questions=questions)

    if result.is_unparseable:
        logger.warning("Could not parse any questions from %d characters", len(raw_text or ""))
    else:
        logger.debug("Parsed %d questions", len(result.questions))
    return result
