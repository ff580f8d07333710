"""Entry points for callers that work with plain request data."""

import logging
from collections.abc import Sequence

from study_royale.agents.checker import check_answer as _check_answer
from study_royale.graph.workflow import run_generation
from study_royale.models.quiz import (
    CheckResult,
    GenerationOutcome,
    GenerationRequest,
    ParseResult,
    QuestionType,
    TrueFalseVariant,
    ValidationResult,
)
from study_royale.parsing.parser import parse as _parse
from study_royale.parsing.validator import validate as _validate
from study_royale.providers.chat import ChatProvider

logger = logging.getLogger(__name__)


def generate(
    source_text: str,
    question_types: Sequence[QuestionType | str],
    total_count: int = 10,
    special_instructions: str = "",
    true_false_variant: TrueFalseVariant | str = TrueFalseVariant.TRADITIONAL,
    primary: ChatProvider | None = None,
    secondary: ChatProvider | None = None,
) -> GenerationOutcome:
    """
    Generate quiz text from study material.

    Raises:
        pydantic.ValidationError: the request is invalid
        GenerationError: no text could be generated at all
    """
    request = GenerationRequest(
        source_text=source_text,
        requested_types=list(question_types),
        total_count=total_count,
        special_instructions=special_instructions,
        true_false_variant=true_false_variant,
    )
    return run_generation(request, primary=primary, secondary=secondary)


def validate(
    raw_text: str, expected_types: Sequence[QuestionType | str], expected_total_count: int
) -> ValidationResult:
    """Count questions in generated text against the requested counts."""
    return _validate(raw_text, [QuestionType(t) for t in expected_types], expected_total_count)


def parse(raw_text: str, requested_types: Sequence[QuestionType | str] | None = None) -> ParseResult:
    """Parse generated text into questions."""
    return _parse(raw_text, [QuestionType(t) for t in requested_types or ()])


def check_answer(
    user_answer: str,
    correct_answer: str,
    question_text: str,
    provider: ChatProvider | None = None,
) -> CheckResult:
    """Grade a typed answer, leniently."""
    return _check_answer(user_answer, correct_answer, question_text, provider)
