"""LangGraph state for the generation workflow."""

from typing import TypedDict

from study_royale.errors import ProviderError
from study_royale.models.quiz import GenerationRequest, ValidationResult


class GenerationState(TypedDict):
    """State carried between generator, validator and filler nodes."""

    request: GenerationRequest
    max_attempts: int
    source_char_limit: int
    fill_char_limit: int

    # Current attempt
    attempt: int
    raw_text: str
    validation: ValidationResult | None
    primary_failures: int

    # Across attempts
    best_text: str
    best_missing: int | None
    best_validation: ValidationResult | None
    fill_calls: int
    errors: list[str]
    last_error: ProviderError | None

    result: str | None


def create_initial_state(
    request: GenerationRequest,
    max_attempts: int = 2,
    source_char_limit: int = 3000,
    fill_char_limit: int = 2500,
) -> GenerationState:
    """
    Build the starting state for one generation request.

    Args:
        request: Validated generation request
        max_attempts: Full generate/validate/fill cycles allowed
        source_char_limit: Source prefix for primary prompts
        fill_char_limit: Source prefix for gap-filling prompts

    Returns:
        Fresh GenerationState
    """
    return GenerationState(
        request=request,
        max_attempts=max_attempts,
        source_char_limit=source_char_limit,
        fill_char_limit=fill_char_limit,
        attempt=0,
        raw_text="",
        validation=None,
        primary_failures=0,
        best_text="",
        best_missing=None,
        best_validation=None,
        fill_calls=0,
        errors=[],
        last_error=None,
        result=None,
    )
