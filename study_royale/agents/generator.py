"""Question Generator Agent - Generates each question type with the primary model."""

import logging
from typing import Any

from study_royale.agents.cleanup import clean_primary_output
from study_royale.agents.prompts import build_prompt, build_system_prompt
from study_royale.errors import ProviderError
from study_royale.graph.state import GenerationState
from study_royale.providers.chat import ChatProvider

logger = logging.getLogger(__name__)


def generate_questions(state: GenerationState, provider: ChatProvider) -> dict[str, Any]:
    """
    Question Generator Agent: one primary call per requested type.

    Separate focused prompts keep per-type counts closer to what was asked
    than one prompt covering every type. Calls run concurrently but the
    output is joined in request order. A failed type contributes nothing;
    every attempt starts from an empty text.

    Args:
        state: Current generation state containing the request
        provider: Primary chat provider

    Returns:
        Dictionary with updated state containing raw_text for this attempt
    """
    request = state["request"]
    attempt = state["attempt"] + 1
    errors = list(state["errors"])
    last_error = state["last_error"]

    plan = [(t, n) for t, n in request.expected_counts().items() if n > 0]
    logger.info(
        "Attempt %d/%d: generating %d questions (%s)",
        attempt,
        state["max_attempts"],
        request.total_count,
        ", ".join(f"{t.value}={n}" for t, n in plan),
    )

    prompts = [
        (
            build_system_prompt(question_type, count),
            build_prompt(
                request.source_text,
                question_type,
                count,
                request.special_instructions,
                request.true_false_variant,
                state["source_char_limit"],
            ),
        )
        for question_type, count in plan
    ]
    results = provider.complete_many(prompts)

    sections = []
    failures = 0
    for (question_type, count), result in zip(plan, results):
        if isinstance(result, ProviderError):
            message = f"Attempt {attempt}: {question_type.value} generation failed: {result}"
            logger.warning(message)
            errors.append(message)
            failures += 1
            last_error = result
            continue
        sections.append(clean_primary_output(result))
        logger.info("Generated %d %s questions", count, question_type.value)

    return {
        "attempt": attempt,
        "raw_text": "".join(f"{section}\n\n" for section in sections),
        "validation": None,
        "primary_failures": failures,
        "errors": errors,
        "last_error": last_error,
    }
