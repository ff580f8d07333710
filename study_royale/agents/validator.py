"""Count Validator Agent - Checks generated text against requested counts."""

import logging
from typing import Any

from study_royale.graph.state import GenerationState
from study_royale.parsing.validator import validate

logger = logging.getLogger(__name__)


def validate_generation(state: GenerationState) -> dict[str, Any]:
    """
    Count Validator Agent: count questions per type and record deficits.

    Also remembers the attempt text with the fewest missing questions, which
    is what a best-effort exit returns.

    Args:
        state: Current generation state containing raw_text

    Returns:
        Dictionary with updated state containing validation and best result
    """
    request = state["request"]
    validation = validate(state["raw_text"], request.effective_types, request.total_count)

    expected = request.expected_counts()
    for question_type, count in expected.items():
        actual = validation.counts_by_type[question_type]
        status = "ok" if actual >= count else ("MISSING" if actual == 0 else "short")
        logger.info("  %s: %d/%d %s", question_type.value, actual, count, status)

    update: dict[str, Any] = {"validation": validation}

    best_missing = state["best_missing"]
    has_text = bool(state["raw_text"].strip())
    if (
        best_missing is None
        or validation.missing < best_missing
        or (validation.missing == best_missing and has_text)
    ):
        update["best_text"] = state["raw_text"]
        update["best_missing"] = validation.missing
        update["best_validation"] = validation

    return update
