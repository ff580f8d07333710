"""Result Coordinator Agent - Picks the text a generation request returns."""

import logging
from typing import Any

from study_royale.errors import GenerationError
from study_royale.graph.state import GenerationState

logger = logging.getLogger(__name__)


def finalize_generation(state: GenerationState) -> dict[str, Any]:
    """
    Result Coordinator Agent: return complete text, or the best attempt.

    Partial output is never thrown away. Only when no attempt produced any
    text at all does the request fail.

    Args:
        state: Final generation state

    Returns:
        Dictionary with updated state containing result

    Raises:
        GenerationError: every provider call failed and there is no text
    """
    validation = state["validation"]

    if validation is not None and validation.is_complete:
        logger.info("All %d questions validated", validation.total)
        result = state["raw_text"]
    else:
        logger.warning(
            "Max attempts reached with %s questions missing; returning best effort result",
            state["best_missing"],
        )
        result = state["best_text"] or state["raw_text"]
        validation = state["best_validation"] or validation

    if not result.strip():
        raise GenerationError("Failed to generate questions") from state["last_error"]

    return {"result": result, "validation": validation}
