"""Gap Filler Agent - Asks the secondary model for missing questions only."""

import logging
from typing import Any

from study_royale.agents.cleanup import clean_fill_output
from study_royale.agents.prompts import build_fill_prompt, build_fill_system_prompt
from study_royale.errors import ProviderError
from study_royale.graph.state import GenerationState
from study_royale.providers.chat import ChatProvider

logger = logging.getLogger(__name__)


def fill_missing_questions(state: GenerationState, provider: ChatProvider) -> dict[str, Any]:
    """
    Gap Filler Agent: one secondary call per deficit, for exactly the shortfall.

    All calls finish before the node returns, so re-validation sees every
    fill. Output is appended in deficit order. A failed call leaves its
    deficit open.

    Args:
        state: Current generation state containing validation deficits
        provider: Secondary chat provider

    Returns:
        Dictionary with updated state containing the extended raw_text
    """
    request = state["request"]
    deficits = state["validation"].deficits if state["validation"] else []
    errors = list(state["errors"])
    last_error = state["last_error"]

    if not deficits:
        return {}

    for deficit in deficits:
        logger.info(
            "Missing %d %s questions (have %d, need %d)",
            deficit.needed,
            deficit.question_type.value,
            deficit.actual,
            deficit.expected,
        )

    prompts = [
        (
            build_fill_system_prompt(deficit.question_type, deficit.needed),
            build_fill_prompt(
                request.source_text,
                deficit.question_type,
                deficit.needed,
                state["fill_char_limit"],
            ),
        )
        for deficit in deficits
    ]
    results = provider.complete_many(prompts)

    text = state["raw_text"]
    for deficit, result in zip(deficits, results):
        if isinstance(result, ProviderError):
            message = (
                f"Attempt {state['attempt']}: filling {deficit.question_type.value} failed: {result}"
            )
            logger.warning(message)
            errors.append(message)
            last_error = result
            continue
        cleaned = clean_fill_output(result, deficit.question_type)
        if cleaned:
            text += f"\n\n{cleaned}\n\n"
        logger.info("Filled %d %s questions", deficit.needed, deficit.question_type.value)

    return {
        "raw_text": text,
        "fill_calls": state["fill_calls"] + len(prompts),
        "errors": errors,
        "last_error": last_error,
    }
