"""LangGraph workflow definition for quiz generation."""

import logging
from typing import Any, Literal

from langgraph.graph import END, StateGraph

from study_royale.agents.coordinator import finalize_generation
from study_royale.agents.filler import fill_missing_questions
from study_royale.agents.generator import generate_questions
from study_royale.agents.validator import validate_generation
from study_royale.config.settings import Settings, get_settings
from study_royale.graph.state import GenerationState, create_initial_state
from study_royale.models.quiz import GenerationOutcome, GenerationRequest
from study_royale.providers.chat import (
    ChatProvider,
    build_primary_provider,
    build_secondary_provider,
)

logger = logging.getLogger(__name__)

# generator, validator, filler and revalidator run once per attempt
STEPS_PER_ATTEMPT = 4


def should_fill(state: GenerationState) -> Literal["fill", "finalize"]:
    """
    Decide whether the primary output needs gap filling.

    Args:
        state: Current generation state

    Returns:
        "finalize" if every type reached its count, "fill" otherwise
    """
    validation = state["validation"]
    if validation is not None and validation.is_complete:
        return "finalize"
    return "fill"


def should_retry(state: GenerationState) -> Literal["retry", "finalize"]:
    """
    Decide what happens after the filled text was re-validated.

    Args:
        state: Current generation state

    Returns:
        "retry" to run the whole generation again, "finalize" otherwise
    """
    validation = state["validation"]
    if validation is not None and validation.is_complete:
        return "finalize"
    if state["attempt"] < state["max_attempts"]:
        logger.info(
            "Still missing %d questions, retrying (attempt %d/%d)",
            validation.missing if validation else 0,
            state["attempt"] + 1,
            state["max_attempts"],
        )
        return "retry"
    # Out of attempts, return what we have
    return "finalize"


def create_generation_workflow(primary: ChatProvider, secondary: ChatProvider) -> StateGraph:
    """
    Create the LangGraph workflow for quiz generation.

    The workflow follows this structure:
    1. Generator - One primary call per question type
    2. Validator - Counts questions against the request
    3. [Conditional] Finalize if complete
    4. Filler - One secondary call per deficit
    5. Revalidator - Counts again and tracks the best attempt
    6. [Conditional] Finalize if complete or out of attempts, else regenerate
    7. Finalize - Picks the text to return

    Args:
        primary: Provider for bulk generation
        secondary: Provider for gap filling

    Returns:
        StateGraph ready to compile
    """

    def generator(state: GenerationState) -> dict[str, Any]:
        return generate_questions(state, primary)

    def filler(state: GenerationState) -> dict[str, Any]:
        return fill_missing_questions(state, secondary)

    workflow = StateGraph(GenerationState)

    workflow.add_node("generator", generator)
    workflow.add_node("validator", validate_generation)
    workflow.add_node("filler", filler)
    workflow.add_node("revalidator", validate_generation)
    workflow.add_node("finalize", finalize_generation)

    workflow.set_entry_point("generator")
    workflow.add_edge("generator", "validator")

    workflow.add_conditional_edges(
        "validator",
        should_fill,
        {
            "fill": "filler",
            "finalize": "finalize",
        },
    )

    workflow.add_edge("filler", "revalidator")

    workflow.add_conditional_edges(
        "revalidator",
        should_retry,
        {
            "retry": "generator",
            "finalize": "finalize",
        },
    )

    workflow.add_edge("finalize", END)

    return workflow


def compile_workflow(primary: ChatProvider, secondary: ChatProvider):
    """
    Compile the workflow and return it ready for execution.

    Returns:
        Compiled workflow
    """
    workflow = create_generation_workflow(primary, secondary)
    return workflow.compile()


def run_generation(
    request: GenerationRequest,
    primary: ChatProvider | None = None,
    secondary: ChatProvider | None = None,
    max_attempts: int | None = None,
    settings: Settings | None = None,
) -> GenerationOutcome:
    """
    Generate quiz text for a request, filling gaps until counts are met.

    Providers and limits not passed in come from settings.

    Args:
        request: Validated generation request
        primary: Provider for bulk generation
        secondary: Provider for gap filling
        max_attempts: Full generate/validate/fill cycles allowed
        settings: Settings to read defaults from

    Returns:
        GenerationOutcome with the text and how it was reached

    Raises:
        GenerationError: no attempt produced any text
    """
    settings = settings or get_settings()
    primary = primary or build_primary_provider(settings)
    secondary = secondary or build_secondary_provider(settings)
    max_attempts = max_attempts or settings.max_generation_attempts

    initial_state = create_initial_state(
        request,
        max_attempts=max_attempts,
        source_char_limit=settings.source_char_limit,
        fill_char_limit=settings.secondary_source_char_limit,
    )

    app = compile_workflow(primary, secondary)
    final_state = app.invoke(
        initial_state,
        config={"recursion_limit": STEPS_PER_ATTEMPT * max_attempts + 5},
    )

    outcome = GenerationOutcome(
        text=final_state["result"],
        validation=final_state["validation"],
        attempts=final_state["attempt"],
        fill_calls=final_state["fill_calls"],
        errors=final_state["errors"],
    )
    if outcome.is_complete:
        logger.info("Generation complete after %d attempt(s)", outcome.attempts)
    else:
        logger.warning("Returning best effort result after %d attempt(s)", outcome.attempts)
    return outcome


def generate(
    request: GenerationRequest,
    primary: ChatProvider | None = None,
    secondary: ChatProvider | None = None,
    max_attempts: int | None = None,
) -> str:
    """Generate quiz text for a request and return it."""
    return run_generation(request, primary, secondary, max_attempts).text
