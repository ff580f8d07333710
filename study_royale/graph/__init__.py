"""LangGraph workflow and state management."""

# Note: Avoid importing workflow here to prevent circular imports
# Import directly from modules as needed:
# from study_royale.graph.state import GenerationState, create_initial_state
# from study_royale.graph.workflow import compile_workflow, generate, run_generation

__all__ = [
    "GenerationState",
    "create_initial_state",
    "compile_workflow",
    "create_generation_workflow",
    "generate",
    "run_generation",
]
