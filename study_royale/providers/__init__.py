"""Chat model providers used for generation, gap filling, grading and tutoring."""

from .chat import (
    ChatProvider,
    PromptPair,
    build_checker_provider,
    build_primary_provider,
    build_secondary_provider,
    build_tutor_provider,
    message_text,
)

__all__ = [
    "ChatProvider",
    "PromptPair",
    "message_text",
    "build_primary_provider",
    "build_secondary_provider",
    "build_checker_provider",
    "build_tutor_provider",
]
