"""AI agents for quiz generation, grading and tutoring."""

from .checker import AnswerChecker, check_answer
from .coordinator import finalize_generation
from .filler import fill_missing_questions
from .generator import generate_questions
from .tutor import StudyTutor
from .validator import validate_generation

__all__ = [
    "generate_questions",
    "validate_generation",
    "fill_missing_questions",
    "finalize_generation",
    "AnswerChecker",
    "check_answer",
    "StudyTutor",
]
