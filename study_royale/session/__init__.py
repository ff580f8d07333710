"""Quiz session state and flashcard navigation."""

from .flashcards import FlashcardDeck
from .quiz_session import QuizSession, SessionState

__all__ = [
    "FlashcardDeck",
    "QuizSession",
    "SessionState",
]
