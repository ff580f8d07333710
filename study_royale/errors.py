"""Exception types raised by the quiz pipeline."""


class QuizError(Exception):
    """Base exception for study_royale errors."""


class ProviderError(QuizError):
    """A chat model call failed (timeout, auth, quota, empty or malformed reply)."""

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class GenerationError(QuizError):
    """No question text could be produced for a generation request."""


class InvalidTransitionError(QuizError):
    """A quiz session was asked to do something its current state forbids."""
