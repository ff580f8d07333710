"""Study Royale: LLM quiz generation, validation, parsing and grading."""

__version__ = "0.1.0"
