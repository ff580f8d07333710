"""Data models for quiz generation, parsing and grading."""

from .quiz import (
    CHOICE_LABELS,
    AssociationQuestion,
    CaseStudyQuestion,
    CheckResult,
    ChoiceQuestion,
    ConditionalTrueFalseQuestion,
    Deficit,
    FlashcardQuestion,
    FreeTextQuestion,
    GenerationOutcome,
    GenerationRequest,
    LabeledOptionsQuestion,
    MatchingPair,
    MatchingQuestion,
    ParsedQuestion,
    ParseResult,
    ParseStatus,
    QuestionResult,
    QuestionType,
    ScoreReport,
    TrueFalseQuestion,
    TrueFalseVariant,
    ValidationResult,
    distribute_count,
)

__all__ = [
    "CHOICE_LABELS",
    "QuestionType",
    "TrueFalseVariant",
    "distribute_count",
    "GenerationRequest",
    "GenerationOutcome",
    "Deficit",
    "ValidationResult",
    "ParsedQuestion",
    "LabeledOptionsQuestion",
    "ChoiceQuestion",
    "TrueFalseQuestion",
    "ConditionalTrueFalseQuestion",
    "FreeTextQuestion",
    "FlashcardQuestion",
    "MatchingPair",
    "MatchingQuestion",
    "AssociationQuestion",
    "CaseStudyQuestion",
    "ParseResult",
    "ParseStatus",
    "CheckResult",
    "QuestionResult",
    "ScoreReport",
]
