"""Pydantic models for quiz data structures."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

CHOICE_LABELS = ("A", "B", "C", "D")


class QuestionType(str, Enum):
    """Question type identifiers, as sent by the client and used in prompts."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    TRUE_FALSE_CONDITIONAL = "true-false-conditional"
    IDENTIFICATION = "identification"
    ENUMERATION = "enumeration"
    FLASHCARD = "flashcard"
    MATCHING = "matching"
    ASSOCIATION = "association"
    CASE_STUDY = "case-study"
    ODD_ONE_OUT = "odd-one-out"
    EXCEPT_QUESTIONS = "except-questions"

    @property
    def display_name(self) -> str:
        """Human readable name, e.g. 'Multiple Choice'."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.TRUE_FALSE: "True/False",
    QuestionType.TRUE_FALSE_CONDITIONAL: "Conditional True/False",
    QuestionType.IDENTIFICATION: "Identification",
    QuestionType.ENUMERATION: "Enumeration",
    QuestionType.FLASHCARD: "Flashcard",
    QuestionType.MATCHING: "Matching",
    QuestionType.ASSOCIATION: "Association",
    QuestionType.CASE_STUDY: "Case Study",
    QuestionType.ODD_ONE_OUT: "Odd One Out",
    QuestionType.EXCEPT_QUESTIONS: "Except",
}


class TrueFalseVariant(str, Enum):
    """Which true/false template to generate with."""

    TRADITIONAL = "traditional"
    CONDITIONAL = "conditional"


def distribute_count(total: int, buckets: int) -> list[int]:
    """
    Split a question total across question types.

    Every type gets ``total // buckets``; the first ``total % buckets`` types
    get one extra.

    Args:
        total: Total number of questions requested
        buckets: Number of question types

    Returns:
        Per-type counts in request order, summing to ``total``
    """
    if buckets < 1:
        raise ValueError("buckets must be at least 1")
    base, remainder = divmod(total, buckets)
    return [base + (1 if index < remainder else 0) for index in range(buckets)]


# Parsed questions


class QuestionBase(BaseModel):
    """Fields and helpers shared by every parsed question."""

    @property
    def question_type(self) -> QuestionType:
        return QuestionType(self.type)

    @property
    def units(self) -> int:
        """How many requested questions this record accounts for."""
        return 1

    @property
    def text(self) -> str:
        """Question as shown to the student."""
        raise NotImplementedError

    @property
    def answer_text(self) -> str:
        """Correct answer as revealed after scoring."""
        raise NotImplementedError


class LabeledOptionsQuestion(QuestionBase):
    """Base for questions answered by picking one of options A-D."""

    options: dict[str, str] = Field(..., description="Options keyed A, B, C, D")
    correct_label: str = Field(
        ...,
        pattern="^[A-D]$",
        description="The correct option key (A, B, C, or D)",
    )

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure options contains exactly A, B, C, D."""
        if set(v.keys()) != set(CHOICE_LABELS):
            raise ValueError("Options must contain exactly keys A, B, C, D")
        for key, value in v.items():
            if not value or not value.strip():
                raise ValueError(f"Option {key} cannot be empty")
        return {label: v[label] for label in CHOICE_LABELS}

    @field_validator("correct_label", mode="before")
    @classmethod
    def validate_correct_label(cls, v: object) -> object:
        """Accept lowercase labels."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def answer_text(self) -> str:
        return f"{self.correct_label}) {self.options[self.correct_label]}"


class ChoiceQuestion(LabeledOptionsQuestion):
    """Four-option question: multiple choice, odd one out or EXCEPT."""

    type: Literal["multiple-choice", "odd-one-out", "except-questions"] = "multiple-choice"
    prompt: str = Field(..., min_length=1, description="The question text")

    @property
    def text(self) -> str:
        return self.prompt

    model_config = {
        "json_schema_extra": {
            "example": {
                "type": "multiple-choice",
                "prompt": "What is the capital of France?",
                "options": {"A": "London", "B": "Paris", "C": "Berlin", "D": "Madrid"},
                "correct_label": "B",
            }
        }
    }


class TrueFalseQuestion(QuestionBase):
    """A statement the student marks true or false."""

    type: Literal["true-false"] = "true-false"
    statement: str = Field(..., min_length=1)
    correct_value: bool
    explanation: str = ""

    @property
    def text(self) -> str:
        return self.statement

    @property
    def answer_text(self) -> str:
        return "True" if self.correct_value else "False"


class ConditionalTrueFalseQuestion(LabeledOptionsQuestion):
    """Two Roman-numeral statements judged together through four options."""

    type: Literal["true-false-conditional"] = "true-false-conditional"
    header: str = Field(..., min_length=1)
    item_i: str = Field(..., min_length=1)
    item_ii: str = Field(..., min_length=1)

    @property
    def text(self) -> str:
        return f"{self.header}\nI. {self.item_i}\nII. {self.item_ii}"


class FreeTextQuestion(QuestionBase):
    """Identification or enumeration question answered by typing."""

    type: Literal["identification", "enumeration"] = "identification"
    prompt: str = Field(..., min_length=1)
    reference_answer: str = Field(..., min_length=1)

    @property
    def text(self) -> str:
        return self.prompt

    @property
    def answer_text(self) -> str:
        return self.reference_answer


class FlashcardQuestion(QuestionBase):
    """Front/back study card."""

    type: Literal["flashcard"] = "flashcard"
    front: str = Field(..., min_length=1)
    back: str = ""

    @property
    def text(self) -> str:
        return self.front

    @property
    def answer_text(self) -> str:
        return self.back


class MatchingPair(BaseModel):
    """One Column A / Column B row."""

    left: str = Field(..., min_length=1)
    right: str = Field(..., min_length=1)


class MatchingQuestion(QuestionBase):
    """A block of pairs to be matched."""

    type: Literal["matching"] = "matching"
    pairs: list[MatchingPair] = Field(..., min_length=1)

    @property
    def units(self) -> int:
        # matching prompts request pairs, not blocks
        return len(self.pairs)

    @property
    def text(self) -> str:
        return "Match each item in Column A with its pair in Column B"

    @property
    def answer_text(self) -> str:
        return "; ".join(f"{pair.left} = {pair.right}" for pair in self.pairs)


class AssociationQuestion(LabeledOptionsQuestion):
    """Statement plus two items; options say which items it is associated with."""

    type: Literal["association"] = "association"
    statement: str = Field(..., min_length=1)
    item_i: str = Field(..., min_length=1)
    item_ii: str = Field(..., min_length=1)

    @property
    def text(self) -> str:
        return f"{self.statement}\nI. {self.item_i}\nII. {self.item_ii}"


class CaseStudyQuestion(QuestionBase):
    """Scenario with an open question and a model answer."""

    type: Literal["case-study"] = "case-study"
    scenario: str = Field(..., min_length=1)
    prompt: str = ""
    model_answer: str = ""

    @property
    def text(self) -> str:
        if self.prompt:
            return f"{self.scenario}\n{self.prompt}"
        return self.scenario

    @property
    def answer_text(self) -> str:
        return self.model_answer


ParsedQuestion = Annotated[
    Union[
        ChoiceQuestion,
        TrueFalseQuestion,
        ConditionalTrueFalseQuestion,
        FreeTextQuestion,
        FlashcardQuestion,
        MatchingQuestion,
        AssociationQuestion,
        CaseStudyQuestion,
    ],
    Field(discriminator="type"),
]


class ParseStatus(str, Enum):
    """Outcome of parsing generated text."""

    OK = "ok"
    UNPARSEABLE = "unparseable"


class ParseResult(BaseModel):
    """Questions recovered from raw generated text."""

    questions: list[ParsedQuestion] = Field(default_factory=list)
    status: ParseStatus = ParseStatus.OK

    @model_validator(mode="after")
    def _flag_empty(self) -> "ParseResult":
        if not self.questions:
            self.status = ParseStatus.UNPARSEABLE
        return self

    @property
    def is_unparseable(self) -> bool:
        return self.status == ParseStatus.UNPARSEABLE

    def counts_by_type(self) -> dict[QuestionType, int]:
        """Tally questions per type in the same units the validator counts."""
        counts = {question_type: 0 for question_type in QuestionType}
        for question in self.questions:
            counts[question.question_type] += question.units
        return counts


# Generation request and validation results


class GenerationRequest(BaseModel):
    """User input for quiz generation."""

    source_text: str = Field(..., min_length=1, description="Extracted study material")
    requested_types: list[QuestionType] = Field(
        ...,
        min_length=1,
        description="Question types in request order",
    )
    total_count: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Total number of questions across all types",
    )
    special_instructions: str = Field(
        default="",
        description="Extra requirement every question should reflect",
    )
    true_false_variant: TrueFalseVariant = Field(
        default=TrueFalseVariant.TRADITIONAL,
        description="Template used for true-false questions",
    )

    @field_validator("requested_types")
    @classmethod
    def dedupe_types(cls, v: list[QuestionType]) -> list[QuestionType]:
        """Drop repeated types, keeping the first occurrence."""
        return list(dict.fromkeys(v))

    @field_validator("special_instructions", mode="before")
    @classmethod
    def clean_instructions(cls, v: str | None) -> str:
        """Treat missing instructions as empty."""
        return (v or "").strip()

    @model_validator(mode="after")
    def flashcards_are_exclusive(self) -> "GenerationRequest":
        """Flashcard quizzes cannot be mixed with other types."""
        if QuestionType.FLASHCARD in self.requested_types and len(self.requested_types) > 1:
            raise ValueError("flashcard cannot be combined with other question types")
        return self

    @property
    def effective_types(self) -> list[QuestionType]:
        """Requested types with true-false resolved against the variant."""
        if self.true_false_variant != TrueFalseVariant.CONDITIONAL:
            return list(self.requested_types)
        resolved = [
            QuestionType.TRUE_FALSE_CONDITIONAL if t == QuestionType.TRUE_FALSE else t
            for t in self.requested_types
        ]
        return list(dict.fromkeys(resolved))

    def expected_counts(self) -> dict[QuestionType, int]:
        """Per-type question counts in request order."""
        types = self.effective_types
        return dict(zip(types, distribute_count(self.total_count, len(types))))

    model_config = {
        "json_schema_extra": {
            "example": {
                "source_text": "Static routing requires manual configuration...",
                "requested_types": ["multiple-choice", "identification"],
                "total_count": 10,
                "special_instructions": "Focus on routing protocols",
                "true_false_variant": "traditional",
            }
        }
    }


class Deficit(BaseModel):
    """Shortfall for one question type after validation."""

    question_type: QuestionType
    expected: int = Field(..., ge=0)
    actual: int = Field(..., ge=0)

    @property
    def needed(self) -> int:
        return max(self.expected - self.actual, 0)


class ValidationResult(BaseModel):
    """Question counts found in generated text and what is still missing."""

    counts_by_type: dict[QuestionType, int] = Field(default_factory=dict)
    deficits: list[Deficit] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.deficits

    @property
    def total(self) -> int:
        return sum(self.counts_by_type.values())

    @property
    def missing(self) -> int:
        """Total number of questions still needed across all deficits."""
        return sum(deficit.needed for deficit in self.deficits)


# Grading


class CheckResult(BaseModel):
    """Verdict for a free-text answer."""

    is_correct: bool
    explanation: str = ""
    used_fallback: bool = False


class QuestionResult(BaseModel):
    """Grading outcome for one question in a submitted session."""

    index: int = Field(..., ge=0)
    question_type: QuestionType
    is_correct: bool
    answered: bool = True
    explanation: str = ""


class ScoreReport(BaseModel):
    """Final score of a submitted quiz session."""

    correct: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    results: list[QuestionResult] = Field(default_factory=list)

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.correct / self.total * 100, 1)

    @property
    def message(self) -> str:
        """Encouragement line shown with the score."""
        percentage = self.percentage
        if percentage >= 90:
            return "Outstanding! You've mastered this material!"
        if percentage >= 80:
            return "Excellent work! You have a strong understanding!"
        if percentage >= 70:
            return "Good job! Review the explanations to improve further."
        if percentage >= 60:
            return "Keep practicing! Check the explanations below."
        return "Don't give up! Review and try again."


class GenerationOutcome(BaseModel):
    """Everything a generation run produced."""

    text: str
    validation: ValidationResult | None = None
    attempts: int = Field(default=0, ge=0)
    fill_calls: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.validation is not None and self.validation.is_complete
