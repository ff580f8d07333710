"""Quiz session lifecycle from type selection to scoring."""

import logging
from enum import Enum
from typing import Any

from study_royale.agents.checker import AnswerChecker, CheckItem, basic_compare
from study_royale.errors import InvalidTransitionError
from study_royale.models.quiz import (
    CHOICE_LABELS,
    CaseStudyQuestion,
    CheckResult,
    FlashcardQuestion,
    FreeTextQuestion,
    LabeledOptionsQuestion,
    MatchingQuestion,
    ParsedQuestion,
    ParseResult,
    QuestionResult,
    QuestionType,
    ScoreReport,
    TrueFalseQuestion,
)
from study_royale.session.flashcards import FlashcardDeck

logger = logging.getLogger(__name__)

TEXT_QUESTIONS = (FreeTextQuestion, CaseStudyQuestion)


class SessionState(str, Enum):
    """Where a quiz session is in its lifecycle."""

    IDLE = "idle"
    TYPE_SELECTION = "type_selection"
    GENERATING = "generating"
    RENDERING = "rendering"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    SCORED = "scored"


class QuizSession:
    """
    One student's pass through a generated quiz.

    Answers can be changed in any order while the quiz is in progress.
    Submitting grades everything once and locks the session; exiting
    discards it and returns to type selection.
    """

    def __init__(self, checker: AnswerChecker | None = None):
        self.checker = checker
        self.state = SessionState.IDLE
        self.selected_types: list[QuestionType] = []
        self.unparseable = False
        self._reset_quiz()

    def _reset_quiz(self) -> None:
        self.questions: list[ParsedQuestion] = []
        self.answers: dict[int, Any] = {}
        self.matched: dict[int, set[int]] = {}
        self.report: ScoreReport | None = None

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(state.value for state in states)
            raise InvalidTransitionError(
                f"Cannot do this while {self.state.value} (allowed: {allowed})"
            )

    def _move(self, target: SessionState) -> None:
        logger.debug("Session %s -> %s", self.state.value, target.value)
        self.state = target

    # Type selection

    def start(self) -> None:
        """Open type selection."""
        self._require(SessionState.IDLE)
        self._move(SessionState.TYPE_SELECTION)

    def toggle_type(self, question_type: QuestionType) -> list[QuestionType]:
        """
        Select or deselect a question type.

        Flashcard is exclusive: choosing it clears every other type, and
        choosing any other type while flashcard is selected drops flashcard.

        Returns:
            The selected types after the toggle
        """
        self._require(SessionState.TYPE_SELECTION)
        question_type = QuestionType(question_type)

        if question_type == QuestionType.FLASHCARD:
            self.selected_types = [QuestionType.FLASHCARD]
        elif QuestionType.FLASHCARD in self.selected_types:
            self.selected_types = [t for t in self.selected_types if t != QuestionType.FLASHCARD]
            self.selected_types.append(question_type)
        elif question_type in self.selected_types:
            self.selected_types.remove(question_type)
        else:
            self.selected_types.append(question_type)
        return list(self.selected_types)

    def begin_generation(self) -> list[QuestionType]:
        """Lock the type selection and move to generating."""
        self._require(SessionState.TYPE_SELECTION)
        if not self.selected_types:
            raise InvalidTransitionError("Select at least one question type")
        self.unparseable = False
        self._move(SessionState.GENERATING)
        return list(self.selected_types)

    def load(self, result: ParseResult) -> bool:
        """
        Receive the parsed quiz.

        An unparseable result sends the session back to type selection with
        ``unparseable`` set so the caller can offer a retry.

        Returns:
            True if questions were loaded
        """
        self._require(SessionState.GENERATING)
        if result.is_unparseable:
            self.unparseable = True
            self._move(SessionState.TYPE_SELECTION)
            return False
        self.questions = list(result.questions)
        self._move(SessionState.RENDERING)
        return True

    def start_quiz(self) -> None:
        """Questions are shown; answers may now be given."""
        self._require(SessionState.RENDERING)
        self._move(SessionState.IN_PROGRESS)

    @property
    def is_flashcard(self) -> bool:
        return bool(self.questions) and all(
            isinstance(question, FlashcardQuestion) for question in self.questions
        )

    def deck(self) -> FlashcardDeck:
        """Flashcards of a flashcard session."""
        if not self.is_flashcard:
            raise InvalidTransitionError("This quiz has no flashcards")
        return FlashcardDeck(self.questions)

    # Answering

    def _question(self, index: int, kind: type | tuple[type, ...]) -> Any:
        self._require(SessionState.IN_PROGRESS)
        if not 0 <= index < len(self.questions):
            raise ValueError(f"No question at index {index}")
        question = self.questions[index]
        if not isinstance(question, kind):
            raise ValueError(f"Question {index + 1} is {question.question_type.value}")
        return question

    def select_option(self, index: int, label: str) -> None:
        """Pick option A-D on a choice, association or conditional question."""
        self._question(index, LabeledOptionsQuestion)
        label = label.strip().upper()
        if label not in CHOICE_LABELS:
            raise ValueError(f"Unknown option: {label}")
        self.answers[index] = label

    def answer_bool(self, index: int, value: bool) -> None:
        self._question(index, TrueFalseQuestion)
        self.answers[index] = bool(value)

    def answer_text(self, index: int, text: str) -> None:
        """Type an answer to an identification, enumeration or case study question."""
        self._question(index, TEXT_QUESTIONS)
        self.answers[index] = text

    def match_pair(self, index: int, left_index: int, right: str) -> bool:
        """
        Try to match one Column A item with a Column B value.

        Only correct matches are kept; a wrong guess can be retried.

        Returns:
            Whether the match was correct
        """
        question: MatchingQuestion = self._question(index, MatchingQuestion)
        if not 0 <= left_index < len(question.pairs):
            raise ValueError(f"No Column A item at index {left_index}")
        matched = self.matched.setdefault(index, set())
        if left_index in matched:
            return True
        if question.pairs[left_index].right.strip() != right.strip():
            return False
        matched.add(left_index)
        return True

    def unanswered_count(self) -> int:
        """Questions with no selection or blank text. Matching is never counted."""
        count = 0
        for index, question in enumerate(self.questions):
            if isinstance(question, (MatchingQuestion, FlashcardQuestion)):
                continue
            answer = self.answers.get(index)
            if answer is None or (isinstance(answer, str) and not answer.strip()):
                count += 1
        return count

    # Scoring

    def _grade_local(self, index: int, question: ParsedQuestion) -> QuestionResult:
        answer = self.answers.get(index)
        if isinstance(question, MatchingQuestion):
            matched = len(self.matched.get(index, ()))
            return QuestionResult(
                index=index,
                question_type=question.question_type,
                is_correct=matched == len(question.pairs),
                answered=matched > 0,
                explanation=f"Matched {matched} of {len(question.pairs)}",
            )
        if isinstance(question, TrueFalseQuestion):
            return QuestionResult(
                index=index,
                question_type=question.question_type,
                is_correct=answer is not None and answer == question.correct_value,
                answered=answer is not None,
                explanation=question.explanation,
            )
        return QuestionResult(
            index=index,
            question_type=question.question_type,
            is_correct=answer == question.correct_label,
            answered=answer is not None,
            explanation=f"Correct answer: {question.answer_text}",
        )

    def _check_text(self, items: list[CheckItem]) -> list[CheckResult]:
        if not items:
            return []
        if self.checker is None:
            return [
                basic_compare(user, reference)
                if user.strip()
                else CheckResult(is_correct=False, explanation="No answer given")
                for user, reference, _ in items
            ]
        return self.checker.check_many(items)

    def submit(self) -> ScoreReport:
        """
        Grade every question and lock the session.

        Choice, true/false and matching answers are compared locally. Typed
        answers all go to the answer checker before the score is added up.

        Returns:
            ScoreReport with one result per question
        """
        self._require(SessionState.IN_PROGRESS)
        if self.is_flashcard:
            raise InvalidTransitionError("Flashcard sessions are not scored")
        self._move(SessionState.SUBMITTING)

        results: dict[int, QuestionResult] = {}
        text_indexes: list[int] = []
        text_items: list[CheckItem] = []

        for index, question in enumerate(self.questions):
            if isinstance(question, TEXT_QUESTIONS):
                text_indexes.append(index)
                text_items.append(
                    (self.answers.get(index) or "", question.answer_text, question.text)
                )
            else:
                results[index] = self._grade_local(index, question)

        for index, check in zip(text_indexes, self._check_text(text_items)):
            results[index] = QuestionResult(
                index=index,
                question_type=self.questions[index].question_type,
                is_correct=check.is_correct,
                answered=bool((self.answers.get(index) or "").strip()),
                explanation=check.explanation,
            )

        ordered = [results[index] for index in range(len(self.questions))]
        self.report = ScoreReport(
            correct=sum(1 for result in ordered if result.is_correct),
            total=len(ordered),
            results=ordered,
        )
        self._move(SessionState.SCORED)
        logger.info(
            "Scored %d/%d (%.1f%%)", self.report.correct, self.report.total, self.report.percentage
        )
        return self.report

    def answer_key(self) -> list[str]:
        """Correct answers, revealed once the quiz is scored."""
        self._require(SessionState.SCORED)
        return [question.answer_text for question in self.questions]

    def exit(self) -> None:
        """Leave the quiz, discarding questions, answers and score."""
        self._reset_quiz()
        self.selected_types = []
        self.unparseable = False
        self._move(SessionState.TYPE_SELECTION)
