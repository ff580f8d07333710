"""Answer Checker Agent - Grades free-text answers leniently."""

import logging
from collections.abc import Sequence

from study_royale.errors import ProviderError
from study_royale.models.quiz import CheckResult
from study_royale.providers.chat import ChatProvider, PromptPair, build_checker_provider

logger = logging.getLogger(__name__)

CHECKER_SYSTEM_PROMPT = (
    "You are checking if a student's answer is correct. Be lenient with spelling, "
    "capitalization, and minor variations. Return ONLY 'CORRECT' or 'INCORRECT' "
    "followed by a brief explanation."
)
FALLBACK_EXPLANATION = "Basic comparison used"

# (user_answer, reference_answer, question_text)
CheckItem = tuple[str, str, str]


def build_check_prompt(user_answer: str, reference_answer: str, question_text: str) -> str:
    """User message asking the model to grade one answer."""
    return (
        f"Question: {question_text}\n"
        f"Correct Answer: {reference_answer}\n"
        f"Student Answer: {user_answer}\n\n"
        "Is the student's answer correct?"
    )


def interpret_verdict(reply: str) -> bool:
    """
    Read a grading reply as correct or incorrect.

    The reply counts as correct when it mentions "correct" anywhere and does
    not open with "incorrect". Leading markdown such as ``**`` is ignored.
    """
    verdict = reply.strip().lstrip("*_#>`\"' ").lower()
    return "correct" in verdict and not verdict.startswith("incorrect")


def basic_compare(user_answer: str, reference_answer: str) -> CheckResult:
    """Trimmed, case-insensitive equality used when the model is unavailable."""
    return CheckResult(
        is_correct=user_answer.strip().lower() == reference_answer.strip().lower(),
        explanation=FALLBACK_EXPLANATION,
        used_fallback=True,
    )


class AnswerChecker:
    """Grade identification, enumeration and case-study answers with a model."""

    def __init__(self, provider: ChatProvider):
        self.provider = provider

    def _verdict(self, reply: str | ProviderError, user_answer: str, reference: str) -> CheckResult:
        if isinstance(reply, ProviderError):
            logger.warning("Answer check failed, using basic comparison: %s", reply)
            return basic_compare(user_answer, reference)
        return CheckResult(is_correct=interpret_verdict(reply), explanation=reply)

    def check(self, user_answer: str, reference_answer: str, question_text: str) -> CheckResult:
        """
        Grade a single answer.

        Never raises for provider problems; those fall back to a plain
        comparison flagged with ``used_fallback``.

        Args:
            user_answer: What the student typed
            reference_answer: The expected answer
            question_text: Question shown to the student

        Returns:
            CheckResult with the verdict and the model's explanation
        """
        if not user_answer or not user_answer.strip():
            return CheckResult(is_correct=False, explanation="No answer given")

        prompt = build_check_prompt(user_answer, reference_answer, question_text)
        try:
            reply: str | ProviderError = self.provider.complete(CHECKER_SYSTEM_PROMPT, prompt)
        except ProviderError as e:
            reply = e
        return self._verdict(reply, user_answer, reference_answer)

    def check_many(self, items: Sequence[CheckItem]) -> list[CheckResult]:
        """
        Grade several answers concurrently.

        Results are in the order of ``items``. Blank answers are graded
        without a model call.
        """
        results: list[CheckResult | None] = [None] * len(items)
        pending: list[int] = []
        prompts: list[PromptPair] = []

        for index, (user_answer, reference, question_text) in enumerate(items):
            if not user_answer or not user_answer.strip():
                results[index] = CheckResult(is_correct=False, explanation="No answer given")
                continue
            pending.append(index)
            prompts.append(
                (CHECKER_SYSTEM_PROMPT, build_check_prompt(user_answer, reference, question_text))
            )

        replies = self.provider.complete_many(prompts) if prompts else []
        for index, reply in zip(pending, replies):
            user_answer, reference, _ = items[index]
            results[index] = self._verdict(reply, user_answer, reference)

        return [result for result in results if result is not None]


def check_answer(
    user_answer: str,
    reference_answer: str,
    question_text: str,
    provider: ChatProvider | None = None,
) -> CheckResult:
    """Grade one answer with the configured checker model."""
    if provider is None:
        provider = build_checker_provider()
    return AnswerChecker(provider).check(user_answer, reference_answer, question_text)
