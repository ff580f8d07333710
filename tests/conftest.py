"""Shared test fixtures and configuration for pytest."""

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from study_royale.errors import ProviderError
from study_royale.models.quiz import GenerationRequest, QuestionType


class FakeProvider:
    """
    In-process stand-in for ChatProvider.

    ``responder(system_prompt, user_prompt)`` returns the reply text or raises
    ProviderError. Every call is recorded in ``calls``.
    """

    def __init__(self, responder: Callable[[str, str], str], name: str = "fake"):
        self.responder = responder
        self.name = name
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        return self.responder(system_prompt, user_prompt)

    def complete_many(self, prompts: Sequence[tuple[str, str]]) -> list[Any]:
        results = []
        for system_prompt, user_prompt in prompts:
            try:
                results.append(self.complete(system_prompt, user_prompt))
            except ProviderError as e:
                results.append(e)
        return results

    def chat(self, messages: Sequence[Any]) -> str:
        self.calls.append((messages[0].content, messages[-1].content))
        self.messages = list(messages)
        return self.responder(messages[0].content, messages[-1].content)


class QuizText:
    """Builders for well-formed generated quiz text."""

    @staticmethod
    def multiple_choice(count: int, start: int = 1) -> str:
        return "\n\n".join(
            f"Q: Which layer handles item {i}?\n"
            f"A) Physical {i}\nB) Network {i}\nC) Session {i}\nD) Transport {i}\n"
            "Correct: B"
            for i in range(start, start + count)
        )

    @staticmethod
    def identification(count: int, start: int = 1) -> str:
        return "\n\n".join(
            f"Q: What device forwards packet {i}?\nA: Router{i}" for i in range(start, start + count)
        )

    @staticmethod
    def true_false(count: int, start: int = 1) -> str:
        return "\n\n".join(
            f"Statement: Static route {i} is configured manually.\n"
            "Answer: True\n"
            f"Explanation: Static route {i} is entered by an administrator."
            for i in range(start, start + count)
        )

    @staticmethod
    def matching(count: int, start: int = 1, header: bool = True) -> str:
        lines = ["Column A | Column B"] if header else []
        lines += [f"Term {i} | Definition {i}" for i in range(start, start + count)]
        return "\n".join(lines)


@pytest.fixture
def quiz_text() -> type[QuizText]:
    """Builders for sample generated text."""
    return QuizText


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    """Factory for fake providers: ``fake_provider(responder)``."""
    return FakeProvider


@pytest.fixture
def failing_responder() -> Callable[[str, str], str]:
    """Responder that always fails like an unreachable model."""

    def respond(system_prompt: str, user_prompt: str) -> str:
        raise ProviderError("connection timed out", provider="fake")

    return respond


@pytest.fixture
def sample_request() -> GenerationRequest:
    """A two-type request for 10 questions."""
    return GenerationRequest(
        source_text="Static routing requires manual configuration of routes. " * 20,
        requested_types=[QuestionType.MULTIPLE_CHOICE, QuestionType.IDENTIFICATION],
        total_count=10,
    )


@pytest.fixture
def mixed_quiz_text(quiz_text: type[QuizText]) -> str:
    """Text with one block of every common type plus model chatter."""
    return "\n\n".join(
        [
            "Here are your questions:",
            quiz_text.multiple_choice(2),
            "Identification Questions:",
            quiz_text.identification(2),
            quiz_text.true_false(1),
            quiz_text.matching(3),
            "Scenario: A branch office loses its WAN link every night.\n"
            "Question: What should the administrator check first?\n"
            "ModelAnswer: Check the scheduled jobs on the edge router and the ISP logs.",
            "Q: All of the following are routing protocols EXCEPT:\n"
            "A) OSPF\nB) RIP\nC) EIGRP\nD) HTTP\nCorrect: D",
        ]
    )
