"""Tests for the Study Tutor Agent."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from study_royale.agents.tutor import StudyTutor
from study_royale.models.quiz import ChoiceQuestion, FreeTextQuestion


@pytest.fixture
def quiz_questions():
    """Two parsed questions to discuss."""
    return [
        FreeTextQuestion(prompt="What forwards packets between networks?", reference_answer="Router"),
        ChoiceQuestion(
            prompt="Which protocol is link state?",
            options={"A": "RIP", "B": "OSPF", "C": "BGP", "D": "IGRP"},
            correct_label="B",
        ),
    ]


class TestStudyTutor:
    """Test tutor conversations."""

    def test_system_prompt_lists_questions(self, fake_provider, quiz_questions):
        """Test that questions and answers are given as context."""
        tutor = StudyTutor(fake_provider(lambda s, u: "ok"))
        prompt = tutor.system_prompt(quiz_questions)

        assert "Q1: What forwards packets between networks?" in prompt
        assert "Correct Answer: Router" in prompt
        assert "Correct Answer: B) OSPF" in prompt

    def test_source_truncated(self, fake_provider):
        """Test that only the first 2000 characters of material are used."""
        tutor = StudyTutor(fake_provider(lambda s, u: "ok"))
        prompt = tutor.system_prompt(source_text="a" * 2000 + "b" * 100)

        assert "a" * 2000 in prompt
        assert "b" not in prompt.split("Study Material Context:")[1]

    def test_history_limited_to_last_ten(self, fake_provider):
        """Test that only the last ten turns are sent."""
        history = [("user" if i % 2 == 0 else "assistant", f"turn {i}") for i in range(14)]
        messages = StudyTutor(fake_provider(lambda s, u: "ok")).build_messages("next", history=history)

        assert isinstance(messages[0], SystemMessage)
        assert len(messages) == 12
        assert messages[1].content == "turn 4"
        assert isinstance(messages[1], HumanMessage)
        assert isinstance(messages[2], AIMessage)
        assert messages[-1].content == "next"

    def test_ask_returns_reply(self, fake_provider, quiz_questions):
        """Test a full exchange."""
        provider = fake_provider(lambda s, u: "OSPF builds a map of the network.")
        reply = StudyTutor(provider).ask("Why is B correct?", questions=quiz_questions)

        assert reply == "OSPF builds a map of the network."
        assert provider.calls[0][1] == "Why is B correct?"

    def test_blank_message_rejected(self, fake_provider):
        """Test that an empty message is an error."""
        with pytest.raises(ValueError):
            StudyTutor(fake_provider(lambda s, u: "ok")).ask("  ")
