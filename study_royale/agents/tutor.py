"""Study Tutor Agent - Answers follow-up questions about a quiz and its material."""

import logging
from collections.abc import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from study_royale.models.quiz import ParsedQuestion
from study_royale.providers.chat import ChatProvider

logger = logging.getLogger(__name__)

TUTOR_SYSTEM_PROMPT = (
    "You are a helpful and encouraging study tutor. Help students understand quiz "
    "questions and concepts from their study material. Explain answers clearly, give "
    "examples and additional context when needed. Be patient and supportive."
)
HISTORY_TURNS = 10
DEFAULT_TUTOR_CHAR_LIMIT = 2000


def questions_context(questions: Sequence[ParsedQuestion]) -> str:
    """List quiz questions with their correct answers for the system prompt."""
    lines = ["Quiz Questions Context:"]
    for index, question in enumerate(questions, 1):
        lines.append(f"\nQ{index}: {question.text}\nCorrect Answer: {question.answer_text}")
    return "\n".join(lines)


class StudyTutor:
    """Chat about a finished quiz or the study material behind it."""

    def __init__(self, provider: ChatProvider, source_char_limit: int = DEFAULT_TUTOR_CHAR_LIMIT):
        self.provider = provider
        self.source_char_limit = source_char_limit

    def system_prompt(
        self,
        questions: Sequence[ParsedQuestion] | None = None,
        source_text: str | None = None,
    ) -> str:
        prompt = TUTOR_SYSTEM_PROMPT
        if questions:
            prompt += "\n\n" + questions_context(questions)
        if source_text:
            prompt += f"\n\nStudy Material Context:\n{source_text[: self.source_char_limit]}"
        return prompt

    def build_messages(
        self,
        message: str,
        questions: Sequence[ParsedQuestion] | None = None,
        source_text: str | None = None,
        history: Sequence[tuple[str, str]] | None = None,
    ) -> list[BaseMessage]:
        """
        Assemble the chat sent to the model.

        Args:
            message: The student's new message
            questions: Quiz questions to explain
            source_text: Study material (only a prefix is used)
            history: Earlier ``(role, content)`` turns, role "user" or "assistant"

        Returns:
            System message, the last ten history turns and the new message
        """
        messages: list[BaseMessage] = [SystemMessage(content=self.system_prompt(questions, source_text))]
        for role, content in list(history or [])[-HISTORY_TURNS:]:
            if role == "user":
                messages.append(HumanMessage(content=content))
            else:
                messages.append(AIMessage(content=content))
        messages.append(HumanMessage(content=message))
        return messages

    def ask(
        self,
        message: str,
        questions: Sequence[ParsedQuestion] | None = None,
        source_text: str | None = None,
        history: Sequence[tuple[str, str]] | None = None,
    ) -> str:
        """
        Answer a student message.

        Raises:
            ValueError: message is blank
            ProviderError: the model call failed
        """
        if not message or not message.strip():
            raise ValueError("Message is required")
        messages = self.build_messages(message, questions, source_text, history)
        logger.debug("Tutor request with %d messages", len(messages))
        return self.provider.chat(messages)
