"""Tests for LangChain-backed chat providers."""

from typing import Any

import pytest
from langchain_core.language_models.chat_models import SimpleChatModel
from langchain_core.messages import AIMessage, HumanMessage

from study_royale.errors import ProviderError
from study_royale.providers.chat import ChatProvider, message_text


class EchoChatModel(SimpleChatModel):
    """Replies with the user message; "fail" raises and "empty" returns nothing."""

    @property
    def _llm_type(self) -> str:
        return "echo"

    def _call(self, messages: list[Any], stop: Any = None, run_manager: Any = None, **kwargs: Any) -> str:
        text = messages[-1].content
        if "fail" in text:
            raise RuntimeError("service unavailable")
        if "empty" in text:
            return "   "
        return f"echo: {text}"


@pytest.fixture
def provider() -> ChatProvider:
    return ChatProvider(EchoChatModel(), name="primary", max_concurrency=2)


class TestMessageText:
    """Test reply text extraction."""

    def test_string_content(self):
        """Test plain string replies."""
        assert message_text(AIMessage(content="hello")) == "hello"

    def test_block_content(self):
        """Test content block replies."""
        message = AIMessage(content=[{"type": "text", "text": "Q: "}, {"type": "text", "text": "Why?"}])

        assert message_text(message) == "Q: Why?"


class TestChatProvider:
    """Test the provider wrapper."""

    def test_complete(self, provider: ChatProvider):
        """Test a single completion."""
        assert provider.complete("system", "hi") == "echo: hi"

    def test_chat(self, provider: ChatProvider):
        """Test sending a message list."""
        assert provider.chat([HumanMessage(content="there")]) == "echo: there"

    def test_failure_becomes_provider_error(self, provider: ChatProvider):
        """Test that model errors surface as ProviderError."""
        with pytest.raises(ProviderError) as exc_info:
            provider.complete("system", "please fail")

        assert exc_info.value.provider == "primary"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_empty_reply_is_an_error(self, provider: ChatProvider):
        """Test that a blank reply is a provider error."""
        with pytest.raises(ProviderError):
            provider.complete("system", "empty please")

    def test_complete_many_keeps_order(self, provider: ChatProvider):
        """Test that results line up with prompts and failures stay in their slot."""
        results = provider.complete_many(
            [("s", "one"), ("s", "fail two"), ("s", "three"), ("s", "empty four")]
        )

        assert results[0] == "echo: one"
        assert isinstance(results[1], ProviderError)
        assert results[2] == "echo: three"
        assert isinstance(results[3], ProviderError)

    def test_complete_many_empty(self, provider: ChatProvider):
        """Test that no prompts means no calls."""
        assert provider.complete_many([]) == []
