"""Text-completion providers backed by LangChain chat models."""

import logging
from collections.abc import Sequence
from typing import Any

from botocore.config import Config
from langchain_anthropic import ChatAnthropic
from langchain_aws import ChatBedrock
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from study_royale.config.settings import Settings, get_settings
from study_royale.errors import ProviderError

logger = logging.getLogger(__name__)

# (system prompt, user prompt)
PromptPair = tuple[str, str]


def message_text(message: Any) -> str:
    """Extract plain text from a chat model reply (string or content blocks)."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatProvider:
    """
    Wrap a chat model behind ``complete(system_prompt, user_prompt) -> str``.

    Every failure, including an empty reply, surfaces as ``ProviderError`` so
    callers only ever handle one exception type.
    """

    def __init__(self, llm: BaseChatModel, name: str, max_concurrency: int = 4):
        self.llm = llm
        self.name = name
        self.max_concurrency = max_concurrency

    def _reply_text(self, reply: Any) -> str:
        text = message_text(reply).strip()
        if not text:
            raise ProviderError(f"{self.name} returned an empty response", provider=self.name)
        return text

    def chat(self, messages: Sequence[BaseMessage]) -> str:
        """Send a full message list and return the reply text."""
        try:
            reply = self.llm.invoke(list(messages))
        except Exception as e:
            raise ProviderError(f"{self.name} call failed: {e}", provider=self.name) from e
        return self._reply_text(reply)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Single completion for a system/user prompt pair."""
        return self.chat([SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)])

    def complete_many(self, prompts: Sequence[PromptPair]) -> list[str | ProviderError]:
        """
        Run independent completions concurrently.

        Results keep the order of ``prompts`` regardless of completion order;
        a failed call yields a ``ProviderError`` in its slot instead of raising.
        """
        if not prompts:
            return []

        batches = [
            [SystemMessage(content=system), HumanMessage(content=user)] for system, user in prompts
        ]
        replies = self.llm.batch(
            batches,
            config={"max_concurrency": self.max_concurrency},
            return_exceptions=True,
        )

        results: list[str | ProviderError] = []
        for reply in replies:
            if isinstance(reply, Exception):
                error = ProviderError(f"{self.name} call failed: {reply}", provider=self.name)
                error.__cause__ = reply
                results.append(error)
                continue
            try:
                results.append(self._reply_text(reply))
            except ProviderError as e:
                results.append(e)
        return results


def _bedrock_model(settings: Settings, temperature: float, max_tokens: int) -> ChatBedrock:
    credentials = {}
    # Without explicit keys boto uses its default credential chain
    if settings.aws_api_key_id and settings.aws_api_key_secret:
        credentials = {
            "aws_access_key_id": settings.aws_api_key_id,
            "aws_secret_access_key": settings.aws_api_key_secret,
        }
    return ChatBedrock(
        model=settings.primary_model_name,
        region_name=settings.aws_default_region,
        temperature=temperature,
        max_tokens=max_tokens,
        config=Config(
            connect_timeout=10,
            read_timeout=settings.request_timeout_seconds,
            retries={"max_attempts": settings.provider_max_retries + 1},
        ),
        **credentials,
    )


def build_primary_provider(settings: Settings | None = None) -> ChatProvider:
    """Bulk question generation model (Bedrock)."""
    settings = settings or get_settings()
    llm = _bedrock_model(settings, settings.primary_temperature, settings.primary_max_tokens)
    return ChatProvider(llm, name="primary", max_concurrency=settings.max_concurrency)


def build_secondary_provider(settings: Settings | None = None) -> ChatProvider:
    """Deficit-filling model (Anthropic API)."""
    settings = settings or get_settings()
    # ChatAnthropic reads ANTHROPIC_API_KEY itself when no key is configured
    credentials = {"api_key": settings.anthropic_api_key} if settings.anthropic_api_key else {}
    llm = ChatAnthropic(
        model=settings.secondary_model_name,
        temperature=settings.secondary_temperature,
        max_tokens=settings.secondary_max_tokens,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.provider_max_retries,
        **credentials,
    )
    return ChatProvider(llm, name="secondary", max_concurrency=settings.max_concurrency)


def build_checker_provider(settings: Settings | None = None) -> ChatProvider:
    """Low-temperature model for grading free-text answers."""
    settings = settings or get_settings()
    llm = _bedrock_model(settings, settings.checker_temperature, settings.checker_max_tokens)
    return ChatProvider(llm, name="checker", max_concurrency=settings.max_concurrency)


def build_tutor_provider(settings: Settings | None = None) -> ChatProvider:
    """Conversational model for the study tutor."""
    settings = settings or get_settings()
    llm = _bedrock_model(settings, settings.tutor_temperature, settings.tutor_max_tokens)
    return ChatProvider(llm, name="tutor", max_concurrency=1)
