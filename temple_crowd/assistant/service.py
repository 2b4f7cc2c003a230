"""AssistantService: the temple site's chat helper.

Builds a conversation (system prompt + history + new question) and sends it
to a chat model, either for a single reply or as a stream of text chunks.

The chat model comes from an injectable factory.  Production uses Gemini
Flash via langchain-google-genai; tests pass a factory returning a double.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import AsyncIterator, Callable, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from temple_crowd.config import settings
from temple_crowd.models.assistant import AssistantRequest, ChatRole

logger = logging.getLogger(__name__)

LLMFactory = Callable[[], object]


class AssistantError(Exception):
    """Raised when the chat model fails or returns no usable answer."""


def _default_llm_factory():
    """Create a Gemini Flash instance from environment config."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    api_key = os.environ.get("GOOGLE_API_KEY") or os.environ.get("TEMPLE_GEMINI_API_KEY")
    if not api_key:
        raise RuntimeError(
            "Gemini API key not found. Set GOOGLE_API_KEY or TEMPLE_GEMINI_API_KEY "
            "in your environment variables."
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=api_key,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


def system_prompt(temple_id: Optional[str], lang: str, assistant_name: str) -> str:
    return (
        "You are a helpful assistant for a temple information website.\n"
        f"Your name is {assistant_name}.\n"
        "You can answer questions about booking, slots, timings, heatmaps, "
        "and how to use the site.\n"
        f"The current temple context is {temple_id or 'not selected'}.\n"
        f"The user's language is {lang}.\n"
        "Be concise and helpful."
    )


def build_messages(request: AssistantRequest, assistant_name: str) -> list[BaseMessage]:
    messages: list[BaseMessage] = [
        SystemMessage(content=system_prompt(request.temple_id, request.lang, assistant_name))
    ]
    for turn in request.messages:
        if turn.role is ChatRole.ASSISTANT:
            messages.append(AIMessage(content=turn.text))
        else:
            messages.append(HumanMessage(content=turn.text))
    messages.append(HumanMessage(content=request.question))
    return messages


def _text_of(message: object) -> str:
    content = getattr(message, "content", "")
    if isinstance(content, list):
        # Multi-part content: keep the text parts only
        return "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
        )
    return content or ""


class AssistantService:
    """Sends conversations to the chat model.

    Args:
        llm_factory: Zero-arg callable returning a LangChain chat model.
            The model is created lazily on first use.
        assistant_name: Name the assistant introduces itself with.
    """

    def __init__(
        self,
        llm_factory: Optional[LLMFactory] = None,
        assistant_name: str = settings.assistant_name,
    ) -> None:
        self._llm_factory = llm_factory or _default_llm_factory
        self._assistant_name = assistant_name
        self._llm = None

    def _model(self):
        if self._llm is None:
            self._llm = self._llm_factory()
        return self._llm

    async def reply(self, request: AssistantRequest) -> str:
        """Return the full answer text.

        Raises:
            AssistantError: If the model call fails or the answer is empty.
        """
        messages = build_messages(request, self._assistant_name)
        try:
            response = await asyncio.to_thread(self._model().invoke, messages)
        except Exception as exc:
            logger.error("Assistant model invocation failed: %s", exc)
            raise AssistantError(str(exc)) from exc

        answer = _text_of(response).strip()
        if not answer:
            raise AssistantError("No answer from the assistant model")
        logger.info("Assistant answer length: %d chars", len(answer))
        return answer

    async def stream(self, request: AssistantRequest) -> AsyncIterator[str]:
        """Yield answer text incrementally as the model produces it.

        Raises:
            AssistantError: If the model call fails mid-stream.
        """
        messages = build_messages(request, self._assistant_name)
        try:
            async for chunk in self._model().astream(messages):
                text = _text_of(chunk)
                if text:
                    yield text
        except Exception as exc:
            logger.error("Assistant streaming failed: %s", exc)
            raise AssistantError(str(exc)) from exc
