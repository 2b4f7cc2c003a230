"""Tests for the assistant service.  The chat model is replaced by a double
for CI determinism; production uses Gemini Flash."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from temple_crowd.assistant.service import (
    AssistantError,
    AssistantService,
    build_messages,
)
from temple_crowd.models.assistant import AssistantRequest


class FakeChatModel:
    """Minimal stand-in for a LangChain chat model."""

    def __init__(self, reply: str = "", chunks: tuple[str, ...] = (), error: Exception | None = None) -> None:
        self.reply = reply
        self.chunks = chunks
        self.error = error
        self.calls: list = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return SimpleNamespace(content=self.reply)

    async def astream(self, messages):
        self.calls.append(messages)
        for chunk in self.chunks:
            yield SimpleNamespace(content=chunk)
        if self.error:
            raise self.error


def _request(**overrides) -> AssistantRequest:
    body = {
        "question": "What time does darshan open?",
        "templeId": "somnath",
        "lang": "hi",
        "messages": [
            {"role": "user", "text": "Namaste"},
            {"role": "assistant", "text": "Namaste! How can I help?"},
        ],
    }
    body.update(overrides)
    return AssistantRequest.model_validate(body)


class TestBuildMessages:
    def test_structure(self) -> None:
        messages = build_messages(_request(), "Helper")
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert isinstance(messages[2], AIMessage)
        assert isinstance(messages[-1], HumanMessage)
        assert messages[-1].content == "What time does darshan open?"

    def test_system_prompt_carries_context(self) -> None:
        prompt = build_messages(_request(), "Helper")[0].content
        assert "Your name is Helper." in prompt
        assert "somnath" in prompt
        assert "language is hi" in prompt

    def test_no_temple_selected(self) -> None:
        prompt = build_messages(_request(templeId=None), "Helper")[0].content
        assert "not selected" in prompt


class TestAssistantService:
    @pytest.mark.asyncio
    async def test_reply_returns_answer(self) -> None:
        model = FakeChatModel(reply="  Darshan opens at 6 AM.  ")
        service = AssistantService(llm_factory=lambda: model)
        assert await service.reply(_request()) == "Darshan opens at 6 AM."
        assert len(model.calls) == 1

    @pytest.mark.asyncio
    async def test_model_is_built_once(self) -> None:
        built = []

        def factory():
            built.append(1)
            return FakeChatModel(reply="ok")

        service = AssistantService(llm_factory=factory)
        await service.reply(_request())
        await service.reply(_request())
        assert len(built) == 1

    @pytest.mark.asyncio
    async def test_empty_answer_is_error(self) -> None:
        service = AssistantService(llm_factory=lambda: FakeChatModel(reply="   "))
        with pytest.raises(AssistantError):
            await service.reply(_request())

    @pytest.mark.asyncio
    async def test_model_failure_is_error(self) -> None:
        service = AssistantService(llm_factory=lambda: FakeChatModel(error=RuntimeError("quota")))
        with pytest.raises(AssistantError):
            await service.reply(_request())

    @pytest.mark.asyncio
    async def test_factory_failure_is_error(self) -> None:
        def factory():
            raise RuntimeError("Gemini API key not found")

        with pytest.raises(AssistantError):
            await AssistantService(llm_factory=factory).reply(_request())

    @pytest.mark.asyncio
    async def test_multipart_content_is_joined(self) -> None:
        model = FakeChatModel()
        model.reply = [{"type": "text", "text": "Slots "}, "are 30 minutes."]
        service = AssistantService(llm_factory=lambda: model)
        assert await service.reply(_request()) == "Slots are 30 minutes."

    @pytest.mark.asyncio
    async def test_stream_yields_chunks(self) -> None:
        model = FakeChatModel(chunks=("Darshan ", "", "opens at 6."))
        service = AssistantService(llm_factory=lambda: model)
        chunks = [c async for c in service.stream(_request())]
        assert chunks == ["Darshan ", "opens at 6."]

    @pytest.mark.asyncio
    async def test_stream_failure_is_error(self) -> None:
        model = FakeChatModel(chunks=("partial",), error=RuntimeError("reset"))
        service = AssistantService(llm_factory=lambda: model)
        with pytest.raises(AssistantError):
            async for _ in service.stream(_request()):
                pass
