"""Pydantic models for the assistant chat endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """One prior message of the conversation, as the chat widget sends it."""

    role: ChatRole
    text: str = ""


class AssistantRequest(BaseModel):
    question: str = Field(default="", description="The user's new question")
    temple_id: Optional[str] = Field(default=None, description="Temple the user is looking at")
    lang: str = Field(default="en", description="Preferred reply language")
    messages: list[ChatTurn] = Field(default_factory=list)
    stream: bool = Field(default=False, description="Reply as server-sent events")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssistantReply(BaseModel):
    answer: str
