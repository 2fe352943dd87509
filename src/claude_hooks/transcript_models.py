"""
Claude Code Transcript Entries

Models for the lines of a Claude Code ``.jsonl`` transcript. Each line holds
exactly one entry: a compaction summary, a user message, or an assistant
message. Lines that do not validate as one of these are not messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class ContentBlock(BaseModel):
    """One block of a message's content list (text, tool_use, tool_result...)."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    text: str | None = None
    content: Any = None
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None
    tool_use_id: str | None = None
    is_error: bool | None = None

    @property
    def text_value(self) -> str | None:
        # User text blocks have been seen with the text under either key.
        if isinstance(self.text, str):
            return self.text
        if isinstance(self.content, str):
            return self.content
        return None


class TranscriptSummary(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Literal["summary"]
    summary: str = ""
    leaf_uuid: str | None = Field(default=None, alias="leafUuid")

    @property
    def text(self) -> str:
        return self.summary


class _SessionEntry(BaseModel):
    """Fields Claude Code records on every user and assistant line."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    parent_uuid: str | None = Field(default=None, alias="parentUuid")
    is_sidechain: bool | None = Field(default=None, alias="isSidechain")
    user_type: str | None = Field(default=None, alias="userType")
    cwd: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    version: str | None = None
    git_branch: str | None = Field(default=None, alias="gitBranch")
    uuid: str | None = None
    timestamp: str | None = None


class UserMessageBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str = "user"
    content: str | list[ContentBlock] = ""


class TranscriptUserMessage(_SessionEntry):
    type: Literal["user"]
    message: UserMessageBody
    tool_use_result: Any = Field(default=None, alias="toolUseResult")

    @property
    def text(self) -> str:
        content = self.message.content
        if isinstance(content, str):
            return content
        parts = [block.text_value for block in content if block.type == "text"]
        return "\n".join(part for part in parts if part is not None)


class AssistantMessageBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str = "message"
    role: str = "assistant"
    model: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: dict[str, Any] | None = None


class TranscriptAssistantMessage(_SessionEntry):
    type: Literal["assistant"]
    message: AssistantMessageBody
    request_id: str | None = Field(default=None, alias="requestId")

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.message.content if block.type == "text" and block.text)

    @property
    def tool_uses(self) -> list[ContentBlock]:
        return [
            block
            for block in self.message.content
            if block.type == "tool_use" and isinstance(block.name, str) and block.input is not None
        ]


TranscriptMessage = Annotated[
    Union[TranscriptSummary, TranscriptUserMessage, TranscriptAssistantMessage],
    Field(discriminator="type"),
]

_message_adapter: TypeAdapter[TranscriptMessage] = TypeAdapter(TranscriptMessage)


def parse_transcript_line(line: str) -> TranscriptSummary | TranscriptUserMessage | TranscriptAssistantMessage | None:
    """Parse one transcript line, returning None for anything that is not a message."""

    if not line.strip():
        return None
    try:
        return _message_adapter.validate_json(line)
    except ValidationError:
        return None


@dataclass
class ToolUse:
    """A tool invocation recorded in an assistant message."""

    tool: str
    input: dict[str, Any]
    timestamp: str | None


@dataclass
class SessionMetadata:
    """Session facts derived from a transcript."""

    session_id: str | None = None
    version: str | None = None
    cwd: str | None = None
    git_branch: str | None = None
    first_timestamp: str | None = None
    last_timestamp: str | None = None


@dataclass
class ConversationTurn:
    role: Literal["user", "assistant"]
    content: str
