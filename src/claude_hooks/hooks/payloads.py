"""Hook payload models.

One model per hook category. The ``hook_type`` tag is always assigned by the
runner from the category argument; whatever the JSON carries under
``hook_event_name`` (or ``hook_type``) is informational only.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .base import HookCategory


class BasePayload(BaseModel):
    """Fields shared by every hook payload."""

    model_config = ConfigDict(extra="allow")

    hook_type: HookCategory
    session_id: str = ""
    transcript_path: str = ""
    hook_event_name: str = ""


class PreToolUsePayload(BasePayload):
    hook_type: Literal[HookCategory.PRE_TOOL_USE] = HookCategory.PRE_TOOL_USE
    tool_name: str = ""
    tool_input: dict[str, Any] = Field(default_factory=dict)


class PostToolUsePayload(BasePayload):
    hook_type: Literal[HookCategory.POST_TOOL_USE] = HookCategory.POST_TOOL_USE
    tool_name: str = ""
    tool_input: dict[str, Any] = Field(default_factory=dict)
    tool_response: Any = Field(default_factory=dict)


class NotificationPayload(BasePayload):
    hook_type: Literal[HookCategory.NOTIFICATION] = HookCategory.NOTIFICATION
    message: str = ""
    title: str | None = None


class StopPayload(BasePayload):
    hook_type: Literal[HookCategory.STOP] = HookCategory.STOP
    stop_hook_active: bool = False


class SubagentStopPayload(BasePayload):
    hook_type: Literal[HookCategory.SUBAGENT_STOP] = HookCategory.SUBAGENT_STOP
    stop_hook_active: bool = False


class UserPromptSubmitPayload(BasePayload):
    hook_type: Literal[HookCategory.USER_PROMPT_SUBMIT] = HookCategory.USER_PROMPT_SUBMIT
    prompt: str = ""


class PreCompactPayload(BasePayload):
    hook_type: Literal[HookCategory.PRE_COMPACT] = HookCategory.PRE_COMPACT
    trigger: Literal["manual", "auto"] = "manual"


class SessionStartPayload(BasePayload):
    hook_type: Literal[HookCategory.SESSION_START] = HookCategory.SESSION_START
    source: str = ""


def tag_payload(model: type[BasePayload], data: dict[str, Any], category: HookCategory) -> BasePayload:
    """Validate ``data`` as ``model`` with the dispatch tag forced to ``category``."""

    tagged = dict(data)
    tagged["hook_type"] = category
    return model.model_validate(tagged)
