from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class HookError(Exception):
    """Raised when a hook fails in a way the runner should record."""


class MalformedInputError(HookError):
    """Standard input ended before a complete JSON object was received."""


class HandlerFailure(HookError):
    """A registered handler raised, or returned a response its category does not allow."""


class UnknownCategoryError(HookError):
    """The category argument does not name a known hook category."""


class HookCategory(str, Enum):
    """Lifecycle events the agent can invoke a hook process for."""

    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    NOTIFICATION = "Notification"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    PRE_COMPACT = "PreCompact"
    SESSION_START = "SessionStart"

    @classmethod
    def parse(cls, value: str | None) -> HookCategory | None:
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def require(cls, value: str | None) -> HookCategory:
        category = cls.parse(value)
        if category is None:
            raise UnknownCategoryError(f"unknown hook category {value!r}")
        return category

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_CATEGORIES


# The process must exit as soon as the response for these has been written.
TERMINAL_CATEGORIES = frozenset({HookCategory.STOP, HookCategory.SUBAGENT_STOP})

Handler = Callable[[Any], Any]


@dataclass
class HookHandlers:
    """Registry of optional handlers, one per hook category.

    Each handler receives the tagged payload model for its category and
    returns a response model, a plain dict, or None. Coroutine functions are
    awaited.
    """

    pre_tool_use: Handler | None = None
    post_tool_use: Handler | None = None
    notification: Handler | None = None
    stop: Handler | None = None
    subagent_stop: Handler | None = None
    user_prompt_submit: Handler | None = None
    pre_compact: Handler | None = None
    session_start: Handler | None = None

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def registered(self) -> list[str]:
        return [name for name in self.field_names() if getattr(self, name) is not None]
