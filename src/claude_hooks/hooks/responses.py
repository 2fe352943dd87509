"""Hook response models.

Each category accepts a fixed set of fields; anything else is rejected so a
handler cannot send the agent a response it would misread. Fields are
declared with Python names and serialized under the agent's camelCase wire
names.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .base import HookCategory

# Written instead of the handler's result whenever the handler fails.
SAFE_DEFAULT_RESPONSE: dict[str, Any] = {"action": "continue"}


class BaseResponse(BaseModel):
    """Fields every category may return."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    continue_: bool | None = Field(default=None, alias="continue")
    stop_reason: str | None = Field(default=None, alias="stopReason")
    suppress_output: bool | None = Field(default=None, alias="suppressOutput")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HookSpecificOutput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    hook_event_name: HookCategory = Field(alias="hookEventName")
    additional_context: str | None = Field(default=None, alias="additionalContext")


class PreToolUseResponse(BaseResponse):
    permission_decision: Literal["allow", "deny", "ask"] | None = Field(
        default=None, alias="permissionDecision"
    )
    permission_decision_reason: str | None = Field(default=None, alias="permissionDecisionReason")
    # Older approve/block form, still honoured by the agent.
    decision: Literal["approve", "block"] | None = None
    reason: str | None = None


class PostToolUseResponse(BaseResponse):
    decision: Literal["block"] | None = None
    reason: str | None = None


class NotificationResponse(BaseResponse):
    pass


class StopResponse(BaseResponse):
    decision: Literal["block"] | None = None
    reason: str | None = None

    @model_validator(mode="after")
    def _reason_required_when_blocking(self) -> StopResponse:
        if self.decision == "block" and not self.reason:
            raise ValueError("reason is required when decision is 'block'")
        return self


class SubagentStopResponse(StopResponse):
    pass


class UserPromptSubmitResponse(BaseResponse):
    decision: Literal["approve", "block"] | None = None
    reason: str | None = None
    context_files: list[str] | None = Field(default=None, alias="contextFiles")
    updated_prompt: str | None = Field(default=None, alias="updatedPrompt")
    hook_specific_output: HookSpecificOutput | None = Field(default=None, alias="hookSpecificOutput")


class PreCompactResponse(BaseResponse):
    decision: Literal["approve", "block"] | None = None
    reason: str | None = None


class SessionStartResponse(BaseResponse):
    decision: Literal["approve", "block"] | None = None
    reason: str | None = None
    hook_specific_output: HookSpecificOutput | None = Field(default=None, alias="hookSpecificOutput")


def coerce_response(model: type[BaseResponse], result: Any) -> dict[str, Any]:
    """Validate a handler's return value against ``model`` and return its wire form.

    ``None`` means "no opinion" and becomes the empty object. A response
    model of the wrong category is re-validated so its field set is checked.
    """

    if result is None:
        return {}
    if isinstance(result, model):
        return result.to_wire()
    if isinstance(result, BaseModel):
        result = result.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(result, dict):
        raise TypeError(f"handler returned {type(result).__name__}, expected a mapping or {model.__name__}")
    return model.model_validate(result).to_wire()
