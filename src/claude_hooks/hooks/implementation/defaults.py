"""Default handlers: record every event in the session log and stop the
obviously destructive shell commands."""

from __future__ import annotations

import logging

from ...session_log import save_session_data
from ..base import HookHandlers
from ..payloads import (
    NotificationPayload,
    PostToolUsePayload,
    PreToolUsePayload,
    StopPayload,
    SubagentStopPayload,
)
from ..responses import PreToolUseResponse

logger = logging.getLogger(__name__)

DANGEROUS_PATTERNS = ("rm -rf /", "rm -rf ~")


async def pre_tool_use(payload: PreToolUsePayload) -> PreToolUseResponse | None:
    await save_session_data(payload.hook_type.value, payload)

    if payload.tool_name == "Edit" and "file_path" in payload.tool_input:
        logger.info("editing %s", payload.tool_input["file_path"])

    if payload.tool_name == "Bash":
        command = str(payload.tool_input.get("command", ""))
        logger.info("running command: %s", command)
        if any(pattern in command for pattern in DANGEROUS_PATTERNS):
            logger.warning("dangerous command blocked: %s", command)
            return PreToolUseResponse(decision="block", reason=f"Dangerous command detected: {command}")

    return None


async def post_tool_use(payload: PostToolUsePayload) -> None:
    await save_session_data(payload.hook_type.value, payload)
    if payload.tool_name == "Write" and payload.tool_response:
        logger.info("file written")


async def notification(payload: NotificationPayload) -> None:
    await save_session_data(payload.hook_type.value, payload)
    logger.info("notification: %s", payload.message)


async def stop(payload: StopPayload) -> None:
    await save_session_data(payload.hook_type.value, payload)


async def subagent_stop(payload: SubagentStopPayload) -> None:
    await save_session_data(payload.hook_type.value, payload)
    # stop_hook_active means we are already inside a stop hook; doing more risks a loop.
    if payload.stop_hook_active:
        logger.info("stop hook already active, skipping further processing")


handlers = HookHandlers(
    pre_tool_use=pre_tool_use,
    post_tool_use=post_tool_use,
    notification=notification,
    stop=stop,
    subagent_stop=subagent_stop,
)
