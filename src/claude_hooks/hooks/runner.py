from __future__ import annotations

import asyncio
import codecs
import contextlib
import inspect
import json
import logging
import os
import sys
from collections.abc import AsyncIterable, AsyncIterator, Callable
from dataclasses import dataclass, field
from typing import Any, NamedTuple, TextIO

from ..logging_config import configure_logging
from ..transcript_reader import TranscriptStore, get_default_store
from . import payloads, responses
from .base import HandlerFailure, HookCategory, HookHandlers, MalformedInputError, UnknownCategoryError

logger = logging.getLogger(__name__)

STDIN_CHUNK_SIZE = 64 * 1024


class Route(NamedTuple):
    handler: str
    payload_model: type[payloads.BasePayload]
    response_model: type[responses.BaseResponse]


# One entry per HookCategory; tests check nothing is missing.
ROUTES: dict[HookCategory, Route] = {
    HookCategory.PRE_TOOL_USE: Route("pre_tool_use", payloads.PreToolUsePayload, responses.PreToolUseResponse),
    HookCategory.POST_TOOL_USE: Route("post_tool_use", payloads.PostToolUsePayload, responses.PostToolUseResponse),
    HookCategory.NOTIFICATION: Route("notification", payloads.NotificationPayload, responses.NotificationResponse),
    HookCategory.STOP: Route("stop", payloads.StopPayload, responses.StopResponse),
    HookCategory.SUBAGENT_STOP: Route("subagent_stop", payloads.SubagentStopPayload, responses.SubagentStopResponse),
    HookCategory.USER_PROMPT_SUBMIT: Route(
        "user_prompt_submit", payloads.UserPromptSubmitPayload, responses.UserPromptSubmitResponse
    ),
    HookCategory.PRE_COMPACT: Route("pre_compact", payloads.PreCompactPayload, responses.PreCompactResponse),
    HookCategory.SESSION_START: Route("session_start", payloads.SessionStartPayload, responses.SessionStartResponse),
}


async def read_stdin_chunks(size: int = STDIN_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield raw stdin chunks as they arrive, until EOF."""
    fd = sys.stdin.fileno()
    while True:
        chunk = await asyncio.to_thread(os.read, fd, size)
        if not chunk:
            return
        yield chunk


async def read_json_input(chunks: AsyncIterable[bytes | str]) -> Any:
    """Accumulate chunks until the buffer parses as one JSON value.

    A failed parse only means the value is not complete yet. Raises
    MalformedInputError if the stream ends first.
    """
    decoder = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    try:
        async for chunk in chunks:
            buffer += decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            try:
                return json.loads(buffer)
            except json.JSONDecodeError:
                continue
        buffer += decoder.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"stdin is not valid UTF-8: {e}") from e

    if not buffer.strip():
        raise MalformedInputError("stdin closed without a payload")
    try:
        return json.loads(buffer)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"incomplete JSON in buffer ({len(buffer)} chars): {e}") from e


@dataclass
class HookRunner:
    """Runs one hook event: read the payload, dispatch on the category, answer.

    The category always comes from the caller's argument. The response is a
    single JSON line on ``stdout``; handler failures are logged and answered
    with the safe default instead.
    """

    handlers: HookHandlers = field(default_factory=HookHandlers)
    stdout: TextIO | None = None
    exit: Callable[[int], Any] = sys.exit
    transcript_store: TranscriptStore | None = None

    async def dispatch(self, category: HookCategory | None, data: dict[str, Any]) -> dict[str, Any]:
        """Return the wire response for ``data`` under ``category``."""
        route = ROUTES.get(category) if category is not None else None
        if route is None:
            return {}

        handler = getattr(self.handlers, route.handler)
        if handler is None:
            return {}

        try:
            return await self._invoke(handler, route, category, data)
        except HandlerFailure:
            logger.exception("%s handler failed for session %s", category.value, data.get("session_id", "?"))
            return dict(responses.SAFE_DEFAULT_RESPONSE)

    async def _invoke(self, handler, route: Route, category: HookCategory, data: dict[str, Any]) -> dict[str, Any]:
        try:
            payload = payloads.tag_payload(route.payload_model, data, category)
            # Anything a handler prints must not reach the response stream.
            with contextlib.redirect_stdout(sys.stderr):
                result = handler(payload)
                if inspect.isawaitable(result):
                    result = await result
            return responses.coerce_response(route.response_model, result)
        except Exception as e:
            raise HandlerFailure(f"{route.handler} failed: {e}") from e

    def emit(self, response: dict[str, Any]) -> None:
        out = self.stdout or sys.stdout
        out.write(json.dumps(response) + "\n")
        out.flush()

    async def run(self, category_arg: str | None, chunks: AsyncIterable[bytes | str]) -> int:
        """Process exactly one event and return the process exit code."""
        category: HookCategory | None
        try:
            category = HookCategory.require(category_arg)
        except UnknownCategoryError as e:
            logger.warning("%s, answering with an empty response", e)
            category = None

        try:
            data = await read_json_input(chunks)
        except MalformedInputError as e:
            logger.error("malformed hook input: %s", e)
            return 1
        if not isinstance(data, dict):
            logger.error("malformed hook input: expected a JSON object, got %s", type(data).__name__)
            return 1

        store = self.transcript_store
        if store is not None:
            # Each event starts from a clean transcript cache.
            store.clear_transcript_cache()
            store.cache.start_sweeper()
        try:
            response = await self.dispatch(category, data)
        finally:
            if store is not None:
                await store.cache.stop_sweeper()

        self.emit(response)
        if category is not None and category.is_terminal:
            self.exit(0)
        return 0


def run_hook(handlers: HookHandlers, argv: list[str] | None = None) -> None:
    """Process entry point: ``<script> <HookCategory>`` with the payload on stdin."""
    configure_logging()
    argv = sys.argv if argv is None else argv
    category_arg = argv[1] if len(argv) > 1 else None

    runner = HookRunner(handlers=handlers, transcript_store=get_default_store())
    code = asyncio.run(runner.run(category_arg, read_stdin_chunks()))
    if code:
        sys.exit(code)
