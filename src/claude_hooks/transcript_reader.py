"""
Claude Code Transcript Reader

Streams messages out of Claude Code's ``.jsonl`` transcripts and answers the
questions hooks usually ask about a session: what the user first asked, what
happened recently, which tools ran, and where the session was started.

Every query reads the file lazily, one line at a time, so transcripts of any
size are scanned in bounded memory. Read failures are logged and turn into an
empty result; a missing transcript never fails the hook that asked for it.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import AsyncIterator
from contextlib import aclosing

import aiofiles

from .simple_config import get_cache_ttl
from .transcript_cache import TranscriptCache
from .transcript_models import (
    ConversationTurn,
    SessionMetadata,
    ToolUse,
    TranscriptAssistantMessage,
    TranscriptSummary,
    TranscriptUserMessage,
    parse_transcript_line,
)

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024

Message = TranscriptSummary | TranscriptUserMessage | TranscriptAssistantMessage
PathLike = str | os.PathLike


class TranscriptReadError(Exception):
    """The transcript file could not be opened or decoded."""


class TranscriptStore:
    """Query API over Claude Code transcripts with a per-path message cache."""

    def __init__(self, cache: TranscriptCache | None = None, chunk_size: int = READ_CHUNK_SIZE):
        self.cache = cache if cache is not None else TranscriptCache()
        self.chunk_size = chunk_size

    async def _raw_lines(self, path: PathLike) -> AsyncIterator[str]:
        async with aiofiles.open(path, "r", encoding="utf-8", buffering=self.chunk_size) as f:
            async for line in f:
                yield line

    async def _iter_messages(self, path: PathLike) -> AsyncIterator[Message]:
        try:
            async with aclosing(self._raw_lines(path)) as lines:
                async for line in lines:
                    message = parse_transcript_line(line)
                    if message is not None:
                        yield message
        except (OSError, UnicodeDecodeError) as e:
            raise TranscriptReadError(f"cannot read transcript {os.fspath(path)!r}: {e}") from e

    async def read_transcript_lines(self, path: PathLike) -> AsyncIterator[Message]:
        """Yield each parsable message of the transcript, in file order.

        Single pass and forward only; call again to start over. Lines that
        are blank, not JSON, or not a known entry type are skipped.
        """
        try:
            async with aclosing(self._iter_messages(path)) as messages:
                async for message in messages:
                    yield message
        except TranscriptReadError as e:
            logger.warning("%s", e)

    async def get_initial_message(self, path: PathLike) -> str | None:
        """Return the text of the first user message, reading no further than it."""
        async with aclosing(self.read_transcript_lines(path)) as messages:
            async for message in messages:
                if not isinstance(message, TranscriptUserMessage) or message.message.role != "user":
                    continue
                if isinstance(message.message.content, str):
                    return message.message.content
                text = message.text
                if text:
                    return text
        return None

    async def get_all_messages(self, path: PathLike, use_cache: bool = True) -> list[Message]:
        """Return every message of the transcript.

        With ``use_cache`` a result read less than one TTL ago is returned
        without touching the file; otherwise the file is read once and the
        result replaces the cached entry. A failed read is not cached.
        """
        if use_cache:
            cached = self.cache.get(path)
            if cached is not None:
                return list(cached)

        messages: list[Message] = []
        try:
            async with aclosing(self._iter_messages(path)) as stream:
                async for message in stream:
                    messages.append(message)
        except TranscriptReadError as e:
            logger.warning("%s", e)
            return messages

        if use_cache:
            self.cache.put(path, messages)
        return messages

    async def get_last_n_messages(self, path: PathLike, n: int) -> list[Message]:
        """Return the final ``n`` messages in order, holding at most ``n`` at a time."""
        if n <= 0:
            return []
        window: deque[Message] = deque(maxlen=n)
        async for message in self.read_transcript_lines(path):
            window.append(message)
        return list(window)

    async def search_messages(
        self,
        path: PathLike,
        text: str,
        case_sensitive: bool = False,
        limit: int | None = None,
    ) -> AsyncIterator[Message]:
        """Yield user and assistant messages whose text contains ``text``.

        Matching ignores case unless ``case_sensitive``. Reading stops as
        soon as ``limit`` messages have been yielded.
        """
        if limit is not None and limit <= 0:
            return
        needle = text if case_sensitive else text.lower()
        found = 0
        async with aclosing(self.read_transcript_lines(path)) as messages:
            async for message in messages:
                if isinstance(message, TranscriptSummary):
                    continue
                haystack = message.text if case_sensitive else message.text.lower()
                if needle not in haystack:
                    continue
                yield message
                found += 1
                if limit is not None and found >= limit:
                    return

    async def stream_tool_usage(self, path: PathLike) -> AsyncIterator[ToolUse]:
        async for message in self.read_transcript_lines(path):
            if not isinstance(message, TranscriptAssistantMessage):
                continue
            for block in message.tool_uses:
                yield ToolUse(tool=block.name, input=block.input, timestamp=message.timestamp)

    async def get_tool_usage(self, path: PathLike) -> list[ToolUse]:
        return [usage async for usage in self.stream_tool_usage(path)]

    async def get_session_metadata(self, path: PathLike) -> SessionMetadata:
        """Session id, version, cwd and branch of the first user/assistant line,
        plus the first and last timestamps seen."""
        first = last = None
        async for message in self.read_transcript_lines(path):
            if isinstance(message, TranscriptSummary):
                continue
            if first is None:
                first = message
            last = message

        if first is None:
            return SessionMetadata()
        return SessionMetadata(
            session_id=first.session_id,
            version=first.version,
            cwd=first.cwd,
            git_branch=first.git_branch,
            first_timestamp=first.timestamp,
            last_timestamp=last.timestamp,
        )

    async def stream_conversation_history(self, path: PathLike) -> AsyncIterator[ConversationTurn]:
        """Yield the user/assistant exchange as plain text turns, skipping empty ones."""
        async for message in self.read_transcript_lines(path):
            if isinstance(message, TranscriptUserMessage):
                if message.message.role != "user":
                    continue
                role = "user"
            elif isinstance(message, TranscriptAssistantMessage):
                role = "assistant"
            else:
                continue
            content = message.text
            if content:
                yield ConversationTurn(role=role, content=content)

    async def get_conversation_history(self, path: PathLike) -> list[ConversationTurn]:
        return [turn async for turn in self.stream_conversation_history(path)]

    def clear_transcript_cache(self, path: PathLike | None = None) -> None:
        self.cache.invalidate(path)


# Global instance for easy access
_default_store: TranscriptStore | None = None


def get_default_store() -> TranscriptStore:
    """Get the process-wide store used by the module-level functions."""
    global _default_store
    if _default_store is None:
        _default_store = TranscriptStore(TranscriptCache(ttl=get_cache_ttl()))
    return _default_store


def read_transcript_lines(path: PathLike) -> AsyncIterator[Message]:
    return get_default_store().read_transcript_lines(path)


async def get_initial_message(path: PathLike) -> str | None:
    return await get_default_store().get_initial_message(path)


async def get_all_messages(path: PathLike, use_cache: bool = True) -> list[Message]:
    return await get_default_store().get_all_messages(path, use_cache)


async def get_last_n_messages(path: PathLike, n: int) -> list[Message]:
    return await get_default_store().get_last_n_messages(path, n)


def search_messages(
    path: PathLike, text: str, case_sensitive: bool = False, limit: int | None = None
) -> AsyncIterator[Message]:
    return get_default_store().search_messages(path, text, case_sensitive=case_sensitive, limit=limit)


def stream_tool_usage(path: PathLike) -> AsyncIterator[ToolUse]:
    return get_default_store().stream_tool_usage(path)


async def get_tool_usage(path: PathLike) -> list[ToolUse]:
    return await get_default_store().get_tool_usage(path)


async def get_session_metadata(path: PathLike) -> SessionMetadata:
    return await get_default_store().get_session_metadata(path)


def stream_conversation_history(path: PathLike) -> AsyncIterator[ConversationTurn]:
    return get_default_store().stream_conversation_history(path)


async def get_conversation_history(path: PathLike) -> list[ConversationTurn]:
    return await get_default_store().get_conversation_history(path)


def clear_transcript_cache(path: PathLike | None = None) -> None:
    get_default_store().clear_transcript_cache(path)
