"""Shared fixtures: isolated config and sample Claude Code transcripts."""

import json
from contextlib import aclosing

import pytest

from claude_hooks.transcript_reader import TranscriptStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config lookups and session logs inside the test's tmp dir."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLAUDE_HOOKS_SESSIONS_DIR", str(tmp_path / "sessions"))
    monkeypatch.delenv("CLAUDE_HOOKS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CLAUDE_HOOKS_CACHE_TTL", raising=False)


def summary_entry(text="Earlier work", leaf="leaf-1"):
    return {"type": "summary", "summary": text, "leafUuid": leaf}


def user_entry(content, uuid="u1", timestamp="2025-01-01T00:00:00Z", session_id="sess-1", **extra):
    entry = {
        "parentUuid": None,
        "isSidechain": False,
        "userType": "external",
        "cwd": "/work/project",
        "sessionId": session_id,
        "version": "1.0.44",
        "gitBranch": "main",
        "type": "user",
        "message": {"role": "user", "content": content},
        "uuid": uuid,
        "timestamp": timestamp,
    }
    entry.update(extra)
    return entry


def assistant_entry(blocks, uuid="a1", timestamp="2025-01-01T00:00:05Z", session_id="sess-1"):
    return {
        "parentUuid": "u1",
        "isSidechain": False,
        "userType": "external",
        "cwd": "/work/project",
        "sessionId": session_id,
        "version": "1.0.44",
        "gitBranch": "main",
        "message": {
            "id": f"msg_{uuid}",
            "type": "message",
            "role": "assistant",
            "model": "claude-sonnet",
            "content": blocks,
            "stop_reason": None,
            "stop_sequence": None,
            "usage": {"input_tokens": 10, "output_tokens": 5},
        },
        "requestId": f"req_{uuid}",
        "type": "assistant",
        "uuid": uuid,
        "timestamp": timestamp,
    }


def text_block(text):
    return {"type": "text", "text": text}


def tool_use_block(name, tool_input, block_id="toolu_1"):
    return {"type": "tool_use", "id": block_id, "name": name, "input": tool_input}


@pytest.fixture
def write_transcript(tmp_path):
    """Write entries (dicts, or raw strings for malformed lines) as a .jsonl file."""

    def _write(entries, name="transcript.jsonl"):
        path = tmp_path / name
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scenario_transcript(write_transcript):
    """One summary, one user message, one assistant message with one tool_use."""
    return write_transcript(
        [
            summary_entry(),
            user_entry("Please list the files", timestamp="2025-01-01T00:00:00Z"),
            assistant_entry(
                [text_block("Listing files now."), tool_use_block("Bash", {"command": "ls -la"})],
                timestamp="2025-01-01T00:00:05Z",
            ),
        ]
    )


class CountingStore(TranscriptStore):
    """TranscriptStore that records how many raw lines and file opens it consumed."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lines_read = 0
        self.opens = 0

    async def _raw_lines(self, path):
        self.opens += 1
        async with aclosing(super()._raw_lines(path)) as lines:
            async for line in lines:
                self.lines_read += 1
                yield line
