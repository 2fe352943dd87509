"""
claude-hooks: typed Claude Code hooks in Python

Provides:
- A per-event hook runner: one process, one JSON payload in, one JSON response out
- Pydantic contracts for every hook category's payload and response
- Streaming, cached queries over Claude Code conversation transcripts
- A per-session JSON log of hook events
"""

__version__ = "0.1.0"
