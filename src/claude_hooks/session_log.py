"""Per-session JSON log of hook events.

Each session gets ``<sessions_dir>/<session_id>.json`` holding a JSON array of
``{"timestamp", "hookType", "payload"}`` records, appended to by handlers.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiofiles
from pydantic import BaseModel

from .simple_config import get_sessions_dir

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def session_log_path(session_id: str, sessions_dir: Path | None = None) -> Path:
    directory = sessions_dir or get_sessions_dir()
    name = _UNSAFE_CHARS.sub("_", session_id) or "unknown"
    return directory / f"{name}.json"


async def _load_records(path: Path) -> list[Any]:
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            records = json.loads(await f.read())
    except FileNotFoundError:
        return []
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("starting a fresh session log, %s is unreadable: %s", path, e)
        return []
    return records if isinstance(records, list) else []


async def save_session_data(hook_type: str, payload: BaseModel | dict[str, Any], sessions_dir: Path | None = None) -> Path | None:
    """Append one event record to the session's log file.

    Returns the log path, or None if the record could not be written. Never
    raises: a logging failure must not change the hook's response.
    """
    data = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else dict(payload)
    path = session_log_path(str(data.get("session_id") or ""), sessions_dir)

    record = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "hookType": hook_type,
        "payload": data,
    }

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        records = await _load_records(path)
        records.append(record)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(records, indent=2))
    except (OSError, TypeError, ValueError) as e:
        logger.error("failed to save session data to %s: %s", path, e)
        return None
    return path


def list_session_logs(sessions_dir: Path | None = None) -> list[Path]:
    """Session log files, newest first."""
    directory = sessions_dir or get_sessions_dir()
    if not directory.is_dir():
        return []
    return sorted(directory.glob("*.json"), key=lambda p: p.stat().st_mtime, reverse=True)


def find_session_log(partial_id: str, sessions_dir: Path | None = None) -> Path | None:
    """Newest session log whose id contains ``partial_id``, ignoring case."""
    needle = partial_id.lower()
    for path in list_session_logs(sessions_dir):
        if needle in path.stem.lower():
            return path
    return None
