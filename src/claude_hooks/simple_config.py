"""Simple configuration loading.

Values are looked up, in order, in the environment, the ``env`` section of
``.claude/settings.local.json``, and the ``[tool.claude-hooks]`` table of
``pyproject.toml``, all relative to the current working directory.
"""

import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

LOG_LEVEL_KEY = "CLAUDE_HOOKS_LOG_LEVEL"
SESSIONS_DIR_KEY = "CLAUDE_HOOKS_SESSIONS_DIR"
CACHE_TTL_KEY = "CLAUDE_HOOKS_CACHE_TTL"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_CACHE_TTL = 300.0


def _settings_env(project_root: Path) -> dict[str, Any]:
    settings_file = project_root / ".claude" / "settings.local.json"
    if not settings_file.exists():
        return {}
    try:
        with open(settings_file) as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("ignoring unreadable %s: %s", settings_file, e)
        return {}
    env = settings.get("env", {}) if isinstance(settings, dict) else {}
    return env if isinstance(env, dict) else {}


def _pyproject_table(project_root: Path) -> dict[str, Any]:
    pyproject = project_root / "pyproject.toml"
    if not pyproject.exists():
        return {}
    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("ignoring unreadable %s: %s", pyproject, e)
        return {}
    return data.get("tool", {}).get("claude-hooks", {})


def get_config(key: str, default: str | None = None, project_root: Path | None = None) -> str | None:
    """Get config value from environment, settings.local.json, or pyproject.toml.

    Args:
        key: Config key (e.g., "CLAUDE_HOOKS_LOG_LEVEL")
        default: Default value if not found
        project_root: Directory holding .claude/ and pyproject.toml (defaults to cwd)

    Returns:
        Config value or default
    """
    value = os.environ.get(key)
    if value:
        return value

    root = project_root or Path.cwd()

    env = _settings_env(root)
    if key in env:
        return str(env[key])

    table = _pyproject_table(root)
    # pyproject keys are written lower-case without the prefix: sessions_dir = "..."
    short_key = key.removeprefix("CLAUDE_HOOKS_").lower()
    if short_key in table:
        return str(table[short_key])

    return default


def get_log_level() -> str:
    return (get_config(LOG_LEVEL_KEY, DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()


def get_sessions_dir() -> Path:
    configured = get_config(SESSIONS_DIR_KEY)
    if configured:
        return Path(configured).expanduser()
    return Path(tempfile.gettempdir()) / "claude-hooks-sessions"


def get_cache_ttl() -> float:
    raw = get_config(CACHE_TTL_KEY)
    if raw is None:
        return DEFAULT_CACHE_TTL
    try:
        ttl = float(raw)
    except ValueError:
        logger.warning("invalid %s=%r, using %s", CACHE_TTL_KEY, raw, DEFAULT_CACHE_TTL)
        return DEFAULT_CACHE_TTL
    return ttl if ttl > 0 else DEFAULT_CACHE_TTL
