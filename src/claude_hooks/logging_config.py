"""Logging setup for hook processes.

Standard output belongs to the agent, which parses it as the hook response,
so every diagnostic goes to standard error.
"""

import logging
import sys

from .simple_config import get_log_level

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stderr handler to the ``claude_hooks`` logger."""
    global _handler

    logger = logging.getLogger("claude_hooks")
    numeric = logging.getLevelName((level or get_log_level()).upper())
    logger.setLevel(numeric if isinstance(numeric, int) else logging.WARNING)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
    return logger
