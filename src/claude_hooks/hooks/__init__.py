"""claude_hooks.hooks package - the per-event hook protocol.

This package provides:
- base: hook categories, the handler registry and the error taxonomy
- payloads / responses: the per-category input and output contracts
- loader: resolving a handler registry from a script or module
- runner: the process entry point that reads one event and answers it
"""

from .base import (
    HandlerFailure,
    HookCategory,
    HookError,
    HookHandlers,
    MalformedInputError,
    TERMINAL_CATEGORIES,
    UnknownCategoryError,
)
from .loader import load_handlers
from .responses import SAFE_DEFAULT_RESPONSE
from .runner import HookRunner, run_hook

__all__ = [
    "HandlerFailure",
    "HookCategory",
    "HookError",
    "HookHandlers",
    "HookRunner",
    "MalformedInputError",
    "SAFE_DEFAULT_RESPONSE",
    "TERMINAL_CATEGORIES",
    "UnknownCategoryError",
    "load_handlers",
    "run_hook",
]
