from __future__ import annotations

import contextlib
import importlib
import importlib.util
import os
import sys
from types import ModuleType

from .base import HookError, HookHandlers

DEFAULT_HANDLERS = "claude_hooks.hooks.implementation.defaults:handlers"


def _import_file(path: str) -> ModuleType:
    name = f"_claude_hooks_script_{os.path.splitext(os.path.basename(path))[0]}"
    spec = importlib.util.spec_from_file_location(name, path)
    if not spec or not spec.loader:
        raise HookError(f"cannot import hook script {path}")
    mod = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(mod)
    except Exception as e:
        raise HookError(f"failed to import hook script {path}: {e}") from e
    return mod


def _handlers_from_module(mod: ModuleType, attribute: str | None) -> HookHandlers:
    if attribute:
        obj = getattr(mod, attribute, None)
        if obj is None:
            raise HookError(f"{mod.__name__} has no attribute {attribute!r}")
        if not isinstance(obj, HookHandlers) and callable(obj):
            # Allow factory functions returning HookHandlers
            obj = obj()
        if not isinstance(obj, HookHandlers):
            raise HookError(f"{mod.__name__}:{attribute} is not a HookHandlers registry")
        return obj

    found = getattr(mod, "handlers", None)
    if isinstance(found, HookHandlers):
        return found

    # Fall back to module-level functions named after the registry fields.
    collected = {
        name: getattr(mod, name)
        for name in HookHandlers.field_names()
        if callable(getattr(mod, name, None))
    }
    if not collected:
        raise HookError(f"{mod.__name__} defines no hook handlers")
    return HookHandlers(**collected)


def load_handlers(target: str | None = None) -> HookHandlers:
    """Load a handler registry.

    ``target`` is either a path to a Python file or ``package.module[:attribute]``.
    A module provides its registry as a ``handlers`` attribute, or as plain
    functions named ``pre_tool_use``, ``stop`` and so on.
    """

    target = target or DEFAULT_HANDLERS

    # Hook scripts run top-level code on import; stdout is reserved for the response.
    with contextlib.redirect_stdout(sys.stderr):
        return _load(target)


def _load(target: str) -> HookHandlers:
    if target.endswith(".py") or os.path.sep in target:
        if not os.path.exists(target):
            raise HookError(f"hook script not found: {target}")
        return _handlers_from_module(_import_file(target), None)

    module_name, _, attribute = target.partition(":")
    try:
        mod = importlib.import_module(module_name)
    except ImportError as e:
        raise HookError(f"cannot import {module_name}: {e}") from e
    return _handlers_from_module(mod, attribute or None)
