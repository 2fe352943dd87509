#!/usr/bin/env python3
"""
claude-hooks CLI

Command-line entry points: run a hook event with a handler registry, and
find the per-session event logs the default handlers write.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from .hooks.base import HookError, HookHandlers
from .hooks.loader import load_handlers
from .hooks.runner import run_hook
from .logging_config import configure_logging
from .session_log import find_session_log, list_session_logs

logger = logging.getLogger(__name__)


def run_command(args):
    """Run one hook event: category from argv, payload from stdin."""
    configure_logging()
    try:
        handlers = load_handlers(args.handlers)
    except HookError as e:
        # No registry means no handler: keep the protocol and answer {}.
        logger.error("%s", e)
        handlers = HookHandlers()
    run_hook(handlers, argv=[sys.argv[0], args.category])


def sessions_command(args):
    """List session logs, or print the path of the latest/matching one."""
    sessions_dir = Path(args.sessions_dir) if args.sessions_dir else None
    logs = list_session_logs(sessions_dir)

    if not logs:
        print("No session logs found.")
        return

    if args.list:
        print("Session logs:")
        for index, path in enumerate(logs):
            marker = "*" if index == 0 else " "
            modified = datetime.fromtimestamp(path.stat().st_mtime).strftime("%Y-%m-%d %H:%M:%S")
            print(f"{marker} {path.stem}  {modified}")
        return

    if args.id:
        target = find_session_log(args.id, sessions_dir)
        if target is None:
            print(f"No session found matching ID: {args.id}")
            sys.exit(1)
    else:
        target = logs[0]

    print(target)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="claude-hooks CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Handle one hook event read from stdin")
    run_parser.add_argument("category", help="Hook category, e.g. PreToolUse")
    run_parser.add_argument(
        "--handlers",
        help="Handler registry: a .py file or module[:attribute] (default: built-in handlers)",
    )
    run_parser.set_defaults(func=run_command)

    # Sessions command
    sessions_parser = subparsers.add_parser("sessions", help="Find session event logs")
    sessions_parser.add_argument("--list", "-l", action="store_true", help="List all session logs")
    sessions_parser.add_argument("--id", "-i", help="Select a session by partial ID")
    sessions_parser.add_argument("--sessions-dir", help="Custom sessions directory")
    sessions_parser.set_defaults(func=sessions_command)

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    args.func(args)


if __name__ == "__main__":
    main()
