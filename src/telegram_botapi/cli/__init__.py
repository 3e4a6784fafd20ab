"""Command-line interface for the Telegram Bot API client."""

from __future__ import annotations

from collections.abc import Sequence

from .commands import (
    cmd_commands,
    cmd_me,
    cmd_poll,
    cmd_send,
    cmd_serve,
    cmd_webhook,
    load_settings,
)
from .parser import build_parser, print_banner


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Optional sequence of CLI arguments (without the program name).

    Returns:
        Process exit code. 0 for success.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        raise SystemExit(0)

    handlers = {
        "me": cmd_me,
        "send": cmd_send,
        "poll": cmd_poll,
        "webhook": cmd_webhook,
        "commands": cmd_commands,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


__all__ = [
    "build_parser",
    "cmd_commands",
    "cmd_me",
    "cmd_poll",
    "cmd_send",
    "cmd_serve",
    "cmd_webhook",
    "load_settings",
    "main",
    "print_banner",
]
