"""CLI argument parser and banner display."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.panel import Panel

from .. import __version__
from ..core import BotSettings


def print_banner(settings: BotSettings, title: str) -> None:
    """Print a startup banner with configuration info."""
    console = Console()

    info = f"""
[bold]telegram-botapi[/bold] [green]v{__version__}[/]

[dim]----------------------------------------------------[/]
[bold]Endpoint:[/bold] [yellow]{settings.api_endpoint}[/]
[bold]Webhook:[/bold]  [yellow]{settings.webhook.host}:{settings.webhook.port}{settings.webhook.path}[/]
[bold]Buffer:[/bold]   [yellow]{settings.buffer}[/]
[bold]Debug:[/bold]    [{"red" if settings.debug else "green"}]{settings.debug}[/]
"""

    console.print(
        Panel(
            info,
            title=f"[bold white]{title}[/]",
            border_style="blue",
            expand=False,
        )
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="telegram-botapi",
        description="Talk to the Telegram Bot API from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the bot behind TELEGRAM_BOT_TOKEN
  telegram-botapi me

  # Send a message
  telegram-botapi send -t "Hello!" --chat 123456

  # Print incoming updates using long polling
  telegram-botapi -c bot.yaml poll --timeout 30

  # Register a webhook with a secret token
  telegram-botapi webhook set https://example.com/telegram/webhook --secret s3cr3t
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s v{__version__}",
        help="Show program's version number and exit",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a YAML configuration file (default: environment only)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log raw requests and responses",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("me", help="Show the bot's identity")

    # Send command
    send_parser = subparsers.add_parser("send", help="Send a text message")
    send_parser.add_argument("-t", "--text", required=True, help="Message text")
    send_parser.add_argument(
        "--chat", required=True, help="Chat ID, or @username of a channel"
    )
    send_parser.add_argument("--parse-mode", default="", help="MarkdownV2, HTML or Markdown")

    # Poll command
    poll_parser = subparsers.add_parser("poll", help="Print updates until interrupted")
    poll_parser.add_argument("--limit", type=int, default=None, help="Updates per request")
    poll_parser.add_argument(
        "--timeout", type=int, default=None, help="Long-poll timeout in seconds"
    )
    poll_parser.add_argument("--offset", type=int, default=None, help="First update ID")

    # Webhook commands
    webhook_parser = subparsers.add_parser("webhook", help="Manage the webhook")
    webhook_sub = webhook_parser.add_subparsers(dest="webhook_command")

    webhook_set = webhook_sub.add_parser("set", help="Register a webhook URL")
    webhook_set.add_argument("url", help="Public HTTPS URL")
    webhook_set.add_argument("--cert", default=None, help="Self-signed certificate to upload")
    webhook_set.add_argument("--secret", default=None, help="Secret token header value")
    webhook_set.add_argument(
        "--max-connections", type=int, default=0, help="Maximum simultaneous connections"
    )
    webhook_set.add_argument(
        "--drop-pending", action="store_true", help="Drop pending updates"
    )

    webhook_sub.add_parser("info", help="Show the current webhook")

    webhook_delete = webhook_sub.add_parser("delete", help="Remove the webhook")
    webhook_delete.add_argument(
        "--drop-pending", action="store_true", help="Drop pending updates"
    )

    # Commands commands
    commands_parser = subparsers.add_parser("commands", help="Manage the bot's command list")
    commands_sub = commands_parser.add_subparsers(dest="commands_command")

    commands_list = commands_sub.add_parser("list", help="List registered commands")
    commands_set = commands_sub.add_parser("set", help="Replace registered commands")
    commands_set.add_argument(
        "commands", nargs="+", metavar="NAME=DESCRIPTION", help="Commands to register"
    )
    commands_delete = commands_sub.add_parser("delete", help="Delete registered commands")
    for sub in (commands_list, commands_set, commands_delete):
        sub.add_argument("--scope", default=None, help="Scope type, e.g. all_private_chats")
        sub.add_argument("--language", default="", help="Two-letter language code")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the webhook server")
    serve_parser.add_argument("--host", default=None, help="Bind host (overrides config)")
    serve_parser.add_argument(
        "-p", "--port", type=int, default=None, help="Bind port (overrides config)"
    )

    return parser
