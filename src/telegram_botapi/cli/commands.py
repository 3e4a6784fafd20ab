"""CLI command handlers."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..client import BotAPI
from ..configs import (
    DeleteMyCommandsConfig,
    DeleteWebhookConfig,
    GetMyCommandsConfig,
    SetMyCommandsConfig,
    UpdateConfig,
    WebhookConfig,
)
from ..core import BotSettings, get_logger, setup_logging
from ..exceptions import BotAPIError
from ..files import FilePath
from ..helpers import new_message, new_message_to_channel
from ..types import BotCommand, BotCommandScope, Update
from ..webhook import WebhookServer
from .parser import print_banner

logger = get_logger("cli")

console = Console()

# Errors a command reports with exit code 1 instead of a traceback.
HANDLED_ERRORS = (BotAPIError, OSError, ValueError)


def load_settings(args: argparse.Namespace) -> BotSettings:
    """Load settings from ``--config`` or the environment and set up logging."""
    if args.config:
        settings = BotSettings.from_yaml(Path(args.config))
    else:
        settings = BotSettings.from_env()

    if args.debug:
        settings.debug = True
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)
    return settings


def _print_update(update: Update) -> None:
    message = update.effective_message()
    sender = update.sent_from()
    who = sender.display_name() if sender else "-"
    if message is not None:
        text = message.text or message.caption or "<non-text message>"
        console.print(f"[cyan]#{update.update_id}[/] [bold]{who}[/] in {message.chat.id}: {text}")
    elif update.callback_query is not None:
        console.print(
            f"[cyan]#{update.update_id}[/] [bold]{who}[/] pressed {update.callback_query.data!r}"
        )
    else:
        console.print(f"[cyan]#{update.update_id}[/] {update.to_dict()}")


def _parse_scope(value: str | None) -> BotCommandScope | None:
    """Parse ``TYPE`` or ``chat:ID`` into a command scope."""
    if not value:
        return None
    if value.startswith("chat:"):
        return BotCommandScope(type="chat", chat_id=value.removeprefix("chat:"))
    return BotCommandScope(type=value)


def _parse_command(value: str) -> BotCommand:
    name, sep, description = value.partition("=")
    if not sep or not name.strip() or not description.strip():
        raise ValueError(f"Expected NAME=DESCRIPTION, got {value!r}")
    return BotCommand(command=name.strip().lstrip("/"), description=description.strip())


# ----------------------------------------------------------------------
# Top-level commands
# ----------------------------------------------------------------------


def cmd_me(args: argparse.Namespace) -> int:
    """Show the bot's identity."""
    try:
        settings = load_settings(args)
        with BotAPI.from_settings(settings) as bot:
            me = bot.self_user or bot.get_me()

        table = Table(title="Bot")
        table.add_column("Property", style="cyan")
        table.add_column("Value")
        table.add_row("ID", str(me.id))
        table.add_row("Username", f"@{me.username}" if me.username else "-")
        table.add_row("Name", " ".join(filter(None, [me.first_name, me.last_name])))
        table.add_row("Joins groups", "Yes" if me.can_join_groups else "No")
        table.add_row("Reads all group messages", "Yes" if me.can_read_all_group_messages else "No")
        table.add_row("Inline queries", "Yes" if me.supports_inline_queries else "No")
        console.print(table)
        return 0
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1


def cmd_send(args: argparse.Namespace) -> int:
    """Send a text message."""
    try:
        settings = load_settings(args)
        if args.chat.startswith("@"):
            config = new_message_to_channel(args.chat, args.text)
        else:
            config = new_message(int(args.chat), args.text)
        if args.parse_mode:
            config = replace(config, parse_mode=args.parse_mode)

        with BotAPI.from_settings(settings) as bot:
            message = bot.send(config)

        console.print(f"[green]✓[/] Message {message.message_id} sent to {message.chat.id}")
        return 0
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1


def cmd_poll(args: argparse.Namespace) -> int:
    """Print updates received by long polling until interrupted."""
    try:
        settings = load_settings(args)
        polling = settings.polling
        config = UpdateConfig(
            offset=polling.offset if args.offset is None else args.offset,
            limit=polling.limit if args.limit is None else args.limit,
            timeout=polling.timeout if args.timeout is None else args.timeout,
            allowed_updates=polling.allowed_updates,
        )
        bot = BotAPI.from_settings(settings)
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1

    with bot:
        console.print("[dim]Waiting for updates, press Ctrl+C to stop[/]")
        try:
            for update in bot.get_updates_chan(config, retry_delay=polling.retry_delay):
                _print_update(update)
        except KeyboardInterrupt:
            logger.info("Polling interrupted by user")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the webhook server and print received updates."""
    try:
        settings = load_settings(args)
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1

    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port))
        if value is not None
    }
    webhook_config = settings.webhook.model_copy(update=overrides)
    settings.webhook = webhook_config
    print_banner(settings, "Webhook server")

    server = WebhookServer(webhook_config, buffer_size=settings.buffer)
    server.start()
    try:
        for update in server.updates:
            _print_update(update)
    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
    finally:
        server.stop()
    return 0


# ----------------------------------------------------------------------
# webhook
# ----------------------------------------------------------------------


def cmd_webhook(args: argparse.Namespace) -> int:
    """Handle webhook commands."""
    if not args.webhook_command:
        print("Usage: telegram-botapi webhook <set|info|delete>")
        return 1

    handlers = {
        "set": _cmd_webhook_set,
        "info": _cmd_webhook_info,
        "delete": _cmd_webhook_delete,
    }

    handler = handlers.get(args.webhook_command)
    if handler is None:
        return 1

    try:
        settings = load_settings(args)
        with BotAPI.from_settings(settings) as bot:
            return handler(bot, args)
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1


def _cmd_webhook_set(bot: BotAPI, args: argparse.Namespace) -> int:
    config = WebhookConfig(
        url=args.url,
        certificate=FilePath(args.cert) if args.cert else None,
        max_connections=args.max_connections,
        drop_pending_updates=args.drop_pending,
        secret_token=args.secret or "",
    )
    response = bot.request(config)
    console.print(f"[green]✓[/] {response.description or 'Webhook was set'}")
    return 0


def _cmd_webhook_info(bot: BotAPI, args: argparse.Namespace) -> int:
    info = bot.get_webhook_info()

    table = Table(title="Webhook")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("URL", info.url or "Not set")
    table.add_row("Custom certificate", "Yes" if info.has_custom_certificate else "No")
    table.add_row("Pending updates", str(info.pending_update_count))
    table.add_row("Max connections", str(info.max_connections or "-"))
    table.add_row("Last error", info.last_error_message or "-")
    console.print(table)
    return 0


def _cmd_webhook_delete(bot: BotAPI, args: argparse.Namespace) -> int:
    response = bot.request(DeleteWebhookConfig(drop_pending_updates=args.drop_pending))
    console.print(f"[green]✓[/] {response.description or 'Webhook was deleted'}")
    return 0


# ----------------------------------------------------------------------
# commands
# ----------------------------------------------------------------------


def cmd_commands(args: argparse.Namespace) -> int:
    """Handle bot command list management."""
    if not args.commands_command:
        print("Usage: telegram-botapi commands <list|set|delete>")
        return 1

    handlers = {
        "list": _cmd_commands_list,
        "set": _cmd_commands_set,
        "delete": _cmd_commands_delete,
    }

    handler = handlers.get(args.commands_command)
    if handler is None:
        return 1

    try:
        settings = load_settings(args)
        with BotAPI.from_settings(settings) as bot:
            return handler(bot, args)
    except HANDLED_ERRORS as e:
        console.print(f"[red]Error:[/] {e}")
        return 1


def _cmd_commands_list(bot: BotAPI, args: argparse.Namespace) -> int:
    commands = bot.get_my_commands(
        GetMyCommandsConfig(scope=_parse_scope(args.scope), language_code=args.language)
    )
    if not commands:
        console.print("No commands registered")
        return 0

    table = Table(title="Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    for command in commands:
        table.add_row(f"/{command.command}", command.description)
    console.print(table)
    return 0


def _cmd_commands_set(bot: BotAPI, args: argparse.Namespace) -> int:
    commands = [_parse_command(value) for value in args.commands]
    bot.request(
        SetMyCommandsConfig(
            commands=commands,
            scope=_parse_scope(args.scope),
            language_code=args.language,
        )
    )
    console.print(f"[green]✓[/] Registered {len(commands)} commands")
    return 0


def _cmd_commands_delete(bot: BotAPI, args: argparse.Namespace) -> int:
    bot.request(
        DeleteMyCommandsConfig(scope=_parse_scope(args.scope), language_code=args.language)
    )
    console.print("[green]✓[/] Commands deleted")
    return 0
