"""Typer CLI for running shortcuts from the terminal."""

from __future__ import annotations

import asyncio

import typer

from shortcut_input.config import get_settings
from shortcut_input.framework import ShortcutFramework
from shortcut_input.history import InMemoryConversationHistory, LocalChatService, new_message_id
from shortcut_input.logging_utils import configure_logging
from shortcut_input.parser import detect_plugin_command
from shortcut_input.types import ChatMessage, ErrorOutcome, Outcome, TextOutcome


def _load_framework() -> ShortcutFramework:
    settings = get_settings()
    configure_logging(profile=settings.log_profile, level=settings.log_level)
    framework = ShortcutFramework(settings)
    framework.load_entrypoints()
    return framework


def _seed_history(previous: str | None) -> LocalChatService:
    history = InMemoryConversationHistory()
    if previous is not None:
        history.append(ChatMessage(id=new_message_id("message"), role="user", content=previous))
    return LocalChatService(history)


def _echo_outcome(outcome: Outcome | None) -> None:
    if isinstance(outcome, ErrorOutcome):
        typer.echo(f"error: {outcome.description}", err=True)
        raise typer.Exit(code=1)
    if isinstance(outcome, TextOutcome):
        typer.echo(outcome.text)
        return
    typer.echo("(no message)")


def run(
    name: str = typer.Argument(..., help="Shortcut name"),
    text: str = typer.Argument("", help="Input passed to the shortcut"),
    previous: str | None = typer.Option(None, "--previous", "-p", help="Previous conversation entry"),
) -> None:
    """Run one shortcut with the given input."""

    framework = _load_framework()
    chat_service = _seed_history(previous)
    plugin = framework.create_plugin(chat_service)
    outcome = asyncio.run(plugin.send(f"({name}){text}"))
    _echo_outcome(outcome)


def send(
    line: str = typer.Argument(..., help="Chat line such as '/shortcutInput(name) input'"),
    previous: str | None = typer.Option(None, "--previous", "-p", help="Previous conversation entry"),
) -> None:
    """Route one chat line through the shortcut plugin."""

    framework = _load_framework()
    chat_service = _seed_history(previous)
    plugin = framework.create_plugin(chat_service)
    if detect_plugin_command(line, plugin.command) is None:
        typer.echo(f"not a /{plugin.command} command", err=True)
        raise typer.Exit(code=2)
    outcome = asyncio.run(framework.handle_line(plugin, line))
    _echo_outcome(outcome)


def list_hooks() -> None:
    """Show hook implementation mapping."""

    framework = _load_framework()
    report = framework.hook_report()
    if not report:
        typer.echo("(no hook implementations)")
        return
    for hook_name, adapter_names in report.items():
        typer.echo(f"{hook_name}: {', '.join(adapter_names)}")


def show_settings() -> None:
    """Show resolved settings."""

    settings = get_settings()
    for key, value in settings.model_dump().items():
        typer.echo(f"{key}={value}")


def create_cli_app() -> typer.Typer:
    app = typer.Typer(name="shortcut-input", help="Delegate conversation input to named shortcuts", add_completion=False)
    app.command("run")(run)
    app.command("send")(send)
    app.command("hooks")(list_hooks)
    app.command("settings")(show_settings)
    return app


app = create_cli_app()
