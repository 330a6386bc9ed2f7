"""Shortcut command parsing."""

from __future__ import annotations

from dataclasses import dataclass

from shortcut_input.errors import MalformedCommandError

COMMAND_KEYWORD = "shortcutInput"
COMMAND_PREFIX = "/"
USAGE_MESSAGE = f"Please provide the shortcut name in format: `{COMMAND_PREFIX}{COMMAND_KEYWORD}(shortcut name)`."


@dataclass(frozen=True)
class ParsedShortcut:
    """Shortcut name and the untrimmed text after it."""

    name: str
    trailing: str


def parse_shortcut_command(text: str) -> ParsedShortcut:
    """Parse `(name)trailing` from the text that follows the command keyword.

    The first `)` after the first `(` always ends the name; there is no escaping.
    """

    open_index = text.find("(")
    if open_index < 0:
        raise MalformedCommandError(USAGE_MESSAGE)
    close_index = text.find(")", open_index + 1)
    if close_index < 0:
        raise MalformedCommandError(USAGE_MESSAGE)

    name = text[open_index + 1 : close_index]
    if not name:
        raise MalformedCommandError(USAGE_MESSAGE)
    return ParsedShortcut(name=name, trailing=text[close_index + 1 :])


def detect_plugin_command(line: str, command: str = COMMAND_KEYWORD) -> str | None:
    """Return the text after `/command` when the line addresses that command."""

    stripped = line.lstrip()
    keyword = f"{COMMAND_PREFIX}{command}"
    if not stripped.startswith(keyword):
        return None
    rest = stripped[len(keyword) :]
    # `/shortcutInputs` is a different command.
    if rest and not (rest[0] == "(" or rest[0].isspace()):
        return None
    return rest
