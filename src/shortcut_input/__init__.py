"""shortcut-input - hand conversation input to named shortcuts."""

from .controller import InvocationController
from .exchange import TempExchange
from .parser import parse_shortcut_command
from .plugin import ShortcutInputChatPlugin
from .process import ShellProcessRunner
from .types import ErrorOutcome, TextOutcome

__version__ = "0.1.0"

__all__ = [
    "ErrorOutcome",
    "InvocationController",
    "ShellProcessRunner",
    "ShortcutInputChatPlugin",
    "TempExchange",
    "TextOutcome",
    "parse_shortcut_command",
]
