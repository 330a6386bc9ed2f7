"""Application-level exception types for shortcut invocations."""

from __future__ import annotations


class ShortcutInputError(Exception):
    """Base exception for shortcut-input."""


class MalformedCommandError(ShortcutInputError):
    """Raised when the command text does not name a shortcut."""


class InvocationCancelledError(ShortcutInputError):
    """Raised when an invocation observes a cancellation request."""

    def __init__(self, message: str = "The shortcut invocation was cancelled.") -> None:
        super().__init__(message)


class LaunchFailureError(ShortcutInputError):
    """Raised when the shell process could not be started."""


class ExchangeIOError(ShortcutInputError):
    """Raised when an exchange file cannot be written or read."""
