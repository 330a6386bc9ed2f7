"""Framework-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

type Role = Literal["user", "assistant", "system"]


@dataclass(frozen=True)
class InvocationRequest:
    """One incoming shortcut command, fixed at creation."""

    id: str
    shortcut_name: str
    raw_input: str


@dataclass(frozen=True)
class ExchangeFiles:
    """Input/output file pair owned by one invocation."""

    input_path: Path
    output_path: Path


@dataclass(frozen=True)
class TextOutcome:
    """Decoded shortcut output, or a reference to the output file."""

    text: str


@dataclass(frozen=True)
class ErrorOutcome:
    """Human-readable failure description."""

    description: str


type Outcome = TextOutcome | ErrorOutcome


@dataclass(frozen=True)
class ChatMessage:
    """One conversation entry."""

    id: str
    role: Role
    content: str
