"""Conversation collaborators consumed by the chat plugin."""

from __future__ import annotations

import threading
import uuid
from typing import Any, Protocol

from shortcut_input.types import ChatMessage, Role


class ConversationHistory(Protocol):
    """Append-only view of one conversation."""

    def append(self, message: ChatMessage) -> None: ...

    def last(self) -> ChatMessage | None: ...


class ChatService(Protocol):
    """Conversational engine that can take new content for further processing."""

    @property
    def history(self) -> ConversationHistory: ...

    async def send(self, content: str) -> Any: ...


def new_message_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


class InMemoryConversationHistory:
    """Thread-safe in-memory conversation history."""

    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        self._lock = threading.Lock()
        self._messages: list[ChatMessage] = list(messages or [])

    def append(self, message: ChatMessage) -> None:
        with self._lock:
            self._messages.append(message)

    def last(self) -> ChatMessage | None:
        with self._lock:
            return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


class LocalChatService:
    """Chat service that records sent content in its history without a model."""

    def __init__(self, history: InMemoryConversationHistory | None = None, *, role: Role = "user") -> None:
        self._history = history or InMemoryConversationHistory()
        self._role = role

    @property
    def history(self) -> InMemoryConversationHistory:
        return self._history

    async def send(self, content: str) -> ChatMessage:
        message = ChatMessage(id=new_message_id("message"), role=self._role, content=content)
        self._history.append(message)
        return message
