from __future__ import annotations

import logging
import sys
from collections.abc import Iterator

import pytest
from loguru import logger

from shortcut_input import logging_utils
from shortcut_input.logging_utils import configure_logging, current_invocation, invocation_scope


class RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(logging_utils, "_CONFIGURED_PROFILE", None)
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_invocation_scope_tags_current_context() -> None:
    assert current_invocation() == "-"

    with invocation_scope("shortcutInput-1"):
        assert current_invocation() == "shortcutInput-1"
        with invocation_scope("shortcutInput-2"):
            assert current_invocation() == "shortcutInput-2"
        assert current_invocation() == "shortcutInput-1"

    assert current_invocation() == "-"


def test_chat_profile_routes_records_through_console_handler(
    monkeypatch: pytest.MonkeyPatch, fresh_logging: None
) -> None:
    handler = RecordingHandler()
    monkeypatch.setattr(logging_utils, "_build_chat_handler", lambda: handler)

    configure_logging(profile="chat", level="DEBUG")
    with invocation_scope("shortcutInput-7"):
        logger.info("shortcut.invoke.start name={}", "Make Note")

    assert len(handler.records) == 1
    message = handler.records[0].getMessage()
    assert "shortcutInput-7" in message
    assert "shortcut.invoke.start name=Make Note" in message


def test_configure_logging_is_applied_once_per_profile(
    monkeypatch: pytest.MonkeyPatch, fresh_logging: None
) -> None:
    built: list[RecordingHandler] = []

    def build() -> RecordingHandler:
        built.append(RecordingHandler())
        return built[-1]

    monkeypatch.setattr(logging_utils, "_build_chat_handler", build)

    configure_logging(profile="chat")
    configure_logging(profile="chat")

    assert len(built) == 1
