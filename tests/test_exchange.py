from __future__ import annotations

from pathlib import Path

import pytest

from shortcut_input.errors import ExchangeIOError
from shortcut_input.exchange import TempExchange, file_reference
from shortcut_input.types import TextOutcome


def test_paths_are_derived_from_invocation_id(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    files = exchange.paths("shortcutInput-1")

    assert files.input_path == tmp_path.resolve() / "shortcutInput-1-input.txt"
    assert files.output_path == tmp_path.resolve() / "shortcutInput-1-output"
    assert exchange.paths("shortcutInput-1") == files
    assert exchange.paths("shortcutInput-2").input_path != files.input_path


def test_write_creates_input_file_without_leftovers(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path / "nested")

    written = exchange.write("id-1", "héllo")

    assert written.read_text(encoding="utf-8") == "héllo"
    assert sorted(path.name for path in written.parent.iterdir()) == ["id-1-input.txt"]


def test_write_replaces_existing_input(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)
    exchange.write("id-1", "first")

    exchange.write("id-1", "second")

    assert exchange.paths("id-1").input_path.read_text(encoding="utf-8") == "second"


def test_write_failure_raises_exchange_error(tmp_path: Path) -> None:
    blocker = tmp_path / "root"
    blocker.write_text("not a directory", encoding="utf-8")
    exchange = TempExchange(blocker)

    with pytest.raises(ExchangeIOError):
        exchange.write("id-1", "payload")


def test_read_returns_none_without_output(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    assert exchange.read("id-1") is None
    assert exchange.output_exists("id-1") is False


def test_read_returns_output_bytes(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)
    exchange.paths("id-1").output_path.write_bytes(b"\x00\x01")

    assert exchange.read("id-1") == b"\x00\x01"


def test_acquire_removes_both_files(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with exchange.acquire("id-1") as scope:
        exchange.write("id-1", "payload")
        scope.files.output_path.write_text("result", encoding="utf-8")

    assert list(tmp_path.iterdir()) == []


def test_acquire_cleans_up_when_block_raises(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with pytest.raises(RuntimeError), exchange.acquire("id-1"):
        exchange.write("id-1", "payload")
        raise RuntimeError("boom")

    assert list(tmp_path.iterdir()) == []


def test_acquire_keep_leaves_files(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with exchange.acquire("id-1", keep=True):
        exchange.write("id-1", "payload")

    assert exchange.paths("id-1").input_path.exists()


def test_discard_only_touches_own_files(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)
    exchange.write("id-1", "mine")
    exchange.write("id-2", "theirs")
    exchange.paths("id-2").output_path.write_text("theirs", encoding="utf-8")

    exchange.discard("id-1")

    assert not exchange.paths("id-1").input_path.exists()
    assert exchange.paths("id-2").input_path.exists()
    assert exchange.paths("id-2").output_path.exists()


def test_interpret_utf8_output_as_text(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with exchange.acquire("id-1") as scope:
        assert scope.interpret("hello".encode()) == TextOutcome(text="hello")
        assert scope.keep_output is False


def test_interpret_empty_output_as_no_message(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with exchange.acquire("id-1") as scope:
        assert scope.interpret(b"") is None


def test_interpret_binary_output_as_file_link_and_keeps_file(tmp_path: Path) -> None:
    exchange = TempExchange(tmp_path)

    with exchange.acquire("id-1") as scope:
        exchange.write("id-1", "payload")
        scope.files.output_path.write_bytes(b"\xff\xfe\x00")
        outcome = scope.interpret(b"\xff\xfe\x00")

    assert outcome == TextOutcome(text=file_reference(scope.files.output_path))
    assert outcome.text.startswith("[View File](file://")
    assert scope.files.output_path.exists()
    assert not scope.files.input_path.exists()
