"""File exchange between an invocation and the external shortcut runner."""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

from loguru import logger

from shortcut_input.errors import ExchangeIOError
from shortcut_input.types import ExchangeFiles, Outcome, TextOutcome

INPUT_FILE_SUFFIX = "-input.txt"
OUTPUT_FILE_SUFFIX = "-output"


class TempExchange:
    """Per-invocation input/output files under a shared temporary root.

    Every path is derived from the invocation id, so an instance only ever
    touches files that belong to the id it is given.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def paths(self, invocation_id: str) -> ExchangeFiles:
        root = self.root.resolve()
        return ExchangeFiles(
            input_path=root / f"{invocation_id}{INPUT_FILE_SUFFIX}",
            output_path=root / f"{invocation_id}{OUTPUT_FILE_SUFFIX}",
        )

    def write(self, invocation_id: str, payload: str) -> Path:
        """Write the input payload so readers see all of it or nothing."""

        target = self.paths(invocation_id).input_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, staging = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(staging, target)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(staging)
                raise
        except OSError as exc:
            raise ExchangeIOError(f"Failed to write shortcut input {target}: {exc}") from exc
        return target

    def read(self, invocation_id: str) -> bytes | None:
        """Return the output bytes, or None when the runner produced no file."""

        target = self.paths(invocation_id).output_path
        if not target.exists():
            return None
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ExchangeIOError(f"Failed to read shortcut output {target}: {exc}") from exc

    def output_exists(self, invocation_id: str) -> bool:
        return self.paths(invocation_id).output_path.exists()

    def discard(self, invocation_id: str, *, keep_output: bool = False) -> None:
        """Best-effort removal of the files owned by one invocation."""

        files = self.paths(invocation_id)
        targets = [files.input_path] if keep_output else [files.input_path, files.output_path]
        for path in targets:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.opt(exception=True).warning("exchange.discard_failed path={}", path)

    @contextlib.contextmanager
    def acquire(self, invocation_id: str, *, keep: bool = False) -> Generator[ExchangeScope, None, None]:
        """Hold the invocation's files for the block and clean them up on every exit path."""

        scope = ExchangeScope(self.paths(invocation_id))
        try:
            yield scope
        finally:
            if not keep:
                self.discard(invocation_id, keep_output=scope.keep_output)


class ExchangeScope:
    """Files held by an `acquire` block."""

    def __init__(self, files: ExchangeFiles) -> None:
        self.files = files
        self.keep_output = False

    def retain_output(self) -> None:
        """Keep the output file after the block, e.g. when an outcome links to it."""
        self.keep_output = True

    def interpret(self, data: bytes) -> Outcome | None:
        """Turn raw output bytes into an outcome.

        Valid UTF-8 becomes text and empty text means no message. Anything
        else is reported as a link to the output file, which is then kept.
        """

        text = decode_output(data)
        if text is None:
            self.retain_output()
            return TextOutcome(text=file_reference(self.files.output_path))
        if not text:
            return None
        return TextOutcome(text=text)


def decode_output(data: bytes) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def file_reference(path: Path) -> str:
    return f"[View File]({path.as_uri()})"
