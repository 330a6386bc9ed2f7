"""Shell process launching for the external shortcut runner."""

from __future__ import annotations

import asyncio
import contextlib
import os
import re
import signal
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from loguru import logger

from shortcut_input.errors import LaunchFailureError
from shortcut_input.types import ExchangeFiles

SHELL_FLAGS = ("-i", "-l", "-c")
DEFAULT_TERMINATE_GRACE_SECONDS = 5.0
_DOUBLE_QUOTE_SPECIALS = re.compile(r'([\\"$`])')


class ProcessRunner(Protocol):
    """Minimal contract for running one shell process at a time."""

    async def run(
        self,
        executable: str,
        args: list[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> int: ...

    async def terminate(self) -> None: ...


class ShellProcessRunner:
    """Run a process to completion and stop it on request.

    The child gets its own session so a terminate reaches the runner that the
    login shell started, not only the shell itself.
    """

    def __init__(self, *, terminate_grace: float = DEFAULT_TERMINATE_GRACE_SECONDS) -> None:
        self._terminate_grace = terminate_grace
        self._process: asyncio.subprocess.Process | None = None

    @property
    def running(self) -> bool:
        process = self._process
        return process is not None and process.returncode is None

    async def run(
        self,
        executable: str,
        args: list[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> int:
        merged_env = {**os.environ, **env} if env else None
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                cwd=str(cwd),
                env=merged_env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise LaunchFailureError(f"Failed to launch {executable}: {exc}") from exc

        self._process = process
        logger.debug("process.started pid={} executable={}", process.pid, executable)
        try:
            await process.wait()
        except asyncio.CancelledError:
            await self.terminate()
            raise

        returncode = process.returncode if process.returncode is not None else -1
        logger.debug("process.exited pid={} returncode={}", process.pid, returncode)
        return returncode

    async def terminate(self) -> None:
        """Stop the most recently started process. Safe to call at any time."""

        process = self._process
        if process is None or process.returncode is not None:
            return

        logger.info("process.terminate pid={}", process.pid)
        self._signal(process, signal.SIGTERM)
        try:
            await asyncio.wait_for(process.wait(), timeout=self._terminate_grace)
        except TimeoutError:
            logger.warning("process.kill pid={} grace={}", process.pid, self._terminate_grace)
            self._signal(process, signal.SIGKILL)
            await process.wait()

    @staticmethod
    def _signal(process: asyncio.subprocess.Process, signum: signal.Signals) -> None:
        with contextlib.suppress(ProcessLookupError):
            if hasattr(os, "killpg"):
                try:
                    os.killpg(process.pid, signum)
                    return
                except PermissionError:
                    pass
            process.send_signal(signum)


def quote_for_double_quotes(value: str) -> str:
    """Escape a value for use inside POSIX double quotes."""

    return _DOUBLE_QUOTE_SPECIALS.sub(r"\\\1", value)


def build_shortcut_command(shortcut_name: str, files: ExchangeFiles, *, runner: str = "shortcuts") -> str:
    """Build the command string run by the shell."""

    name = quote_for_double_quotes(shortcut_name)
    input_path = quote_for_double_quotes(str(files.input_path))
    output_path = quote_for_double_quotes(str(files.output_path))
    return f'{runner} run "{name}" -i "{input_path}" -o "{output_path}"'


def build_shell_args(command: str) -> list[str]:
    """Arguments for an interactive login shell running one command string."""

    return [*SHELL_FLAGS, command]
