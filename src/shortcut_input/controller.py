"""One shortcut invocation, end to end."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable

from loguru import logger

from shortcut_input.concurrency import run_until_stopped
from shortcut_input.config import Settings
from shortcut_input.errors import InvocationCancelledError, MalformedCommandError
from shortcut_input.exchange import TempExchange
from shortcut_input.hook_runtime import HookRuntime
from shortcut_input.logging_utils import invocation_scope
from shortcut_input.parser import COMMAND_KEYWORD, parse_shortcut_command
from shortcut_input.process import ProcessRunner, ShellProcessRunner, build_shell_args, build_shortcut_command
from shortcut_input.types import ErrorOutcome, InvocationRequest, Outcome


def new_invocation_id() -> str:
    return f"{COMMAND_KEYWORD}-{uuid.uuid4()}"


class InvocationController:
    """Run shortcut commands one at a time and honour cancellation.

    `invoke` never raises for invocation failures: parse errors, I/O errors,
    launch failures and cancellation all come back as an `ErrorOutcome`.
    A return value of None means the shortcut finished without a message.

    Cancellation is sticky. Once `cancel` has been called every later
    `invoke` reports `Cancelled` until `reset` is called.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        runner: ProcessRunner | None = None,
        exchange: TempExchange | None = None,
        hooks: HookRuntime | None = None,
        id_factory: Callable[[], str] = new_invocation_id,
    ) -> None:
        self._settings = settings
        self._runner = runner if runner is not None else ShellProcessRunner(terminate_grace=settings.terminate_grace)
        self._exchange = exchange if exchange is not None else TempExchange(settings.temp_root)
        self._hooks = hooks
        self._id_factory = id_factory
        self._invoke_lock = asyncio.Lock()
        self._stop_event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    async def invoke(self, raw_command_text: str, latest_entry: str | None = None) -> Outcome | None:
        """Run the shortcut named in `raw_command_text` and return its outcome."""

        invocation_id = self._id_factory()
        try:
            parsed = parse_shortcut_command(raw_command_text)
        except MalformedCommandError as exc:
            logger.info("shortcut.malformed id={} text={!r}", invocation_id, raw_command_text)
            return ErrorOutcome(description=str(exc))

        request = InvocationRequest(id=invocation_id, shortcut_name=parsed.name, raw_input=parsed.trailing)
        payload = parsed.trailing.strip()
        if not payload:
            # No input after the name: use the previous conversation entry.
            payload = latest_entry or ""

        async with self._invoke_lock:
            with invocation_scope(request.id):
                logger.info("shortcut.invoke.start id={} name={}", request.id, request.shortcut_name)
                if self._hooks is not None:
                    await self._hooks.call_many("on_invocation_start", request=request)
                outcome = await self._invoke_guarded(request, payload)
                logger.info("shortcut.invoke.end id={} outcome={}", request.id, type(outcome).__name__)
                if self._hooks is not None:
                    await self._hooks.call_many("on_invocation_end", request=request, outcome=outcome)
                return outcome

    async def cancel(self) -> None:
        """Abort pending and running invocations. Idempotent."""

        if not self._stop_event.is_set():
            logger.info("shortcut.cancel")
        self._stop_event.set()
        await self._runner.terminate()

    def reset(self) -> None:
        """Accept new invocations after a cancel."""
        self._stop_event.clear()

    async def _invoke_guarded(self, request: InvocationRequest, payload: str) -> Outcome | None:
        try:
            return await self._run(request, payload)
        except Exception as exc:
            logger.warning("shortcut.invoke.failed id={} error={}: {}", request.id, type(exc).__name__, exc)
            if self._hooks is not None:
                await self._hooks.notify_error(stage="invoke", error=exc, request=request)
            return ErrorOutcome(description=str(exc) or type(exc).__name__)

    async def _run(self, request: InvocationRequest, payload: str) -> Outcome | None:
        self._raise_if_cancelled()

        with self._exchange.acquire(request.id, keep=self._settings.keep_files) as scope:
            self._exchange.write(request.id, payload)
            command = build_shortcut_command(
                request.shortcut_name,
                scope.files,
                runner=self._settings.runner_executable,
            )
            returncode = await self._run_process(command)
            # Exit status is not a completion signal for shortcut runners.
            logger.debug("shortcut.process.exited id={} returncode={}", request.id, returncode)
            self._raise_if_cancelled()

            found = await self._await_output(request.id)
            self._raise_if_cancelled()
            if not found:
                logger.info("shortcut.no_output id={}", request.id)
                return None

            data = self._exchange.read(request.id)
            if data is None:
                return None
            return scope.interpret(data)

    async def _run_process(self, command: str) -> int:
        self._raise_if_cancelled()
        return await run_until_stopped(
            self._runner.run(
                self._settings.shell,
                build_shell_args(command),
                cwd=self._settings.working_directory,
            ),
            self._stop_event,
        )

    async def _await_output(self, invocation_id: str) -> bool:
        """Yield once, then recheck a few times for an output file that lands late.

        This is a heuristic: some runners exit before their output flush is visible.
        """

        await asyncio.sleep(0)
        for _ in range(self._settings.settle_attempts):
            if self._exchange.output_exists(invocation_id):
                return True
            await asyncio.sleep(self._settings.settle_interval)
        return self._exchange.output_exists(invocation_id)

    def _raise_if_cancelled(self) -> None:
        if self._stop_event.is_set():
            raise InvocationCancelledError()
