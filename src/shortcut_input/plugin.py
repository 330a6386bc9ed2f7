"""Chat plugin that hands conversation input to a named shortcut."""

from __future__ import annotations

import weakref
from typing import ClassVar, Protocol

from loguru import logger

from shortcut_input.config import Settings, get_settings
from shortcut_input.controller import InvocationController
from shortcut_input.hook_runtime import HookRuntime
from shortcut_input.history import ChatService, new_message_id
from shortcut_input.parser import COMMAND_KEYWORD
from shortcut_input.process import ProcessRunner
from shortcut_input.types import ChatMessage, ErrorOutcome, Outcome, TextOutcome


class PluginLifecycleObserver(Protocol):
    """Receives lifecycle notifications from a chat plugin."""

    def plugin_did_start(self, plugin: ShortcutInputChatPlugin) -> None: ...

    def plugin_did_end(self, plugin: ShortcutInputChatPlugin) -> None: ...

    def plugin_did_start_responding(self, plugin: ShortcutInputChatPlugin) -> None: ...

    def plugin_did_end_responding(self, plugin: ShortcutInputChatPlugin) -> None: ...


class ShortcutInputChatPlugin:
    """Run `/shortcutInput(name) input` and feed the result back into the chat.

    The delegate is held through a weak reference: the plugin never keeps it
    alive and silently skips notifications once it is gone.
    """

    command: ClassVar[str] = COMMAND_KEYWORD
    name: ClassVar[str] = "Shortcut Input"

    def __init__(
        self,
        chat_service: ChatService,
        delegate: PluginLifecycleObserver | None = None,
        *,
        settings: Settings | None = None,
        runner: ProcessRunner | None = None,
        hooks: HookRuntime | None = None,
        controller: InvocationController | None = None,
    ) -> None:
        self._chat_service = chat_service
        self._delegate_ref = weakref.ref(delegate) if delegate is not None else None
        self._controller = controller or InvocationController(
            settings or get_settings(),
            runner=runner,
            hooks=hooks,
        )

    @property
    def delegate(self) -> PluginLifecycleObserver | None:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    async def send(self, content: str, original_message: str = "") -> Outcome | None:
        """Handle the text that followed the command keyword."""

        _ = original_message
        self._notify("plugin_did_start")
        self._notify("plugin_did_start_responding")
        try:
            latest = self._chat_service.history.last()
            outcome = await self._controller.invoke(content, latest.content if latest is not None else None)
            await self._publish(outcome)
            return outcome
        finally:
            self._notify("plugin_did_end_responding")
            self._notify("plugin_did_end")

    async def cancel(self) -> None:
        await self._controller.cancel()

    async def stop_responding(self) -> None:
        await self._controller.cancel()

    async def _publish(self, outcome: Outcome | None) -> None:
        if isinstance(outcome, ErrorOutcome):
            self._reply(outcome.description)
            return
        if isinstance(outcome, TextOutcome):
            try:
                await self._chat_service.send(outcome.text)
            except Exception as exc:
                logger.warning("plugin.send_failed error={}", exc)
                self._reply(str(exc) or type(exc).__name__)

    def _reply(self, content: str) -> None:
        reply = ChatMessage(id=new_message_id(self.command), role="assistant", content=content)
        self._chat_service.history.append(reply)

    def _notify(self, event: str) -> None:
        delegate = self.delegate
        if delegate is None:
            return
        try:
            getattr(delegate, event)(self)
        except Exception:
            logger.opt(exception=True).warning("plugin.delegate_failed event={}", event)
