"""Plugin host that wires hooks, settings and the shortcut chat plugin."""

from __future__ import annotations

from typing import cast

import pluggy
from loguru import logger

from shortcut_input.config import Settings, get_settings
from shortcut_input.hook_runtime import HookRuntime
from shortcut_input.history import ChatService
from shortcut_input.hookspecs import SHORTCUT_HOOK_NAMESPACE, ShortcutHookSpecs
from shortcut_input.parser import detect_plugin_command
from shortcut_input.plugin import PluginLifecycleObserver, ShortcutInputChatPlugin
from shortcut_input.process import ProcessRunner, ShellProcessRunner
from shortcut_input.types import Outcome

ENTRYPOINT_GROUP = "shortcut_input"


class ShortcutFramework:
    """Minimal host: extensions register hooks, the framework builds plugins."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._plugin_manager = pluggy.PluginManager(SHORTCUT_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(ShortcutHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)

    @property
    def hooks(self) -> HookRuntime:
        return self._hook_runtime

    def register(self, plugin: object, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def load_entrypoints(self) -> int:
        """Register extensions published under the `shortcut_input` entry point group."""

        try:
            return self._plugin_manager.load_setuptools_entrypoints(ENTRYPOINT_GROUP)
        except Exception:
            logger.opt(exception=True).warning("framework.entrypoints_failed group={}", ENTRYPOINT_GROUP)
            return 0

    def create_runner(self) -> ProcessRunner:
        """Create a process runner from hooks; fallback to the shell runner."""

        provided = self._hook_runtime.call_first_sync("provide_process_runner")
        if self._is_runner_like(provided):
            return cast(ProcessRunner, provided)
        return ShellProcessRunner(terminate_grace=self.settings.terminate_grace)

    def create_plugin(
        self,
        chat_service: ChatService,
        delegate: PluginLifecycleObserver | None = None,
    ) -> ShortcutInputChatPlugin:
        return ShortcutInputChatPlugin(
            chat_service,
            delegate,
            settings=self.settings,
            runner=self.create_runner(),
            hooks=self._hook_runtime,
        )

    async def handle_line(self, plugin: ShortcutInputChatPlugin, line: str) -> Outcome | None:
        """Route one chat line to the plugin when it carries the plugin's command."""

        content = detect_plugin_command(line, plugin.command)
        if content is None:
            logger.debug("framework.unrouted line={!r}", line)
            return None
        return await plugin.send(content, line)

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()

    @staticmethod
    def _is_runner_like(candidate: object) -> bool:
        if candidate is None:
            return False
        return all(callable(getattr(candidate, name, None)) for name in ("run", "terminate"))
