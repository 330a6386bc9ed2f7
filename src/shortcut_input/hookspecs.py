"""Pluggy hook namespace and shortcut-input hook specifications."""

from __future__ import annotations

import pluggy

from shortcut_input.process import ProcessRunner
from shortcut_input.types import InvocationRequest, Outcome

SHORTCUT_HOOK_NAMESPACE = "shortcut_input"
hookspec = pluggy.HookspecMarker(SHORTCUT_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(SHORTCUT_HOOK_NAMESPACE)


class ShortcutHookSpecs:
    """Hook contract for shortcut-input extensions."""

    @hookspec(firstresult=True)
    def provide_process_runner(self) -> ProcessRunner | None:
        """Provide the runner used to launch the shell process."""

    @hookspec
    def on_invocation_start(self, request: InvocationRequest) -> None:
        """Observe an invocation after its command was parsed."""

    @hookspec
    def on_invocation_end(self, request: InvocationRequest, outcome: Outcome | None) -> None:
        """Observe the terminal outcome of an invocation."""

    @hookspec
    def on_error(self, stage: str, error: Exception, request: InvocationRequest | None) -> None:
        """Observe failures from any stage."""
