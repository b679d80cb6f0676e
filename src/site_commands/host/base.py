"""What the command lifecycle needs from the host CLI runtime."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from site_commands.descriptor import SynopsisEntry
from site_commands.hooks import InvokeFn, InvokeHookFn

BEFORE_RUN_COMMAND = "before_run_command"

HookCallback = Callable[..., Any]


class CommandHost(Protocol):
    """Host runtime that parses argv and executes registered commands.

    Fatal errors travel as :class:`~site_commands.errors.FatalCommandError`
    exceptions; the host's run loop reports them and exits non-zero.
    """

    def add_command(
        self,
        path: Sequence[str],
        invoke: InvokeFn,
        *,
        before_invoke: InvokeHookFn | None = None,
        after_invoke: InvokeHookFn | None = None,
        shortdesc: str = "",
        longdesc: str = "",
        synopsis: Sequence[SynopsisEntry] = (),
    ) -> None: ...

    def add_hook(self, event: str, callback: HookCallback) -> None: ...
