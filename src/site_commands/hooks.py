"""Capability interface a command supplies to the lifecycle.

A command is a set of named callables rather than a subclass: only
``invoke`` is required, every other hook has a neutral default.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger()

Args = Sequence[str]
AssocArgs = Mapping[str, Any]
Options = Mapping[str, Any]

InvokeFn = Callable[[Args, AssocArgs], Any]
ValidateFn = Callable[[Args, AssocArgs, Options], bool]
BeforeRunFn = Callable[[Args, AssocArgs, Options], None]
InvokeHookFn = Callable[[], None]


def always_valid(args: Args, assoc_args: AssocArgs, options: Options) -> bool:
    """Default validation gate: accept everything."""
    logger.debug("custom_validation_skipped")
    return True


def noop_before_run(args: Args, assoc_args: AssocArgs, options: Options) -> None:
    return None


def noop() -> None:
    return None


@dataclass(frozen=True)
class CommandHooks:
    """Override points of one command.

    Attributes:
        invoke: Handler run once per (site) context with the positional
            args left after the command path, and the assoc args.
        validate: Custom argument check; returning False aborts the
            command with its usage text. Runs *before* the host's own
            synopsis checks, so required args may still be missing.
        before_run_command: Called with the full positional args
            (command path included) before validation.
        before_invoke: Called once per invocation before ``invoke``.
        after_invoke: Called once per invocation after ``invoke``.
    """

    invoke: InvokeFn
    validate: ValidateFn = always_valid
    before_run_command: BeforeRunFn = noop_before_run
    before_invoke: InvokeHookFn = noop
    after_invoke: InvokeHookFn = noop

    @classmethod
    def from_object(cls, command: object) -> CommandHooks:
        """Collect hooks from an object's methods.

        ``invoke`` falls back to ``__call__`` so a plain callable class
        works as a command. Missing optional hooks keep their defaults.

        Raises:
            TypeError: If the object has neither ``invoke`` nor ``__call__``.
        """
        invoke = getattr(command, "invoke", None)
        if invoke is None and callable(command):
            invoke = command
        if invoke is None:
            raise TypeError(f"{type(command).__name__} does not define invoke()")

        overrides: dict[str, Callable[..., Any]] = {}
        for name in ("validate", "before_run_command", "before_invoke", "after_invoke"):
            hook = getattr(command, name, None)
            if hook is not None:
                overrides[name] = hook
        return cls(invoke=invoke, **overrides)
