"""Lifecycle controller: pre-run hook, validation and invoke guards.

Hook order for one command attempt::

    before_run_command -> validate -> [host synopsis checks]
        -> before_invoke -> invoke -> after_invoke

The host fires the invoke wrappers once per level of the command tree,
so a command at ``foo bar`` sees them N >= 1 times per invocation. The
controller counts calls and forwards only the first one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

import structlog

from site_commands.descriptor import CommandDescriptor
from site_commands.errors import ValidationRejected
from site_commands.hooks import Args, AssocArgs, CommandHooks, Options

logger = structlog.get_logger()


class LifecyclePhase(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


@dataclass
class LifecycleState:
    """Mutable lifecycle bookkeeping for one registered command.

    Counters are never reset, so within one process the user's
    before/after-invoke hooks run for the first invocation only.
    """

    phase: LifecyclePhase = LifecyclePhase.IDLE
    before_invoke_calls: int = 0
    after_invoke_calls: int = 0


class LifecycleController:
    """Sequences the lifecycle hooks of one command definition."""

    def __init__(
        self,
        descriptor: CommandDescriptor,
        hooks: CommandHooks,
        state: LifecycleState | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._hooks = hooks
        self._state = state if state is not None else LifecycleState()

    @property
    def state(self) -> LifecycleState:
        return self._state

    def matches(self, args: Args) -> bool:
        """Whether positional ``args`` address this command (token prefix)."""
        path = self._descriptor.path
        return tuple(args[: len(path)]) == path

    def on_pre_run(self, args: Args, assoc_args: AssocArgs, options: Options) -> None:
        """Handle the host's global ``before_run_command`` event.

        Events for other commands are ignored without side effects.

        Raises:
            ValidationRejected: If ``validate`` returns False.
        """
        if not self.matches(args):
            return

        command = self._descriptor.name
        actual_args = list(args[len(self._descriptor.path) :])
        self._state.phase = LifecyclePhase.VALIDATING

        logger.debug("before_run_command", command=command)
        self._hooks.before_run_command(args, assoc_args, options)

        logger.debug("custom_validation_started", command=command)
        if not self._hooks.validate(actual_args, assoc_args, options):
            self._state.phase = LifecyclePhase.REJECTED
            logger.debug("custom_validation_failed", command=command)
            raise ValidationRejected(self._descriptor.usage)

        self._state.phase = LifecyclePhase.ACCEPTED

    def wrapped_before_invoke(self) -> None:
        """Host-facing before-invoke slot; forwards the first call only."""
        previous = self._state.before_invoke_calls
        self._state.before_invoke_calls += 1
        if previous == 0:
            logger.debug("before_invoke", command=self._descriptor.name)
            self._hooks.before_invoke()

    def wrapped_after_invoke(self) -> None:
        """Host-facing after-invoke slot; forwards the first call only."""
        previous = self._state.after_invoke_calls
        self._state.after_invoke_calls += 1
        if previous == 0:
            logger.debug("after_invoke", command=self._descriptor.name)
            self._hooks.after_invoke()
