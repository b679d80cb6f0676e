"""Command registrar: wire descriptors and hooks into the host."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from site_commands.descriptor import ALL_SITES_FLAG, CommandDescriptor
from site_commands.dispatcher import MultisiteDispatcher
from site_commands.hooks import CommandHooks
from site_commands.host.base import BEFORE_RUN_COMMAND, CommandHost
from site_commands.lifecycle import LifecycleController, LifecycleState
from site_commands.sites.base import SiteDirectory
from site_commands.utils import is_cli_running

logger = structlog.get_logger()


@dataclass(frozen=True)
class RegisteredCommand:
    """Handles to everything created for one registered command."""

    descriptor: CommandDescriptor
    controller: LifecycleController
    dispatcher: MultisiteDispatcher
    state: LifecycleState


class CommandRegistrar:
    """Registers commands with a host, provided the CLI is running.

    Each registration gets its own :class:`LifecycleState`, so two
    commands (or two test instances of one command) never share the
    before/after-invoke counters.
    """

    def __init__(
        self,
        host: CommandHost,
        sites: SiteDirectory,
        *,
        is_active: Callable[[], bool] = is_cli_running,
        all_sites_flag: str = ALL_SITES_FLAG,
    ) -> None:
        self._host = host
        self._sites = sites
        self._is_active = is_active
        self._all_sites_flag = all_sites_flag
        self._commands: list[RegisteredCommand] = []

    @property
    def commands(self) -> list[RegisteredCommand]:
        return list(self._commands)

    def register(
        self,
        descriptor: CommandDescriptor,
        hooks: CommandHooks | object,
    ) -> RegisteredCommand | None:
        """Expose the command to the host under ``descriptor.path``.

        Args:
            descriptor: Static command metadata.
            hooks: A :class:`CommandHooks`, or any object whose methods
                provide them (see :meth:`CommandHooks.from_object`).

        Returns:
            The registered command, or None when the CLI is not running
            (nothing is registered in that case).
        """
        if not self._is_active():
            logger.debug("registration_skipped", command=descriptor.name)
            return None

        if not isinstance(hooks, CommandHooks):
            hooks = CommandHooks.from_object(hooks)

        if descriptor.allow_all_sites:
            descriptor = descriptor.with_all_sites_flag(self._all_sites_flag)

        state = LifecycleState()
        controller = LifecycleController(descriptor, hooks, state)
        dispatcher = MultisiteDispatcher(
            descriptor, hooks, self._sites, flag=self._all_sites_flag
        )

        self._host.add_command(
            descriptor.path,
            dispatcher,
            before_invoke=controller.wrapped_before_invoke,
            after_invoke=controller.wrapped_after_invoke,
            shortdesc=descriptor.shortdesc,
            longdesc=descriptor.longdesc,
            synopsis=descriptor.synopsis,
        )
        self._host.add_hook(BEFORE_RUN_COMMAND, controller.on_pre_run)

        registered = RegisteredCommand(
            descriptor=descriptor,
            controller=controller,
            dispatcher=dispatcher,
            state=state,
        )
        self._commands.append(registered)
        logger.debug("command_registered", command=descriptor.name)
        return registered
