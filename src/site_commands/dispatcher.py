"""Multisite dispatcher: run a single-site handler on one or all sites."""

from __future__ import annotations

from typing import Any

import structlog

from site_commands.descriptor import ALL_SITES_FLAG, CommandDescriptor
from site_commands.errors import UnauthorizedFlag
from site_commands.hooks import Args, AssocArgs, CommandHooks
from site_commands.sites.base import SiteDirectory
from site_commands.utils import get_flag_value, run_on_all_sites

logger = structlog.get_logger()


class MultisiteDispatcher:
    """Invoke entry point registered with the host for one command.

    Without the all-sites flag the handler runs once in the current
    context. With it, the handler runs once per site returned by the
    command's ``site_query``; the first failing site stops the fan-out.
    """

    def __init__(
        self,
        descriptor: CommandDescriptor,
        hooks: CommandHooks,
        sites: SiteDirectory,
        *,
        flag: str = ALL_SITES_FLAG,
    ) -> None:
        self._descriptor = descriptor
        self._hooks = hooks
        self._sites = sites
        self._flag = flag

    def __call__(self, args: Args, assoc_args: AssocArgs) -> Any:
        return self.invoke_multisite(args, assoc_args)

    def invoke_multisite(self, args: Args, assoc_args: AssocArgs) -> Any:
        """Dispatch to ``invoke``, fanning out when the flag is set.

        Returns:
            The handler's return value for a single-context run, or the
            number of sites visited for a fan-out.

        Raises:
            UnauthorizedFlag: Flag set on a command that does not allow it.
            ConfigurationError: The site query is not iterable.
        """
        if not get_flag_value(assoc_args, self._flag):
            return self._hooks.invoke(args, assoc_args)

        if not self._descriptor.allow_all_sites:
            raise UnauthorizedFlag(self._flag, self._descriptor.name)

        logger.info("all_sites_invoke", command=self._descriptor.name)
        return run_on_all_sites(
            self._hooks.invoke,
            args,
            assoc_args,
            self._descriptor.site_query,
            self._sites,
        )
