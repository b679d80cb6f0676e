"""Console entry point: boot the host, load commands, run argv.

Usage::

    site-commands <command path...> [args...] [--all-sites] [--debug]
    site-commands help [command path...]
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Sequence

import structlog

from site_commands.config import Settings, get_settings
from site_commands.host.local import LocalHost
from site_commands.logging_config import configure_logging
from site_commands.registrar import CommandRegistrar
from site_commands.sites.base import SiteDirectory
from site_commands.sites.sql import SqlSiteDirectory, make_session_factory

logger = structlog.get_logger()


def load_commands(
    registrar: CommandRegistrar,
    host: LocalHost,
    sites: SiteDirectory,
    modules: Sequence[str],
) -> None:
    """Import each command module and call its ``register(registrar, host, sites)``."""
    for module_path in modules:
        module = importlib.import_module(module_path)
        register = getattr(module, "register", None)
        if register is None:
            raise ImportError(f"Command module '{module_path}' has no register()")
        register(registrar, host, sites)
        logger.debug("command_module_loaded", module=module_path)


def build(
    settings: Settings,
    sites: SiteDirectory | None = None,
    host: LocalHost | None = None,
) -> tuple[LocalHost, CommandRegistrar]:
    """Create host and registrar and load the configured command modules.

    Being inside the console entry point means the CLI is running, so
    registration is always active here regardless of ``CLI_MODE``.
    """
    host = host or LocalHost()
    if sites is None:
        sites = SqlSiteDirectory(make_session_factory(settings.database_url))
    registrar = CommandRegistrar(
        host,
        sites,
        is_active=lambda: True,
        all_sites_flag=settings.all_sites_flag,
    )
    load_commands(registrar, host, sites, settings.command_modules)
    return host, registrar


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command attempt and return its exit code."""
    settings = get_settings()
    configure_logging(environment=settings.environment, log_level=settings.log_level)
    host, _ = build(settings)
    return host.run(sys.argv[1:] if argv is None else argv)
