"""Helpers shared by commands: flag lookup, site fan-out, CLI detection."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from site_commands.config import Settings, get_settings
from site_commands.descriptor import SiteQuery
from site_commands.errors import ConfigurationError
from site_commands.hooks import Args, AssocArgs
from site_commands.sites.base import SiteDirectory

logger = structlog.get_logger()


def is_cli_running(settings: Settings | None = None) -> bool:
    """Whether this process is hosting commands (``CLI_MODE``)."""
    return (settings or get_settings()).cli_mode


def get_flag_value(assoc_args: AssocArgs, flag: str, default: Any = None) -> Any:
    """Return the flag value or, if it is absent, ``default``.

    Presence decides, not truthiness: a negated flag (``--no-quiet``
    yields ``False``) or an explicit ``None`` is returned as is.
    """
    if flag in assoc_args:
        return assoc_args[flag]
    return default


def run_on_all_sites(
    callback: Callable[[Args, AssocArgs], Any],
    args: Args,
    assoc_args: AssocArgs,
    site_query: SiteQuery,
    sites: SiteDirectory,
) -> int:
    """Run ``callback`` once per matching site, each inside that site's context.

    The active site is restored after every call, including the one that
    raised; the first failure stops the loop and propagates.

    Args:
        callback: Single-site handler, called as ``callback(args, assoc_args)``.
        args: Positional args passed through unchanged.
        assoc_args: Assoc args passed through unchanged.
        site_query: Filter for the sites to visit.
        sites: Directory that enumerates and switches sites.

    Returns:
        Number of sites the callback completed on.

    Raises:
        ConfigurationError: If the query yields a count instead of a list
            (nothing is switched or called in that case).
    """
    result = sites.query(site_query)
    if isinstance(result, int):
        raise ConfigurationError(
            f"Site query returned a count ({result}) instead of a site list; "
            "remove count=True from the command's site_query"
        )

    logger.debug("fan_out_started", site_count=len(result))
    visited = 0
    for site in result:
        with sites.switched_to(site), structlog.contextvars.bound_contextvars(
            site_id=str(site.id), site_name=site.name
        ):
            callback(args, assoc_args)
        visited += 1
    logger.debug("fan_out_finished", site_count=visited)
    return visited
