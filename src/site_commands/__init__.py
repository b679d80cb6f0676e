"""Structured command lifecycle and multisite fan-out for CLI hosts."""

from site_commands.descriptor import (
    ALL_SITES_FLAG,
    CommandDescriptor,
    SiteQuery,
    SynopsisEntry,
    SynopsisType,
)
from site_commands.dispatcher import MultisiteDispatcher
from site_commands.errors import (
    ConfigurationError,
    FatalCommandError,
    HandlerError,
    UnauthorizedFlag,
    ValidationRejected,
)
from site_commands.hooks import CommandHooks
from site_commands.lifecycle import LifecycleController, LifecyclePhase, LifecycleState
from site_commands.registrar import CommandRegistrar, RegisteredCommand
from site_commands.utils import get_flag_value, is_cli_running, run_on_all_sites

__all__ = [
    "ALL_SITES_FLAG",
    "CommandDescriptor",
    "CommandHooks",
    "CommandRegistrar",
    "ConfigurationError",
    "FatalCommandError",
    "HandlerError",
    "LifecycleController",
    "LifecyclePhase",
    "LifecycleState",
    "MultisiteDispatcher",
    "RegisteredCommand",
    "SiteQuery",
    "SynopsisEntry",
    "SynopsisType",
    "UnauthorizedFlag",
    "ValidationRejected",
    "get_flag_value",
    "is_cli_running",
    "run_on_all_sites",
]
